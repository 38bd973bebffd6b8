"""Domain error codes shared by the ledger apps.

Errors are grouped into four raisable branches that the HTTP layer maps to
status codes. Only concrete subclasses are raised.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ID = "INVALID_ID"
    EMPTY_ORDER = "EMPTY_ORDER"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_WINDOW = "INVALID_WINDOW"
    NOTHING_TO_UPDATE = "NOTHING_TO_UPDATE"

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    PERFORMANCE_NOT_FOUND = "PERFORMANCE_NOT_FOUND"
    TICKET_TYPE_NOT_FOUND = "TICKET_TYPE_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    SALE_LINK_NOT_FOUND = "SALE_LINK_NOT_FOUND"
    DIRECTOR_NOT_FOUND = "DIRECTOR_NOT_FOUND"
    ENSEMBLE_NOT_FOUND = "ENSEMBLE_NOT_FOUND"
    CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    DONATION_NOT_FOUND = "DONATION_NOT_FOUND"
    DONOR_NOT_FOUND = "DONOR_NOT_FOUND"
    FEE_DEFINITION_NOT_FOUND = "FEE_DEFINITION_NOT_FOUND"
    FEE_ASSIGNMENT_NOT_FOUND = "FEE_ASSIGNMENT_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"

    CODE_EXHAUSTED = "CODE_EXHAUSTED"
    SOLD_OUT = "SOLD_OUT"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    EVENT_HAS_ORDERS = "EVENT_HAS_ORDERS"
    EVENT_WITHOUT_ENSEMBLE = "EVENT_WITHOUT_ENSEMBLE"
    DUPLICATE_DONOR_EMAIL = "DUPLICATE_DONOR_EMAIL"
    FEE_CLOSED = "FEE_CLOSED"
    CHARGE_ALREADY_APPLIED = "CHARGE_ALREADY_APPLIED"

    TRANSACTION_FAILED = "TRANSACTION_FAILED"

    UNRECONCILED_PAYMENT = "UNRECONCILED_PAYMENT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str
    field: str | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Missing or malformed input. Recoverable by the caller."""


class NotFoundError(DomainError):
    """A referenced entity does not exist."""


class ConflictError(DomainError):
    """A uniqueness or state conflict the caller cannot retry away."""


class TransactionFailedError(DomainError):
    """The datastore failed mid unit of work; everything was rolled back."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.TRANSACTION_FAILED,
            message="The operation could not be completed, please retry",
        )
        self.operation = operation


class InvalidIdError(ValidationError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {field} format",
            field=field,
        )


class InvalidAmountError(ValidationError):
    """Raised when a money amount is missing, zero or negative where not allowed."""

    def __init__(self, field: str, message: str = "Amount must be a positive number of cents") -> None:
        super().__init__(code=ErrorCode.INVALID_AMOUNT, message=message, field=field)


class MissingFieldError(ValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=f"{field} is required",
            field=field,
        )


class NothingToUpdateError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOTHING_TO_UPDATE,
            message="No valid fields to update",
        )


class DirectorNotFoundError(NotFoundError):
    def __init__(self, director_id: str) -> None:
        super().__init__(code=ErrorCode.DIRECTOR_NOT_FOUND, message="Director not found")
        self.director_id = director_id


class EnsembleNotFoundError(NotFoundError):
    def __init__(self, ensemble_id: str) -> None:
        super().__init__(code=ErrorCode.ENSEMBLE_NOT_FOUND, message="Ensemble not found")
        self.ensemble_id = ensemble_id


class MemberNotFoundError(NotFoundError):
    def __init__(self, member_id: str) -> None:
        super().__init__(code=ErrorCode.MEMBER_NOT_FOUND, message="Roster member not found")
        self.member_id = member_id


class CodeExhaustedError(ConflictError):
    """Raised when every generated code collided with an existing one."""

    def __init__(self, kind: str, attempts: int) -> None:
        super().__init__(
            code=ErrorCode.CODE_EXHAUSTED,
            message=f"Could not allocate a unique {kind}",
        )
        self.kind = kind
        self.attempts = attempts


@dataclass(frozen=True)
class ReconciliationWarning:
    """A payment confirmation that was acknowledged but could not be credited.

    Not raised: returned to the caller and persisted for manual review.
    """

    payment_ref: str
    reason: str
    code: ErrorCode = ErrorCode.UNRECONCILED_PAYMENT
