"""Domain errors for member fees."""

from core.domain.errors import ConflictError, ErrorCode, NotFoundError


class FeeDefinitionNotFoundError(NotFoundError):
    def __init__(self, definition_id: str) -> None:
        super().__init__(code=ErrorCode.FEE_DEFINITION_NOT_FOUND, message="Fee not found")
        self.definition_id = definition_id


class FeeAssignmentNotFoundError(NotFoundError):
    def __init__(self, assignment_id: str) -> None:
        super().__init__(code=ErrorCode.FEE_ASSIGNMENT_NOT_FOUND, message="Fee assignment not found")
        self.assignment_id = assignment_id


class FeeClosedError(ConflictError):
    """Raised when paying an assignment that was waived or canceled."""

    def __init__(self, assignment_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.FEE_CLOSED,
            message=f"Fee assignment is {status} and cannot take payments",
        )
        self.assignment_id = assignment_id
        self.status = status


class ChargeAlreadyAppliedError(ConflictError):
    """Raised when a provider charge id is replayed with a different assignment or amount."""

    def __init__(self, provider_charge_id: str) -> None:
        super().__init__(
            code=ErrorCode.CHARGE_ALREADY_APPLIED,
            message="This charge was already recorded for a different payment",
            field="provider_charge_id",
        )
        self.provider_charge_id = provider_charge_id
