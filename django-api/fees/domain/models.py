"""Domain models for member fees.

Django ORM models are in fees/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime

from core.domain.money import Money
from fees.domain.value_objects import FeeAssignmentId, FeeDefinitionId, FeePaymentId
from roster.domain import EnsembleId, Member, MemberId

CLOSED_STATUSES = frozenset({"waived", "canceled"})


def derive_status(current: str, paid_cents: int, net_cents: int) -> str:
    """Assignment status implied by the payments recorded against it.

    Waived and canceled assignments keep their status.
    """
    if current in CLOSED_STATUSES:
        return current
    if paid_cents >= net_cents:
        return "paid"
    if paid_cents > 0:
        return "partial"
    return "invoiced"


@dataclass(frozen=True)
class FeeDefinition:
    id: FeeDefinitionId
    ensemble_id: EnsembleId
    name: str
    description: str
    amount: Money
    default_due_date: date | None
    active: bool


@dataclass(frozen=True)
class FeeDefinitionDraft:
    ensemble_id: EnsembleId
    name: str
    amount: Money
    description: str = ""
    default_due_date: date | None = None


@dataclass(frozen=True)
class FeeAssignment:
    id: FeeAssignmentId
    definition_id: FeeDefinitionId
    ensemble_id: EnsembleId
    member_id: MemberId
    amount: Money
    discount: Money
    status: str
    due_date: date | None
    notes: str

    @property
    def net(self) -> Money:
        return Money(max(self.amount.cents - self.discount.cents, 0))

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES


@dataclass(frozen=True)
class FeePayment:
    id: FeePaymentId
    assignment_id: FeeAssignmentId
    amount: Money
    provider: str
    provider_charge_id: str | None
    notes: str
    paid_at: datetime


@dataclass(frozen=True)
class FeePaymentDraft:
    assignment_id: FeeAssignmentId
    amount: Money
    paid_at: datetime
    provider: str = "offline"
    provider_charge_id: str | None = None
    notes: str = ""


@dataclass(frozen=True)
class PaymentOutcome:
    payment: FeePayment
    assignment: FeeAssignment
    duplicate: bool = False


@dataclass(frozen=True)
class MemberFeeLine:
    assignment: FeeAssignment
    fee_name: str
    paid: Money

    @property
    def balance_cents(self) -> int:
        # Negative when overpaid.
        return self.assignment.net.cents - self.paid.cents


@dataclass(frozen=True)
class MemberFeeSummary:
    member_id: MemberId
    lines: tuple[MemberFeeLine, ...]

    @property
    def total_assigned(self) -> Money:
        return Money(sum(line.assignment.amount.cents for line in self.lines))

    @property
    def total_paid(self) -> Money:
        return Money(sum(line.paid.cents for line in self.lines))

    @property
    def total_balance_cents(self) -> int:
        return sum(line.balance_cents for line in self.lines)


@dataclass(frozen=True)
class MemberBalance:
    """One member's standing across every fee of an ensemble."""

    member: Member
    owed: Money
    paid: Money

    @property
    def balance_cents(self) -> int:
        return self.owed.cents - self.paid.cents
