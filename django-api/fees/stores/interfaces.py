"""Store interface for member fees."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date

from core.domain.money import Money
from fees.domain import (
    FeeAssignment,
    FeeAssignmentId,
    FeeDefinition,
    FeeDefinitionDraft,
    FeeDefinitionId,
    FeePayment,
    FeePaymentDraft,
    MemberFeeLine,
)
from roster.domain import EnsembleId, MemberId


class FeeStore(ABC):
    @abstractmethod
    def unit_of_work(self, operation: str) -> AbstractContextManager:
        ...

    @abstractmethod
    def create_definition(self, draft: FeeDefinitionDraft) -> FeeDefinition:
        ...

    @abstractmethod
    def list_definitions(self, ensemble_id: EnsembleId) -> list[FeeDefinition]:
        """Active fee definitions of an ensemble, newest first."""
        ...

    @abstractmethod
    def get_definition(self, definition_id: FeeDefinitionId) -> FeeDefinition | None:
        ...

    @abstractmethod
    def insert_assignments(
        self,
        definition: FeeDefinition,
        member_ids: list[MemberId],
        amount: Money,
        due_date: date | None,
        notes: str,
    ) -> list[FeeAssignment]:
        ...

    @abstractmethod
    def get_assignment(self, assignment_id: FeeAssignmentId, for_update: bool = False) -> FeeAssignment | None:
        ...

    @abstractmethod
    def insert_payment(self, draft: FeePaymentDraft) -> FeePayment | None:
        """Append a payment. Returns None if its provider_charge_id was already recorded."""
        ...

    @abstractmethod
    def get_payment_by_charge(self, provider_charge_id: str) -> FeePayment | None:
        ...

    @abstractmethod
    def paid_cents(self, assignment_id: FeeAssignmentId) -> int:
        ...

    @abstractmethod
    def set_status(self, assignment_id: FeeAssignmentId, status: str) -> FeeAssignment:
        ...

    @abstractmethod
    def member_lines(self, member_id: MemberId) -> list[MemberFeeLine]:
        """Every assignment of a member with its fee name and amount paid."""
        ...

    @abstractmethod
    def ensemble_totals(self, ensemble_id: EnsembleId) -> dict[MemberId, tuple[Money, Money]]:
        """Net amount owed and amount paid per member, for members with any assignment."""
        ...
