"""Fee service - member dues, assignments and offline payments.

Follows the same append-and-derive pattern as donations: payments are only
ever inserted and an assignment's status is recomputed from their sum.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable

from core.domain.errors import (
    EnsembleNotFoundError,
    InvalidAmountError,
    MemberNotFoundError,
    MissingFieldError,
    TransactionFailedError,
)
from core.domain.money import Money
from fees.domain import (
    FeeAssignment,
    FeeAssignmentId,
    FeeDefinition,
    FeeDefinitionDraft,
    FeeDefinitionId,
    FeePaymentDraft,
    MemberBalance,
    MemberFeeSummary,
    PaymentOutcome,
    derive_status,
)
from fees.domain.errors import (
    ChargeAlreadyAppliedError,
    FeeAssignmentNotFoundError,
    FeeClosedError,
    FeeDefinitionNotFoundError,
)
from fees.stores.interfaces import FeeStore
from roster.domain import EnsembleId, MemberId
from roster.stores.interfaces import RosterDirectory

logger = logging.getLogger(__name__)


class FeeService:
    def __init__(
        self,
        store: FeeStore,
        roster: RosterDirectory,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._roster = roster
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def create_fee_definition(
        self,
        ensemble_id: str,
        name: str,
        amount_cents: int,
        description: str = "",
        default_due_date: date | None = None,
    ) -> FeeDefinition:
        parsed = EnsembleId.parse(ensemble_id, "ensemble_id")
        if not (name or "").strip():
            raise MissingFieldError("name")
        if amount_cents is None or amount_cents < 0:
            raise InvalidAmountError("amount_cents", "Fee amount cannot be negative")
        with self._store.unit_of_work("create_fee_definition"):
            if not self._roster.ensemble_exists(parsed):
                raise EnsembleNotFoundError(ensemble_id)
            definition = self._store.create_definition(
                FeeDefinitionDraft(
                    ensemble_id=parsed,
                    name=name.strip(),
                    amount=Money(amount_cents),
                    description=description,
                    default_due_date=default_due_date,
                )
            )
        logger.info("Fee %s created for ensemble %s", definition.id, parsed)
        return definition

    def assign_fee(
        self,
        definition_id: str,
        member_ids: list[str],
        amount_cents: int | None = None,
        due_date: date | None = None,
        notes: str = "",
    ) -> list[FeeAssignment]:
        """Invoice a fee to several members at once; all or nothing.

        Raises:
            FeeDefinitionNotFoundError: If the fee does not exist.
            MemberNotFoundError: If a member is absent or not in the fee's ensemble.
        """
        parsed = FeeDefinitionId.parse(definition_id, "definition_id")
        members = [MemberId.parse(member_id, "member_ids") for member_id in member_ids]
        if not members:
            raise MissingFieldError("member_ids")
        if amount_cents is not None and amount_cents < 0:
            raise InvalidAmountError("amount_cents", "Fee amount cannot be negative")

        with self._store.unit_of_work("assign_fee"):
            definition = self._store.get_definition(parsed)
            if definition is None:
                raise FeeDefinitionNotFoundError(definition_id)
            for member_id in members:
                member = self._roster.get_member(member_id)
                if member is None or member.ensemble_id != definition.ensemble_id:
                    raise MemberNotFoundError(str(member_id))
            assignments = self._store.insert_assignments(
                definition,
                members,
                amount=Money(amount_cents) if amount_cents is not None else definition.amount,
                due_date=due_date or definition.default_due_date,
                notes=notes,
            )
        logger.info("Fee %s assigned to %d member(s)", parsed, len(assignments))
        return assignments

    def record_manual_fee_payment(
        self,
        assignment_id: str,
        amount_cents: int,
        provider: str = "offline",
        provider_charge_id: str | None = None,
        notes: str = "",
    ) -> PaymentOutcome:
        """Append a payment and recompute the assignment status from all payments.

        A repeated ``provider_charge_id`` for the same assignment and amount
        returns the payment recorded the first time and changes nothing.

        Raises:
            FeeAssignmentNotFoundError: If the assignment does not exist.
            InvalidAmountError: If the amount is not positive.
            FeeClosedError: If the assignment was waived or canceled.
            ChargeAlreadyAppliedError: If the charge id was recorded for another
                assignment or amount.
        """
        parsed = FeeAssignmentId.parse(assignment_id, "assignment_id")
        if amount_cents is None or amount_cents <= 0:
            raise InvalidAmountError("amount_cents")

        with self._store.unit_of_work("record_manual_fee_payment"):
            assignment = self._store.get_assignment(parsed, for_update=True)
            if assignment is None:
                raise FeeAssignmentNotFoundError(assignment_id)
            if assignment.is_closed:
                raise FeeClosedError(assignment_id, assignment.status)
            payment = self._store.insert_payment(
                FeePaymentDraft(
                    assignment_id=parsed,
                    amount=Money(amount_cents),
                    paid_at=self._clock(),
                    provider=provider or "offline",
                    provider_charge_id=provider_charge_id,
                    notes=notes,
                )
            )
            if payment is None:
                if not provider_charge_id:
                    logger.error("Fee payment for assignment %s was not inserted", parsed)
                    raise TransactionFailedError("record_manual_fee_payment")
                existing = self._store.get_payment_by_charge(provider_charge_id)
                if existing is None or existing.assignment_id != parsed or existing.amount.cents != amount_cents:
                    logger.warning(
                        "Charge %s replayed against assignment %s with a different payment",
                        provider_charge_id,
                        parsed,
                    )
                    raise ChargeAlreadyAppliedError(provider_charge_id)
                logger.info("Fee payment %s already recorded", provider_charge_id)
                return PaymentOutcome(payment=existing, assignment=assignment, duplicate=True)
            status = derive_status(
                assignment.status, self._store.paid_cents(parsed), assignment.net.cents
            )
            assignment = self._store.set_status(parsed, status)

        logger.info(
            "Fee payment %s of %s recorded for assignment %s, now %s",
            payment.id,
            payment.amount,
            parsed,
            assignment.status,
        )
        return PaymentOutcome(payment=payment, assignment=assignment)

    def member_fees(self, member_id: str) -> MemberFeeSummary:
        parsed = MemberId.parse(member_id, "member_id")
        if self._roster.get_member(parsed) is None:
            raise MemberNotFoundError(member_id)
        return MemberFeeSummary(member_id=parsed, lines=tuple(self._store.member_lines(parsed)))

    def list_fee_definitions(self, ensemble_id: str) -> list[FeeDefinition]:
        parsed = EnsembleId.parse(ensemble_id, "ensemble_id")
        if not self._roster.ensemble_exists(parsed):
            raise EnsembleNotFoundError(ensemble_id)
        return self._store.list_definitions(parsed)

    def ensemble_fee_summary(self, ensemble_id: str) -> list[MemberBalance]:
        """Owed, paid and balance for every member of the ensemble.

        Members without any assignment are listed with zero balances.
        """
        parsed = EnsembleId.parse(ensemble_id, "ensemble_id")
        if not self._roster.ensemble_exists(parsed):
            raise EnsembleNotFoundError(ensemble_id)
        totals = self._store.ensemble_totals(parsed)
        return [
            MemberBalance(member, *totals.get(member.id, (Money(0), Money(0))))
            for member in self._roster.members(parsed)
        ]
