"""Django ORM implementation of the FeeStore."""

from datetime import date

from django.db.models import F, Sum, Value
from django.db.models.functions import Coalesce

from core.db import insert_or_ignore, unit_of_work
from core.domain.money import Money
from fees import models
from fees.domain import (
    FeeAssignment,
    FeeAssignmentId,
    FeeDefinition,
    FeeDefinitionDraft,
    FeeDefinitionId,
    FeePayment,
    FeePaymentDraft,
    FeePaymentId,
    MemberFeeLine,
)
from fees.stores.interfaces import FeeStore
from roster.domain import EnsembleId, MemberId


def to_definition(row: models.FeeDefinition) -> FeeDefinition:
    return FeeDefinition(
        id=FeeDefinitionId(row.id),
        ensemble_id=EnsembleId(row.ensemble_id),
        name=row.name,
        description=row.description,
        amount=Money(row.amount_cents),
        default_due_date=row.default_due_date,
        active=row.active,
    )


def to_assignment(row: models.FeeAssignment) -> FeeAssignment:
    return FeeAssignment(
        id=FeeAssignmentId(row.id),
        definition_id=FeeDefinitionId(row.definition_id),
        ensemble_id=EnsembleId(row.ensemble_id),
        member_id=MemberId(row.roster_member_id),
        amount=Money(row.amount_cents),
        discount=Money(row.discount_cents),
        status=row.status,
        due_date=row.due_date,
        notes=row.notes,
    )


def to_payment(row: models.FeePayment) -> FeePayment:
    return FeePayment(
        id=FeePaymentId(row.id),
        assignment_id=FeeAssignmentId(row.assignment_id),
        amount=Money(row.amount_cents),
        provider=row.provider,
        provider_charge_id=row.provider_charge_id,
        notes=row.notes,
        paid_at=row.paid_at,
    )


class DjangoFeeStore(FeeStore):
    def unit_of_work(self, operation: str):
        return unit_of_work(operation)

    def create_definition(self, draft: FeeDefinitionDraft) -> FeeDefinition:
        row = models.FeeDefinition.objects.create(
            ensemble_id=draft.ensemble_id.value,
            name=draft.name,
            description=draft.description,
            amount_cents=draft.amount.cents,
            default_due_date=draft.default_due_date,
        )
        return to_definition(row)

    def list_definitions(self, ensemble_id: EnsembleId) -> list[FeeDefinition]:
        rows = models.FeeDefinition.objects.filter(ensemble_id=ensemble_id.value, active=True).order_by(
            "-created_at"
        )
        return [to_definition(row) for row in rows]

    def get_definition(self, definition_id: FeeDefinitionId) -> FeeDefinition | None:
        row = models.FeeDefinition.objects.filter(pk=definition_id.value).first()
        return to_definition(row) if row else None

    def insert_assignments(
        self,
        definition: FeeDefinition,
        member_ids: list[MemberId],
        amount: Money,
        due_date: date | None,
        notes: str,
    ) -> list[FeeAssignment]:
        rows = models.FeeAssignment.objects.bulk_create(
            [
                models.FeeAssignment(
                    definition_id=definition.id.value,
                    ensemble_id=definition.ensemble_id.value,
                    roster_member_id=member_id.value,
                    amount_cents=amount.cents,
                    due_date=due_date,
                    notes=notes,
                )
                for member_id in member_ids
            ]
        )
        return [to_assignment(row) for row in rows]

    def get_assignment(self, assignment_id: FeeAssignmentId, for_update: bool = False) -> FeeAssignment | None:
        rows = models.FeeAssignment.objects.filter(pk=assignment_id.value)
        if for_update:
            rows = rows.select_for_update()
        row = rows.first()
        return to_assignment(row) if row else None

    def insert_payment(self, draft: FeePaymentDraft) -> FeePayment | None:
        row = models.FeePayment(
            assignment_id=draft.assignment_id.value,
            amount_cents=draft.amount.cents,
            provider=draft.provider,
            provider_charge_id=draft.provider_charge_id or None,
            notes=draft.notes,
            paid_at=draft.paid_at,
        )
        if not insert_or_ignore([row]):
            return None
        return to_payment(row)

    def get_payment_by_charge(self, provider_charge_id: str) -> FeePayment | None:
        row = models.FeePayment.objects.filter(provider_charge_id=provider_charge_id).first()
        return to_payment(row) if row else None

    def paid_cents(self, assignment_id: FeeAssignmentId) -> int:
        total = models.FeePayment.objects.filter(assignment_id=assignment_id.value).aggregate(
            total=Sum("amount_cents")
        )["total"]
        return total or 0

    def set_status(self, assignment_id: FeeAssignmentId, status: str) -> FeeAssignment:
        row = models.FeeAssignment.objects.get(pk=assignment_id.value)
        if row.status != status:
            row.status = status
            row.save(update_fields=["status", "updated_at"])
        return to_assignment(row)

    def member_lines(self, member_id: MemberId) -> list[MemberFeeLine]:
        rows = (
            models.FeeAssignment.objects.filter(roster_member_id=member_id.value)
            .select_related("definition")
            .annotate(paid=Coalesce(Sum("payments__amount_cents"), Value(0)))
            .order_by("due_date", "created_at")
        )
        return [
            MemberFeeLine(
                assignment=to_assignment(row),
                fee_name=row.definition.name,
                paid=Money(row.paid),
            )
            for row in rows
        ]

    def ensemble_totals(self, ensemble_id: EnsembleId) -> dict[MemberId, tuple[Money, Money]]:
        # Owed and paid are summed separately; joining payments would repeat assignment rows.
        owed = dict(
            models.FeeAssignment.objects.filter(ensemble_id=ensemble_id.value)
            .values("roster_member_id")
            .annotate(total=Sum(F("amount_cents") - F("discount_cents")))
            .order_by()
            .values_list("roster_member_id", "total")
        )
        paid = dict(
            models.FeePayment.objects.filter(assignment__ensemble_id=ensemble_id.value)
            .values("assignment__roster_member_id")
            .annotate(total=Sum("amount_cents"))
            .order_by()
            .values_list("assignment__roster_member_id", "total")
        )
        return {
            MemberId(member_id): (Money(total), Money(paid.get(member_id, 0)))
            for member_id, total in owed.items()
        }
