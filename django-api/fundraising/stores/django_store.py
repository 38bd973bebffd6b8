"""Django ORM implementations of the CampaignStore and DonorStore."""

import logging
import operator
from datetime import datetime
from functools import reduce

from django.db.models import Case, F, Max, Min, Q, Sum, Value, When
from django.utils import timezone

from core.conf import ledger_setting, new_code
from core.db import insert_keyed_with_fresh_code, insert_or_ignore, unit_of_work
from core.domain.codes import slug_candidates
from core.domain.errors import CodeExhaustedError, TransactionFailedError
from core.domain.money import Money
from fundraising import models
from fundraising.domain import (
    ActivityDraft,
    ActivityId,
    Campaign,
    CampaignDraft,
    CampaignId,
    Donation,
    DonationDraft,
    DonationId,
    Donor,
    DonorActivity,
    DonorContact,
    DonorFilter,
    DonorId,
    DonorProfile,
    Participant,
    ParticipantId,
    Predicate,
)
from fundraising.domain.errors import DuplicateDonorEmailError
from fundraising.stores.interfaces import CampaignStore, DonorStore
from roster.domain import DirectorId, EnsembleId, Member, MemberId

logger = logging.getLogger(__name__)


def _money(cents: int | None) -> Money | None:
    return Money(cents) if cents is not None else None


def _cents(amount: Money | None) -> int | None:
    return amount.cents if amount is not None else None


def _value(entity_id):
    return entity_id.value if entity_id is not None else None


def to_campaign(row: models.Campaign) -> Campaign:
    return Campaign(
        id=CampaignId(row.id),
        director_id=DirectorId(row.director_id),
        ensemble_id=EnsembleId(row.ensemble_id) if row.ensemble_id else None,
        name=row.name,
        slug=row.slug,
        description=row.description,
        goal=_money(row.goal_cents),
        per_student_goal=_money(row.per_student_goal_cents),
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        is_active=row.is_active,
        created_at=row.created_at,
    )


def to_participant(row: models.CampaignParticipant) -> Participant:
    member = row.roster_member
    return Participant(
        id=ParticipantId(row.id),
        campaign_id=CampaignId(row.campaign_id),
        member_id=MemberId(row.roster_member_id),
        member_name=f"{member.first_name} {member.last_name}".strip(),
        token=row.token,
        personal_goal=_money(row.personal_goal_cents),
        total_raised=Money(row.total_raised_cents),
        last_donation_at=row.last_donation_at,
    )


def to_donation(row: models.Donation) -> Donation:
    return Donation(
        id=DonationId(row.id),
        campaign_id=CampaignId(row.campaign_id) if row.campaign_id else None,
        participant_id=ParticipantId(row.participant_id) if row.participant_id else None,
        ensemble_id=EnsembleId(row.ensemble_id) if row.ensemble_id else None,
        donor_id=DonorId(row.donor_id) if row.donor_id else None,
        payment_ref=row.payment_ref,
        amount=Money(row.amount_cents),
        currency=row.currency,
        donor_name=row.donor_name,
        donor_email=row.donor_email,
        is_anonymous=row.is_anonymous,
        message=row.message,
        payment_method=row.payment_method,
        donated_at=row.donated_at,
    )


def to_donor(row: models.Donor) -> Donor:
    return Donor(
        id=DonorId(row.id),
        ensemble_id=EnsembleId(row.ensemble_id),
        first_name=row.first_name,
        last_name=row.last_name,
        organization_name=row.organization_name,
        email=row.email,
        phone=row.phone,
        address_line1=row.address_line1,
        address_line2=row.address_line2,
        city=row.city,
        state=row.state,
        postal_code=row.postal_code,
        country=row.country,
        employer=row.employer,
        preferred_contact_method=row.preferred_contact_method,
        tags=tuple(row.tags or ()),
        notes=row.notes,
        lifetime_total=Money(row.lifetime_total_cents),
        ytd_total=Money(row.ytd_total_cents),
        first_donation_at=row.first_donation_at,
        last_donation_at=row.last_donation_at,
        created_at=row.created_at,
    )


def to_activity(row: models.DonorActivity) -> DonorActivity:
    return DonorActivity(
        id=ActivityId(row.id),
        donor_id=DonorId(row.donor_id),
        ensemble_id=EnsembleId(row.ensemble_id),
        type=row.type,
        summary=row.summary,
        details=row.details,
        related_id=row.related_id,
        created_at=row.created_at,
    )


def predicate_q(predicate: Predicate) -> Q:
    return reduce(
        operator.or_,
        (Q(**{f"{name}__{predicate.lookup}": predicate.value}) for name in predicate.fields),
    )


def order_expressions(ordering: tuple[str, ...]) -> list:
    expressions = []
    for name in ordering:
        if name.startswith("-"):
            expressions.append(F(name[1:]).desc(nulls_last=True))
        else:
            expressions.append(F(name).asc())
    return expressions


def start_of_year() -> datetime:
    return timezone.localtime().replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)


class DjangoCampaignStore(CampaignStore):
    def unit_of_work(self, operation: str):
        return unit_of_work(operation)

    def insert_campaign(self, draft: CampaignDraft) -> Campaign:
        attempts = ledger_setting("CODE_RETRY_ATTEMPTS")
        for slug in slug_candidates(draft.name, attempts, ledger_setting("CODE_SUFFIX_LENGTH")):
            row = models.Campaign(
                director_id=draft.director_id.value,
                ensemble_id=_value(draft.ensemble_id),
                name=draft.name,
                slug=slug,
                description=draft.description,
                goal_cents=_cents(draft.goal),
                per_student_goal_cents=_cents(draft.per_student_goal),
                starts_at=draft.starts_at,
                ends_at=draft.ends_at,
            )
            if insert_or_ignore([row]):
                return to_campaign(row)
            logger.warning("Campaign slug %s is taken", slug)
        raise CodeExhaustedError("campaign slug", attempts)

    def get_campaign(self, campaign_id: CampaignId) -> Campaign | None:
        row = models.Campaign.objects.filter(pk=campaign_id.value).first()
        return to_campaign(row) if row else None

    def seed_participants(self, campaign: Campaign, members: list[Member]) -> int:
        enrolled = set(
            models.CampaignParticipant.objects.filter(campaign_id=campaign.id.value).values_list(
                "roster_member_id", flat=True
            )
        )
        added = 0
        for member in members:
            if member.id.value in enrolled:
                continue
            if self._enroll(campaign, member) is not None:
                added += 1
        return added

    def _enroll(self, campaign: Campaign, member: Member) -> models.CampaignParticipant | None:
        def build() -> models.CampaignParticipant:
            return models.CampaignParticipant(
                campaign_id=campaign.id.value,
                roster_member_id=member.id.value,
                token=new_code(member.display_name),
                personal_goal_cents=_cents(campaign.per_student_goal),
            )

        def key_exists() -> bool:
            return models.CampaignParticipant.objects.filter(
                campaign_id=campaign.id.value, roster_member_id=member.id.value
            ).exists()

        return insert_keyed_with_fresh_code(build, key_exists, kind="participant token")

    def get_participants(self, campaign_id: CampaignId) -> list[Participant]:
        rows = (
            models.CampaignParticipant.objects.filter(campaign_id=campaign_id.value)
            .select_related("roster_member")
            .order_by("roster_member__last_name", "roster_member__first_name")
        )
        return [to_participant(row) for row in rows]

    def get_participant(self, participant_id: ParticipantId) -> Participant | None:
        row = (
            models.CampaignParticipant.objects.select_related("roster_member")
            .filter(pk=participant_id.value)
            .first()
        )
        return to_participant(row) if row else None

    def insert_donation(self, draft: DonationDraft) -> Donation | None:
        row = models.Donation(
            campaign_id=_value(draft.campaign_id),
            participant_id=_value(draft.participant_id),
            ensemble_id=_value(draft.ensemble_id),
            donor_id=_value(draft.donor_id),
            payment_ref=draft.payment_ref or None,
            amount_cents=draft.amount.cents,
            currency=draft.currency,
            donor_name=draft.donor_name,
            donor_email=draft.donor_email,
            is_anonymous=draft.is_anonymous,
            message=draft.message,
            payment_method=draft.payment_method,
            donated_at=draft.donated_at,
        )
        # the caller credits the participant with an increment
        row._participant_credited = True
        if not insert_or_ignore([row]):
            return None
        return to_donation(row)

    def get_donation(self, donation_id: DonationId) -> Donation | None:
        row = models.Donation.objects.filter(pk=donation_id.value).first()
        return to_donation(row) if row else None

    def credit_participant(self, participant_id: ParticipantId, amount_cents: int, at: datetime) -> None:
        models.CampaignParticipant.objects.filter(pk=participant_id.value).update(
            total_raised_cents=F("total_raised_cents") + amount_cents,
            last_donation_at=Case(
                When(last_donation_at__gt=at, then=F("last_donation_at")),
                default=Value(at),
            ),
            updated_at=timezone.now(),
        )

    def reattribute_donation(self, donation_id: DonationId, participant_id: ParticipantId) -> Donation:
        row = models.Donation.objects.get(pk=donation_id.value)
        row.participant_id = participant_id.value
        row.save(update_fields=["participant"])
        return to_donation(row)

    def recompute_participant(self, participant_id: ParticipantId) -> Participant | None:
        totals = models.Donation.objects.filter(participant_id=participant_id.value).aggregate(
            total=Sum("amount_cents"), last=Max("donated_at")
        )
        models.CampaignParticipant.objects.filter(pk=participant_id.value).update(
            total_raised_cents=totals["total"] or 0,
            last_donation_at=totals["last"],
            updated_at=timezone.now(),
        )
        return self.get_participant(participant_id)

    def set_donation_donor(self, donation_id: DonationId, donor_id: DonorId) -> Donation:
        row = models.Donation.objects.get(pk=donation_id.value)
        row.donor_id = donor_id.value
        row.save(update_fields=["donor"])
        return to_donation(row)

    def record_unreconciled(self, payment_ref: str, amount_cents: int, reason: str, payload: dict) -> bool:
        row = models.UnreconciledPayment(
            payment_ref=payment_ref,
            amount_cents=amount_cents,
            reason=reason,
            payload=payload,
        )
        return bool(insert_or_ignore([row]))


class DjangoDonorStore(DonorStore):
    def unit_of_work(self, operation: str):
        return unit_of_work(operation)

    def find_or_create_donor(self, ensemble_id: EnsembleId, email: str, contact: DonorContact) -> Donor:
        row = models.Donor(
            ensemble_id=ensemble_id.value,
            email=email,
            first_name=contact.first_name,
            last_name=contact.last_name,
            organization_name=contact.organization_name,
            phone=contact.phone,
        )
        if insert_or_ignore([row]):
            logger.info("Donor %s created for ensemble %s", row.pk, ensemble_id)
            return to_donor(row)
        existing = models.Donor.objects.filter(
            ensemble_id=ensemble_id.value, email__iexact=email
        ).first()
        if existing is None:
            raise TransactionFailedError("find_or_create_donor")
        return to_donor(existing)

    def get_donor(self, donor_id: DonorId) -> Donor | None:
        row = models.Donor.objects.filter(pk=donor_id.value).first()
        return to_donor(row) if row else None

    def get_profile(self, donor_id: DonorId, activity_limit: int) -> DonorProfile | None:
        row = models.Donor.objects.filter(pk=donor_id.value).first()
        if row is None:
            return None
        donations = row.donations.order_by("-donated_at")
        activities = row.activities.order_by("-created_at")[:activity_limit]
        return DonorProfile(
            donor=to_donor(row),
            donations=tuple(to_donation(donation) for donation in donations),
            activities=tuple(to_activity(activity) for activity in activities),
        )

    def list_donors(self, ensemble_id: EnsembleId, donor_filter: DonorFilter) -> list[Donor]:
        rows = models.Donor.objects.filter(ensemble_id=ensemble_id.value)
        for predicate in donor_filter.predicates():
            rows = rows.filter(predicate_q(predicate))
        rows = rows.order_by(*order_expressions(donor_filter.ordering))
        page = rows[donor_filter.offset : donor_filter.offset + donor_filter.limit]
        return [to_donor(row) for row in page]

    def update_donor(self, donor_id: DonorId, changes: dict) -> Donor | None:
        row = models.Donor.objects.filter(pk=donor_id.value).first()
        if row is None:
            return None
        if "email" in changes:
            changes = {**changes, "email": changes["email"] or None}
            email = changes["email"]
            if email and (
                models.Donor.objects.filter(ensemble_id=row.ensemble_id, email__iexact=email)
                .exclude(pk=row.pk)
                .exists()
            ):
                raise DuplicateDonorEmailError()
        for name, value in changes.items():
            setattr(row, name, list(value) if name == "tags" else value)
        row.save(update_fields=[*changes, "updated_at"])
        return to_donor(row)

    def add_activity(self, draft: ActivityDraft) -> DonorActivity:
        row = models.DonorActivity.objects.create(
            donor_id=draft.donor_id.value,
            ensemble_id=draft.ensemble_id.value,
            type=draft.type,
            summary=draft.summary,
            details=draft.details,
            related_id=draft.related_id,
        )
        return to_activity(row)

    def refresh_aggregates(self, donor_id: DonorId) -> None:
        totals = models.Donation.objects.filter(donor_id=donor_id.value).aggregate(
            lifetime=Sum("amount_cents"),
            ytd=Sum("amount_cents", filter=Q(donated_at__gte=start_of_year())),
            first=Min("donated_at"),
            last=Max("donated_at"),
        )
        models.Donor.objects.filter(pk=donor_id.value).update(
            lifetime_total_cents=totals["lifetime"] or 0,
            ytd_total_cents=totals["ytd"] or 0,
            first_donation_at=totals["first"],
            last_donation_at=totals["last"],
            updated_at=timezone.now(),
        )
