"""Domain models for campaigns, the donation ledger and donors.

These are pure domain objects with no API input rules.
Django ORM models are in fundraising/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from core.domain.errors import ReconciliationWarning
from core.domain.money import Money
from fundraising.domain.errors import DonorNameRequiredError
from fundraising.domain.value_objects import (
    ActivityId,
    CampaignId,
    DonationId,
    DonorId,
    ParticipantId,
)
from roster.domain import DirectorId, EnsembleId, MemberId

PAYMENT_METHODS = frozenset({"card", "cash", "check", "other"})

ACTIVITY_TYPES = frozenset({"donation", "ticket_purchase", "note", "email_sent", "manual_log"})

DONOR_UPDATABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "organization_name",
        "email",
        "phone",
        "address_line1",
        "address_line2",
        "city",
        "state",
        "postal_code",
        "country",
        "employer",
        "preferred_contact_method",
        "tags",
        "notes",
    }
)


@dataclass(frozen=True)
class Campaign:
    id: CampaignId
    director_id: DirectorId
    ensemble_id: EnsembleId | None
    name: str
    slug: str
    description: str
    goal: Money | None
    per_student_goal: Money | None
    starts_at: datetime | None
    ends_at: datetime | None
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Participant:
    """A roster member enrolled in a campaign.

    ``total_raised`` always equals the sum of the donations attributed to
    the participant.
    """

    id: ParticipantId
    campaign_id: CampaignId
    member_id: MemberId
    member_name: str
    token: str
    personal_goal: Money | None
    total_raised: Money
    last_donation_at: datetime | None


@dataclass(frozen=True)
class CampaignDetail:
    campaign: Campaign
    participants: tuple[Participant, ...] = ()


@dataclass(frozen=True)
class CampaignDraft:
    director_id: DirectorId
    ensemble_id: EnsembleId | None
    name: str
    description: str = ""
    goal: Money | None = None
    per_student_goal: Money | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None


@dataclass(frozen=True)
class Donation:
    id: DonationId
    campaign_id: CampaignId | None
    participant_id: ParticipantId | None
    ensemble_id: EnsembleId | None
    donor_id: DonorId | None
    payment_ref: str | None
    amount: Money
    currency: str
    donor_name: str
    donor_email: str
    is_anonymous: bool
    message: str
    payment_method: str
    donated_at: datetime


@dataclass(frozen=True)
class DonationDraft:
    """A donation about to be appended to the ledger."""

    amount: Money
    donated_at: datetime
    campaign_id: CampaignId | None = None
    participant_id: ParticipantId | None = None
    ensemble_id: EnsembleId | None = None
    donor_id: DonorId | None = None
    payment_ref: str | None = None
    currency: str = "usd"
    donor_name: str = ""
    donor_email: str = ""
    is_anonymous: bool = False
    message: str = ""
    payment_method: str = "card"


@dataclass(frozen=True)
class ConfirmationEvent:
    """A successful-payment notification from the payment processor."""

    payment_ref: str
    amount_cents: int
    currency: str = "usd"
    campaign_id: str | None = None
    participant_id: str | None = None
    donor_name: str = ""
    donor_email: str = ""
    is_anonymous: bool = False
    message: str = ""
    payload: dict = field(default_factory=dict)


class ConfirmationStatus(Enum):
    RECORDED = "recorded"
    DUPLICATE = "duplicate"
    UNRECONCILED = "unreconciled"


@dataclass(frozen=True)
class ConfirmationResult:
    status: ConfirmationStatus
    donation_id: DonationId | None = None
    warning: ReconciliationWarning | None = None


@dataclass(frozen=True)
class DonorContact:
    """Contact details used when a donor is created on first sight."""

    first_name: str = ""
    last_name: str = ""
    organization_name: str = ""
    phone: str = ""

    @classmethod
    def from_full_name(cls, full_name: str, email: str = "") -> "DonorContact":
        """Split ``"Jane Q Doe"`` into first and last name.

        Falls back to the local part of the email when no name was given.
        """
        parts = (full_name or "").split()
        if not parts:
            local_part = (email or "").split("@", 1)[0]
            return cls(first_name=local_part)
        return cls(first_name=parts[0], last_name=" ".join(parts[1:]))

    def require_name(self) -> None:
        if not (self.first_name.strip() or self.last_name.strip() or self.organization_name.strip()):
            raise DonorNameRequiredError()


@dataclass(frozen=True)
class Donor:
    id: DonorId
    ensemble_id: EnsembleId
    first_name: str
    last_name: str
    organization_name: str
    email: str | None
    phone: str
    address_line1: str
    address_line2: str
    city: str
    state: str
    postal_code: str
    country: str
    employer: str
    preferred_contact_method: str
    tags: tuple[str, ...]
    notes: str
    lifetime_total: Money
    ytd_total: Money
    first_donation_at: datetime | None
    last_donation_at: datetime | None
    created_at: datetime

    @property
    def display_name(self) -> str:
        return self.organization_name or f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class DonorActivity:
    id: ActivityId
    donor_id: DonorId
    ensemble_id: EnsembleId
    type: str
    summary: str
    details: dict
    related_id: UUID | None
    created_at: datetime


@dataclass(frozen=True)
class ActivityDraft:
    donor_id: DonorId
    ensemble_id: EnsembleId
    type: str
    summary: str
    details: dict = field(default_factory=dict)
    related_id: UUID | None = None


@dataclass(frozen=True)
class DonorProfile:
    """A donor with their donation history and recent activity."""

    donor: Donor
    donations: tuple[Donation, ...] = ()
    activities: tuple[DonorActivity, ...] = ()
