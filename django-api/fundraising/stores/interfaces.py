"""Store interfaces for campaigns, the donation ledger and donors.

Services depend on these abstractions, never on the ORM.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from fundraising.domain import (
    ActivityDraft,
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
)
from roster.domain import EnsembleId, Member


class CampaignStore(ABC):
    """Campaigns, participants and the donation ledger."""

    @abstractmethod
    def unit_of_work(self, operation: str) -> AbstractContextManager:
        ...

    @abstractmethod
    def insert_campaign(self, draft: CampaignDraft) -> Campaign:
        """Insert a campaign under the first free slug derived from its name.

        Raises:
            CodeExhaustedError: If every slug candidate was taken.
        """
        ...

    @abstractmethod
    def get_campaign(self, campaign_id: CampaignId) -> Campaign | None:
        ...

    @abstractmethod
    def seed_participants(self, campaign: Campaign, members: list[Member]) -> int:
        """Enroll members not yet in the campaign. Returns how many were added."""
        ...

    @abstractmethod
    def get_participants(self, campaign_id: CampaignId) -> list[Participant]:
        ...

    @abstractmethod
    def get_participant(self, participant_id: ParticipantId) -> Participant | None:
        ...

    @abstractmethod
    def insert_donation(self, draft: DonationDraft) -> Donation | None:
        """Append a donation. Returns None if its payment_ref was already recorded."""
        ...

    @abstractmethod
    def get_donation(self, donation_id: DonationId) -> Donation | None:
        ...

    @abstractmethod
    def credit_participant(self, participant_id: ParticipantId, amount_cents: int, at: datetime) -> None:
        """Atomically add a freshly recorded donation to the participant's total."""
        ...

    @abstractmethod
    def reattribute_donation(self, donation_id: DonationId, participant_id: ParticipantId) -> Donation:
        ...

    @abstractmethod
    def recompute_participant(self, participant_id: ParticipantId) -> Participant | None:
        """Rebuild the participant aggregate from its donations."""
        ...

    @abstractmethod
    def set_donation_donor(self, donation_id: DonationId, donor_id: DonorId) -> Donation:
        ...

    @abstractmethod
    def record_unreconciled(self, payment_ref: str, amount_cents: int, reason: str, payload: dict) -> bool:
        """Queue a payment for manual review. Returns False if already queued."""
        ...


class DonorStore(ABC):
    """Donor records, their activity timeline and donation aggregates."""

    @abstractmethod
    def unit_of_work(self, operation: str) -> AbstractContextManager:
        ...

    @abstractmethod
    def find_or_create_donor(self, ensemble_id: EnsembleId, email: str, contact: DonorContact) -> Donor:
        """Return the ensemble's donor for this email (case-insensitive), creating it if needed.

        Safe under concurrent calls: exactly one row exists per (ensemble, email).
        """
        ...

    @abstractmethod
    def get_donor(self, donor_id: DonorId) -> Donor | None:
        ...

    @abstractmethod
    def get_profile(self, donor_id: DonorId, activity_limit: int) -> DonorProfile | None:
        ...

    @abstractmethod
    def list_donors(self, ensemble_id: EnsembleId, donor_filter: DonorFilter) -> list[Donor]:
        ...

    @abstractmethod
    def update_donor(self, donor_id: DonorId, changes: dict) -> Donor | None:
        ...

    @abstractmethod
    def add_activity(self, draft: ActivityDraft) -> DonorActivity:
        ...

    @abstractmethod
    def refresh_aggregates(self, donor_id: DonorId) -> None:
        """Recompute lifetime, year-to-date and first/last donation from the ledger."""
        ...
