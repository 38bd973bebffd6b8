"""Donation service - manual ledger entries and re-attribution."""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable

from core.domain.errors import EnsembleNotFoundError, InvalidAmountError, TransactionFailedError
from core.domain.money import Money
from fundraising.domain import (
    ActivityDraft,
    CampaignId,
    Donation,
    DonationDraft,
    DonationId,
    DonorContact,
    DonorId,
    Participant,
    ParticipantId,
)
from fundraising.domain.errors import (
    CampaignNotFoundError,
    DonationNotFoundError,
    DonorNotFoundError,
    InvalidChoiceError,
    ParticipantNotFoundError,
)
from fundraising.domain.models import PAYMENT_METHODS
from fundraising.services.donor_service import DonorService
from fundraising.stores.interfaces import CampaignStore
from roster.domain import EnsembleId
from roster.stores.interfaces import RosterDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManualDonationRequest:
    """A cash/check gift entered by staff. It has no external payment reference."""

    ensemble_id: str
    amount_cents: int
    payment_method: str = "cash"
    campaign_id: str | None = None
    participant_id: str | None = None
    donor_email: str = ""
    donor_name: str = ""
    organization_name: str = ""
    is_anonymous: bool = False
    message: str = ""
    donated_at: datetime | None = None


class DonationService:
    def __init__(
        self,
        store: CampaignStore,
        donors: DonorService,
        roster: RosterDirectory,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._donors = donors
        self._roster = roster
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def record_manual_donation(self, request: ManualDonationRequest) -> Donation:
        """Append an offline gift to the ledger.

        When attributed to a participant the participant total grows by the
        amount in the same unit of work.

        Raises:
            InvalidIdError: If an id is not a valid UUID.
            InvalidAmountError: If the amount is not positive.
            InvalidChoiceError: If the payment method is unknown.
            EnsembleNotFoundError, CampaignNotFoundError, ParticipantNotFoundError:
                If a referenced entity is absent or belongs elsewhere.
            TransactionFailedError: If the datastore did not store the donation.
        """
        ensemble_id = EnsembleId.parse(request.ensemble_id, "ensemble_id")
        if request.amount_cents is None or request.amount_cents <= 0:
            raise InvalidAmountError("amount_cents")
        if request.payment_method not in PAYMENT_METHODS:
            raise InvalidChoiceError("payment_method", f"Unknown payment method '{request.payment_method}'")
        campaign_id = (
            CampaignId.parse(request.campaign_id, "campaign_id") if request.campaign_id else None
        )
        participant_id = (
            ParticipantId.parse(request.participant_id, "participant_id")
            if request.participant_id
            else None
        )
        donated_at = request.donated_at or self._clock()

        with self._store.unit_of_work("record_manual_donation"):
            if not self._roster.ensemble_exists(ensemble_id):
                raise EnsembleNotFoundError(str(ensemble_id))

            participant = None
            if participant_id is not None:
                participant = self._store.get_participant(participant_id)
                if participant is None or (campaign_id and participant.campaign_id != campaign_id):
                    raise ParticipantNotFoundError(str(participant_id))
                campaign_id = participant.campaign_id
            if campaign_id is not None:
                campaign = self._store.get_campaign(campaign_id)
                if campaign is None or campaign.ensemble_id != ensemble_id:
                    raise CampaignNotFoundError(str(campaign_id))

            donor = None
            if request.donor_email.strip():
                contact = DonorContact.from_full_name(request.donor_name, request.donor_email)
                if request.organization_name:
                    contact = replace(contact, organization_name=request.organization_name)
                donor = self._donors.find_or_create_donor(ensemble_id, request.donor_email, contact)

            donation = self._store.insert_donation(
                DonationDraft(
                    amount=Money(request.amount_cents),
                    donated_at=donated_at,
                    campaign_id=campaign_id,
                    participant_id=participant_id,
                    ensemble_id=ensemble_id,
                    donor_id=donor.id if donor else None,
                    donor_name=request.donor_name or request.organization_name,
                    donor_email=request.donor_email.strip(),
                    is_anonymous=request.is_anonymous,
                    message=request.message,
                    payment_method=request.payment_method,
                )
            )
            if donation is None:
                # No payment_ref to collide on, so the row was dropped by another constraint.
                logger.error("Manual donation for ensemble %s was not inserted", ensemble_id)
                raise TransactionFailedError("record_manual_donation")
            if participant is not None:
                self._store.credit_participant(participant.id, donation.amount.cents, donated_at)
            if donor is not None:
                self._donors.record_activity(
                    ActivityDraft(
                        donor_id=donor.id,
                        ensemble_id=ensemble_id,
                        type="donation",
                        summary=f"{request.payment_method.title()} donation of {donation.amount}",
                        details={"payment_method": request.payment_method},
                        related_id=donation.id.value,
                    )
                )

        logger.info(
            "Manual %s donation %s of %s recorded for ensemble %s",
            request.payment_method,
            donation.id,
            donation.amount,
            ensemble_id,
        )
        return donation

    def move_donation(self, donation_id: str, participant_id: str) -> tuple[Donation, list[Participant]]:
        """Re-attribute a donation to another participant of the same campaign.

        Both participants' totals are rebuilt from the ledger.
        """
        parsed_donation = DonationId.parse(donation_id, "donation_id")
        parsed_participant = ParticipantId.parse(participant_id, "participant_id")
        with self._store.unit_of_work("move_donation"):
            donation = self._store.get_donation(parsed_donation)
            if donation is None:
                raise DonationNotFoundError(donation_id)
            target = self._store.get_participant(parsed_participant)
            if target is None or donation.campaign_id is None or target.campaign_id != donation.campaign_id:
                raise ParticipantNotFoundError(participant_id)
            previous = donation.participant_id
            if previous == target.id:
                return donation, [target]
            donation = self._store.reattribute_donation(parsed_donation, target.id)
            touched = [pid for pid in (previous, target.id) if pid is not None]
            participants = [self._store.recompute_participant(pid) for pid in touched]
        logger.info("Donation %s moved from %s to %s", parsed_donation, previous, target.id)
        return donation, [participant for participant in participants if participant is not None]

    def link_donor(self, donation_id: str, donor_id: str) -> Donation:
        """Attribute a donation to a donor of the same ensemble.

        Aggregates of the new and any previous donor are recomputed.
        """
        parsed_donation = DonationId.parse(donation_id, "donation_id")
        parsed_donor = DonorId.parse(donor_id, "donor_id")
        with self._store.unit_of_work("link_donor"):
            donation = self._store.get_donation(parsed_donation)
            if donation is None:
                raise DonationNotFoundError(donation_id)
            donor = self._donors.find(parsed_donor)
            if donor is None or donor.ensemble_id != donation.ensemble_id:
                raise DonorNotFoundError(donor_id)
            if donation.donor_id == donor.id:
                return donation
            donation = self._store.set_donation_donor(parsed_donation, donor.id)
            self._donors.record_activity(
                ActivityDraft(
                    donor_id=donor.id,
                    ensemble_id=donor.ensemble_id,
                    type="donation",
                    summary=f"Linked donation of {donation.amount}",
                    related_id=donation.id.value,
                )
            )
        logger.info("Donation %s linked to donor %s", parsed_donation, parsed_donor)
        return donation
