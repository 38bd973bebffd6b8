"""Payment confirmation processor.

Turns a successful-payment notification into exactly one ledger entry. The
payment processor may deliver the same notification many times and
concurrently; the unique ``payment_ref`` column decides which delivery
records the donation; every other delivery is a no-op.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from core.domain.errors import InvalidAmountError, MissingFieldError, ReconciliationWarning
from core.domain.money import Money
from fundraising.domain import (
    ActivityDraft,
    Campaign,
    CampaignId,
    ConfirmationEvent,
    ConfirmationResult,
    ConfirmationStatus,
    Donation,
    DonationDraft,
    Donor,
    DonorContact,
    Participant,
    ParticipantId,
)
from fundraising.domain.errors import DonorEmailRequiredError, DonorNameRequiredError
from fundraising.services.donor_service import DonorService
from fundraising.stores.interfaces import CampaignStore

logger = logging.getLogger(__name__)


class Unresolvable(Exception):
    """Confirmation metadata does not point at a campaign/participant."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PaymentConfirmationProcessor:
    def __init__(
        self,
        store: CampaignStore,
        donors: DonorService,
        on_donation_recorded: Callable[[Donation], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._donors = donors
        self._on_donation_recorded = on_donation_recorded
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def process(self, event: ConfirmationEvent) -> ConfirmationResult:
        """Record the donation carried by a confirmation event, at most once.

        Returns ``recorded`` the first time a payment_ref is seen,
        ``duplicate`` on every redelivery and ``unreconciled`` when the
        metadata cannot be attributed (the payment is queued for review).

        Raises:
            MissingFieldError: If the event has no payment reference.
            InvalidAmountError: If the amount is not positive.
            TransactionFailedError: If the datastore failed; safe to redeliver.
        """
        payment_ref = (event.payment_ref or "").strip()
        if not payment_ref:
            raise MissingFieldError("payment_ref")
        if event.amount_cents is None or event.amount_cents <= 0:
            raise InvalidAmountError("amount_cents")

        with self._store.unit_of_work("process_confirmation"):
            try:
                campaign, participant = self._resolve(event)
            except Unresolvable as exc:
                return self._unreconciled(payment_ref, event, exc.reason)

            donor = self._find_donor(event, campaign, payment_ref)

            now = self._clock()
            donation = self._store.insert_donation(
                DonationDraft(
                    amount=Money(event.amount_cents),
                    donated_at=now,
                    campaign_id=campaign.id,
                    participant_id=participant.id if participant else None,
                    ensemble_id=campaign.ensemble_id,
                    donor_id=donor.id if donor else None,
                    payment_ref=payment_ref,
                    currency=event.currency or "usd",
                    donor_name=event.donor_name,
                    donor_email=event.donor_email,
                    is_anonymous=event.is_anonymous,
                    message=event.message,
                )
            )
            if donation is None:
                logger.info("Payment %s already recorded, ignoring redelivery", payment_ref)
                return ConfirmationResult(status=ConfirmationStatus.DUPLICATE)

            if participant is not None:
                self._store.credit_participant(participant.id, donation.amount.cents, now)
            if donor is not None:
                self._donors.record_activity(
                    ActivityDraft(
                        donor_id=donor.id,
                        ensemble_id=donor.ensemble_id,
                        type="donation",
                        summary=f"Donated {donation.amount} to {campaign.name}",
                        details={"campaign_id": str(campaign.id), "payment_ref": payment_ref},
                        related_id=donation.id.value,
                    )
                )

        logger.info(
            "Donation %s of %s recorded for campaign %s (payment %s)",
            donation.id,
            donation.amount,
            campaign.id,
            payment_ref,
        )
        if self._on_donation_recorded is not None:
            self._on_donation_recorded(donation)
        return ConfirmationResult(status=ConfirmationStatus.RECORDED, donation_id=donation.id)

    def _resolve(self, event: ConfirmationEvent) -> tuple[Campaign, Participant | None]:
        if not event.campaign_id:
            raise Unresolvable("missing campaign_id")
        try:
            campaign_id = CampaignId.from_string(event.campaign_id)
        except ValueError as exc:
            raise Unresolvable("malformed campaign_id") from exc
        campaign = self._store.get_campaign(campaign_id)
        if campaign is None:
            raise Unresolvable("unknown campaign")
        if not event.participant_id:
            return campaign, None
        try:
            participant_id = ParticipantId.from_string(event.participant_id)
        except ValueError as exc:
            raise Unresolvable("malformed participant_id") from exc
        participant = self._store.get_participant(participant_id)
        if participant is None:
            raise Unresolvable("unknown participant")
        if participant.campaign_id != campaign.id:
            raise Unresolvable("participant is not enrolled in campaign")
        return campaign, participant

    def _find_donor(self, event: ConfirmationEvent, campaign: Campaign, payment_ref: str) -> Donor | None:
        """Donor linkage is optional; metadata that cannot form a donor leaves it unlinked."""
        if not event.donor_email or campaign.ensemble_id is None:
            return None
        try:
            return self._donors.find_or_create_donor(
                campaign.ensemble_id,
                event.donor_email,
                DonorContact.from_full_name(event.donor_name, event.donor_email),
            )
        except (DonorEmailRequiredError, DonorNameRequiredError) as exc:
            logger.warning("Payment %s recorded without a donor: %s", payment_ref, exc.message)
            return None

    def _unreconciled(self, payment_ref: str, event: ConfirmationEvent, reason: str) -> ConfirmationResult:
        queued = self._store.record_unreconciled(payment_ref, event.amount_cents, reason, event.payload)
        logger.warning(
            "Payment %s (%d cents) could not be reconciled: %s%s",
            payment_ref,
            event.amount_cents,
            reason,
            "" if queued else " (already queued)",
        )
        return ConfirmationResult(
            status=ConfirmationStatus.UNRECONCILED,
            warning=ReconciliationWarning(payment_ref=payment_ref, reason=reason),
        )
