"""Unit tests for services against mocked stores.

These test validation order, error mapping and side effects without a
database.
Run with: pytest tests/test_services.py -v
"""

from contextlib import nullcontext
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from core.domain.errors import (
    DirectorNotFoundError,
    InvalidAmountError,
    InvalidIdError,
    MissingFieldError,
    NothingToUpdateError,
    TransactionFailedError,
)
from core.domain.money import FeeSchedule, Money
from fees.services import FeeService
from fees.stores.interfaces import FeeStore
from fundraising.domain import (
    Campaign,
    CampaignId,
    ConfirmationEvent,
    ConfirmationStatus,
    Donation,
    DonationId,
)
from fundraising.domain.errors import InvalidChoiceError, InvalidWindowError
from fundraising.services import (
    CampaignRequest,
    CampaignService,
    DonationService,
    DonorService,
    ManualDonationRequest,
    PaymentConfirmationProcessor,
)
from fundraising.stores.interfaces import CampaignStore, DonorStore
from roster.domain import DirectorId
from roster.stores.interfaces import RosterDirectory
from ticketing.domain import Buyer
from ticketing.domain.errors import AlreadyCheckedInError, EmptyOrderError, TicketNotFoundError
from ticketing.services import OrderRequest, OrderService
from ticketing.stores.interfaces import TicketingStore

NOW = datetime(2026, 5, 1, 19, 30, tzinfo=timezone.utc)


def mock_store(interface):
    """A spec'd mock whose unit_of_work lets exceptions through."""
    store = MagicMock(spec=interface)
    store.unit_of_work.return_value = nullcontext()
    return store


def make_campaign(ensemble_id=None) -> Campaign:
    return Campaign(
        id=CampaignId(uuid4()),
        director_id=DirectorId(uuid4()),
        ensemble_id=ensemble_id,
        name="Fall Drive",
        slug="fall-drive",
        description="",
        goal=None,
        per_student_goal=None,
        starts_at=None,
        ends_at=None,
        is_active=True,
        created_at=NOW,
    )


def make_donation(campaign: Campaign, cents: int = 2500) -> Donation:
    return Donation(
        id=DonationId(uuid4()),
        campaign_id=campaign.id,
        participant_id=None,
        ensemble_id=campaign.ensemble_id,
        donor_id=None,
        payment_ref="pi_1",
        amount=Money(cents),
        currency="usd",
        donor_name="",
        donor_email="",
        is_anonymous=False,
        message="",
        payment_method="card",
        donated_at=NOW,
    )


class TestPaymentConfirmationProcessor:
    """Tests for PaymentConfirmationProcessor."""

    @pytest.fixture
    def store(self):
        return mock_store(CampaignStore)

    @pytest.fixture
    def donor_store(self):
        return mock_store(DonorStore)

    @pytest.fixture
    def recorded(self):
        return []

    @pytest.fixture
    def processor(self, store, donor_store, recorded):
        donors = DonorService(donor_store, MagicMock(spec=RosterDirectory))
        return PaymentConfirmationProcessor(
            store, donors, on_donation_recorded=recorded.append, clock=lambda: NOW
        )

    def test_notifies_once_per_recorded_donation(self, processor, store, recorded):
        """The callback runs for the first delivery and not for a redelivery."""
        campaign = make_campaign()
        donation = make_donation(campaign)
        store.get_campaign.return_value = campaign
        store.insert_donation.side_effect = [donation, None]
        event = ConfirmationEvent(payment_ref="pi_1", amount_cents=2500, campaign_id=str(campaign.id))

        first = processor.process(event)
        second = processor.process(event)

        assert first.status is ConfirmationStatus.RECORDED
        assert first.donation_id == donation.id
        assert second.status is ConfirmationStatus.DUPLICATE
        assert recorded == [donation]
        store.credit_participant.assert_not_called()

    def test_donation_is_dated_by_clock(self, processor, store):
        campaign = make_campaign()
        store.get_campaign.return_value = campaign
        store.insert_donation.return_value = make_donation(campaign)

        processor.process(
            ConfirmationEvent(payment_ref="pi_1", amount_cents=2500, campaign_id=str(campaign.id))
        )

        draft = store.insert_donation.call_args.args[0]
        assert draft.donated_at == NOW
        assert draft.payment_ref == "pi_1"
        assert draft.amount == Money(2500)

    def test_unresolvable_is_queued_not_raised(self, processor, store, recorded):
        store.get_campaign.return_value = None
        store.record_unreconciled.return_value = True

        result = processor.process(
            ConfirmationEvent(payment_ref="pi_1", amount_cents=2500, campaign_id=str(uuid4()))
        )

        assert result.status is ConfirmationStatus.UNRECONCILED
        assert result.warning.reason == "unknown campaign"
        store.insert_donation.assert_not_called()
        assert recorded == []

    def test_blank_reference_rejected_before_store(self, processor, store):
        with pytest.raises(MissingFieldError):
            processor.process(ConfirmationEvent(payment_ref="  ", amount_cents=2500))
        store.unit_of_work.assert_not_called()

    def test_non_positive_amount_rejected(self, processor, store):
        with pytest.raises(InvalidAmountError):
            processor.process(ConfirmationEvent(payment_ref="pi_1", amount_cents=0))
        store.unit_of_work.assert_not_called()

    def test_store_failure_propagates(self, processor, store, recorded):
        campaign = make_campaign()
        store.get_campaign.return_value = campaign
        store.insert_donation.side_effect = TransactionFailedError("process_confirmation")

        with pytest.raises(TransactionFailedError):
            processor.process(
                ConfirmationEvent(payment_ref="pi_1", amount_cents=2500, campaign_id=str(campaign.id))
            )
        assert recorded == []


class TestCampaignService:
    """Tests for CampaignService."""

    @pytest.fixture
    def store(self):
        return mock_store(CampaignStore)

    @pytest.fixture
    def roster(self):
        return MagicMock(spec=RosterDirectory)

    def test_window_checked_before_store(self, store, roster):
        request = CampaignRequest(
            director_id=str(uuid4()),
            name="Fall Drive",
            starts_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
            ends_at=datetime(2026, 9, 1, tzinfo=timezone.utc),
        )

        with pytest.raises(InvalidWindowError):
            CampaignService(store, roster).create_campaign(request)
        store.insert_campaign.assert_not_called()

    def test_blank_name_raises(self, store, roster):
        with pytest.raises(MissingFieldError):
            CampaignService(store, roster).create_campaign(
                CampaignRequest(director_id=str(uuid4()), name="  ")
            )

    def test_unknown_director_raises(self, store, roster):
        roster.director_exists.return_value = False

        with pytest.raises(DirectorNotFoundError):
            CampaignService(store, roster).create_campaign(
                CampaignRequest(director_id=str(uuid4()), name="Fall Drive")
            )
        store.insert_campaign.assert_not_called()

    def test_campaign_without_ensemble_seeds_nobody(self, store, roster):
        roster.director_exists.return_value = True
        store.insert_campaign.return_value = make_campaign()
        store.get_participants.return_value = []

        detail = CampaignService(store, roster).create_campaign(
            CampaignRequest(director_id=str(uuid4()), name="Fall Drive")
        )

        assert detail.participants == ()
        store.seed_participants.assert_not_called()
        roster.active_members.assert_not_called()


class TestDonationService:
    """Tests for DonationService."""

    @pytest.fixture
    def store(self):
        return mock_store(CampaignStore)

    @pytest.fixture
    def service(self, store):
        roster = MagicMock(spec=RosterDirectory)
        roster.ensemble_exists.return_value = True
        donors = DonorService(mock_store(DonorStore), roster)
        return DonationService(store, donors, roster, clock=lambda: NOW)

    def test_dropped_insert_is_a_failure_not_a_duplicate(self, service, store):
        """A manual gift has no reference to collide on, so a missing row is an error."""
        store.insert_donation.return_value = None

        with pytest.raises(TransactionFailedError):
            service.record_manual_donation(ManualDonationRequest(ensemble_id=str(uuid4()), amount_cents=1500))
        store.credit_participant.assert_not_called()


class TestDonorService:
    """Tests for DonorService."""

    @pytest.fixture
    def service(self):
        return DonorService(mock_store(DonorStore), MagicMock(spec=RosterDirectory))

    def test_unknown_activity_type_raises(self, service):
        with pytest.raises(InvalidChoiceError):
            service.log_activity(str(uuid4()), "carrier_pigeon", "Sent a bird")

    def test_only_contact_fields_are_updatable(self, service):
        with pytest.raises(NothingToUpdateError):
            service.update_donor(str(uuid4()), {"lifetime_total_cents": 1})

    def test_invalid_id_raises(self, service):
        with pytest.raises(InvalidIdError):
            service.get_donor("42")


class TestOrderService:
    """Tests for OrderService."""

    @pytest.fixture
    def store(self):
        return mock_store(TicketingStore)

    @pytest.fixture
    def service(self, store):
        return OrderService(store, fees=FeeSchedule(rate=Decimal("0.03"), fixed=Money(30)), clock=lambda: NOW)

    def order(self, items, donation_cents=0) -> OrderRequest:
        return OrderRequest(
            event_id=str(uuid4()),
            performance_id=str(uuid4()),
            buyer=Buyer(name="Pat Parent", email="pat@example.org"),
            items=items,
            donation_cents=donation_cents,
        )

    def test_empty_order_raises(self, service, store):
        with pytest.raises(EmptyOrderError):
            service.create_order(self.order([]))
        store.unit_of_work.assert_not_called()

    def test_negative_donation_raises(self, service, store):
        with pytest.raises(InvalidAmountError):
            service.create_order(self.order([(str(uuid4()), 1)], donation_cents=-100))
        store.unit_of_work.assert_not_called()

    def test_second_check_in_conflicts(self, service, store):
        store.get_ticket.return_value = MagicMock()
        store.mark_checked_in.return_value = False

        with pytest.raises(AlreadyCheckedInError):
            service.check_in("spring-concert-abc234")
        store.mark_checked_in.assert_called_once_with("spring-concert-abc234", NOW)

    def test_unknown_ticket_raises(self, service, store):
        store.get_ticket.return_value = None

        with pytest.raises(TicketNotFoundError):
            service.check_in("nope")


class TestFeeService:
    """Tests for FeeService."""

    @pytest.fixture
    def store(self):
        return mock_store(FeeStore)

    @pytest.fixture
    def service(self, store):
        return FeeService(store, MagicMock(spec=RosterDirectory), clock=lambda: NOW)

    def test_non_positive_payment_raises(self, service):
        with pytest.raises(InvalidAmountError):
            service.record_manual_fee_payment(str(uuid4()), 0)

    def test_assignment_needs_members(self, service):
        with pytest.raises(MissingFieldError):
            service.assign_fee(str(uuid4()), [])

    def test_dropped_payment_without_charge_id_fails(self, service, store):
        store.get_assignment.return_value = MagicMock(is_closed=False)
        store.insert_payment.return_value = None

        with pytest.raises(TransactionFailedError):
            service.record_manual_fee_payment(str(uuid4()), 1000)
        store.get_payment_by_charge.assert_not_called()

    def test_blank_fee_name_raises(self, service):
        with pytest.raises(MissingFieldError):
            service.create_fee_definition(str(uuid4()), " ", 1000)
