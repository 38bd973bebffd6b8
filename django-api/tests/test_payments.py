"""API tests for payment confirmations.

Run with: pytest tests/test_payments.py -v
"""

from uuid import uuid4

import pytest

from fundraising.models import CampaignParticipant, Donation, Donor, DonorActivity, UnreconciledPayment

URL = "/api/payments/confirmations"


def confirmation(
    campaign_id=None, participant_id=None, payment_ref="pi_3Nabc", amount_cents=2500, **metadata
) -> dict:
    if campaign_id is not None:
        metadata["campaign_id"] = campaign_id
    if participant_id is not None:
        metadata["participant_id"] = participant_id
    return {"payment_ref": payment_ref, "amount_cents": amount_cents, "metadata": metadata}


@pytest.mark.django_db
class TestPaymentConfirmation:
    """Tests for POST /api/payments/confirmations"""

    def test_redelivered_confirmation_records_once(self, api_client, campaign):
        """Given the same confirmation twice, records one donation and credits once."""
        participant = campaign["participants"][0]
        payload = confirmation(
            campaign["campaign"]["id"],
            participant["id"],
            donor_name="Grace Adams",
            donor_email="grace@example.org",
        )

        first = api_client.post(URL, payload, format="json")
        second = api_client.post(URL, payload, format="json")

        assert first.status_code == 200
        assert first.json()["status"] == "recorded"
        assert first.json()["donation_id"]
        assert second.status_code == 200
        assert second.json() == {"status": "duplicate", "donation_id": None}
        assert Donation.objects.count() == 1
        row = CampaignParticipant.objects.get(pk=participant["id"])
        assert row.total_raised_cents == 2500
        assert row.last_donation_at is not None

    def test_donor_is_created_and_credited(self, api_client, campaign):
        payload = confirmation(
            campaign["campaign"]["id"],
            campaign["participants"][0]["id"],
            donor_name="Grace Adams",
            donor_email="grace@example.org",
        )

        api_client.post(URL, payload, format="json")
        api_client.post(URL, payload, format="json")

        donor = Donor.objects.get()
        assert (donor.first_name, donor.last_name) == ("Grace", "Adams")
        assert donor.lifetime_total_cents == 2500
        assert donor.ytd_total_cents == 2500
        assert DonorActivity.objects.filter(donor=donor, type="donation").count() == 1

    def test_returning_donor_matched_case_insensitively(self, api_client, campaign):
        campaign_id = campaign["campaign"]["id"]
        api_client.post(
            URL,
            confirmation(
                campaign_id, payment_ref="pi_1", donor_email="grace@example.org", donor_name="Grace"
            ),
            format="json",
        )

        api_client.post(
            URL,
            confirmation(
                campaign_id, payment_ref="pi_2", donor_email="Grace@Example.org", donor_name="Grace"
            ),
            format="json",
        )

        assert Donor.objects.count() == 1
        assert Donor.objects.get().lifetime_total_cents == 5000

    def test_unusable_donor_metadata_still_records_donation(self, api_client, campaign):
        """Given a donor email with no usable name, records the gift without a donor."""
        participant = campaign["participants"][0]
        payload = confirmation(
            campaign["campaign"]["id"], participant["id"], donor_email="@example.org"
        )

        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "recorded"
        assert Donation.objects.get().donor_id is None
        assert Donor.objects.count() == 0
        assert CampaignParticipant.objects.get(pk=participant["id"]).total_raised_cents == 2500

    def test_campaign_level_gift_credits_no_participant(self, api_client, campaign):
        response = api_client.post(URL, confirmation(campaign["campaign"]["id"]), format="json")

        assert response.json()["status"] == "recorded"
        donation = Donation.objects.get()
        assert donation.participant_id is None
        assert donation.ensemble_id is not None
        assert not CampaignParticipant.objects.filter(total_raised_cents__gt=0).exists()

    def test_missing_campaign_is_queued_for_review(self, api_client, db):
        """Given no campaign in the metadata, acknowledges with a warning and records nothing."""
        response = api_client.post(URL, confirmation(), format="json")

        assert response.status_code == 200
        assert response.json()["status"] == "unreconciled"
        assert response.json()["warning"] == {
            "code": "UNRECONCILED_PAYMENT",
            "payment_ref": "pi_3Nabc",
            "reason": "missing campaign_id",
        }
        assert Donation.objects.count() == 0
        queued = UnreconciledPayment.objects.get()
        assert queued.amount_cents == 2500
        assert queued.payload["payment_ref"] == "pi_3Nabc"

    def test_unreconciled_redelivery_queued_once(self, api_client, db):
        payload = confirmation(str(uuid4()))

        api_client.post(URL, payload, format="json")
        response = api_client.post(URL, payload, format="json")

        assert response.json()["warning"]["reason"] == "unknown campaign"
        assert UnreconciledPayment.objects.count() == 1

    def test_participant_from_other_campaign_is_unreconciled(self, api_client, director, ensemble, campaign):
        other = api_client.post(
            "/api/campaigns",
            {"director_id": str(director.id), "ensemble_id": str(ensemble.id), "name": "Spring Drive"},
            format="json",
        ).json()

        response = api_client.post(
            URL,
            confirmation(campaign["campaign"]["id"], other["participants"][0]["id"]),
            format="json",
        )

        assert response.json()["status"] == "unreconciled"
        assert response.json()["warning"]["reason"] == "participant is not enrolled in campaign"
        assert Donation.objects.count() == 0

    def test_malformed_participant_is_unreconciled(self, api_client, campaign):
        response = api_client.post(
            URL, confirmation(campaign["campaign"]["id"], "not-a-uuid"), format="json"
        )

        assert response.json()["warning"]["reason"] == "malformed participant_id"

    @pytest.mark.parametrize(
        "payload",
        [
            {"amount_cents": 2500},
            {"payment_ref": "pi_1", "amount_cents": 0},
            {"payment_ref": "pi_1", "amount_cents": "lots"},
            {"payment_ref": "", "amount_cents": 2500},
        ],
    )
    def test_malformed_confirmation_returns_400(self, api_client, db, payload):
        response = api_client.post(URL, payload, format="json")

        assert response.status_code == 400
        assert Donation.objects.count() == 0
        assert UnreconciledPayment.objects.count() == 0
