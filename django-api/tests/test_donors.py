"""Tests for manual donations, re-attribution and the donor book.

Run with: pytest tests/test_donors.py -v
"""

import random
from datetime import timedelta
from uuid import uuid4

import pytest
from django.db.models import Sum
from django.utils import timezone

from fundraising.models import CampaignParticipant, Donation, Donor, DonorActivity


def this_year(day: int):
    """Noon on January ``day`` of the current year."""
    return timezone.now().replace(month=1, day=day, hour=12, minute=0, second=0, microsecond=0)


def manual_donation(api_client, ensemble, amount_cents, **extra) -> dict:
    payload = {"ensemble_id": str(ensemble.id), "amount_cents": amount_cents}
    payload.update(extra)
    response = api_client.post("/api/donations/manual", payload, format="json")
    assert response.status_code == 201, response.json()
    return response.json()


def make_donor(ensemble, email, **fields) -> Donor:
    fields.setdefault("first_name", email.split("@")[0].title())
    return Donor.objects.create(ensemble=ensemble, email=email, **fields)


@pytest.mark.django_db
class TestManualDonation:
    """Tests for POST /api/donations/manual"""

    def test_aggregates_follow_the_ledger(self, api_client, ensemble):
        """Given gifts of $10 and $25 this year, donor totals are $35 with first/last dates."""
        earlier, later = this_year(2), this_year(3)
        manual_donation(
            api_client, ensemble, 1000, donor_email="grace@example.org", donated_at=earlier.isoformat()
        )
        manual_donation(
            api_client, ensemble, 2500, donor_email="grace@example.org", donated_at=later.isoformat()
        )

        donor = Donor.objects.get()
        assert donor.lifetime_total_cents == 3500
        assert donor.ytd_total_cents == 3500
        assert donor.first_donation_at == earlier
        assert donor.last_donation_at == later

    def test_last_year_counts_for_lifetime_only(self, api_client, ensemble):
        last_year = this_year(2) - timedelta(days=365)
        manual_donation(
            api_client, ensemble, 4000, donor_email="grace@example.org", donated_at=last_year.isoformat()
        )
        manual_donation(api_client, ensemble, 1500, donor_email="grace@example.org")

        donor = Donor.objects.get()
        assert donor.lifetime_total_cents == 5500
        assert donor.ytd_total_cents == 1500

    def test_credits_participant(self, api_client, ensemble, campaign):
        participant = campaign["participants"][1]

        data = manual_donation(
            api_client, ensemble, 2000, participant_id=participant["id"], payment_method="check"
        )

        assert data["campaign_id"] == campaign["campaign"]["id"]
        assert data["payment_method"] == "check"
        assert data["payment_ref"] is None
        assert CampaignParticipant.objects.get(pk=participant["id"]).total_raised_cents == 2000

    def test_organization_donor(self, api_client, ensemble):
        manual_donation(
            api_client,
            ensemble,
            10000,
            donor_email="giving@acme.example",
            organization_name="Acme Music Supply",
        )

        donor = Donor.objects.get()
        assert donor.organization_name == "Acme Music Supply"
        assert DonorActivity.objects.filter(donor=donor).count() == 1

    def test_campaign_of_other_ensemble_returns_404(self, api_client, other_director, campaign):
        from roster.models import Ensemble

        elsewhere = Ensemble.objects.create(director=other_director, name="Jazz Band")

        response = api_client.post(
            "/api/donations/manual",
            {
                "ensemble_id": str(elsewhere.id),
                "amount_cents": 1000,
                "campaign_id": campaign["campaign"]["id"],
            },
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CAMPAIGN_NOT_FOUND"
        assert Donation.objects.count() == 0

    @pytest.mark.parametrize(
        "override",
        [{"amount_cents": 0}, {"payment_method": "bitcoin"}, {"donor_email": "nope"}],
    )
    def test_invalid_body_returns_400(self, api_client, ensemble, override):
        payload = {"ensemble_id": str(ensemble.id), "amount_cents": 1000, **override}

        response = api_client.post("/api/donations/manual", payload, format="json")

        assert response.status_code == 400
        assert Donation.objects.count() == 0


@pytest.mark.django_db
class TestMoveDonation:
    """Tests for POST /api/donations/{donation_id}/move"""

    def test_both_participants_recomputed(self, api_client, ensemble, campaign):
        ava, ben = campaign["participants"][0], campaign["participants"][1]
        moved = manual_donation(api_client, ensemble, 1000, participant_id=ava["id"])
        manual_donation(api_client, ensemble, 2500, participant_id=ava["id"])

        response = api_client.post(
            f"/api/donations/{moved['id']}/move", {"participant_id": ben["id"]}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["donation"]["participant_id"] == ben["id"]
        totals = {p["id"]: p["total_raised_cents"] for p in response.json()["participants"]}
        assert totals == {ava["id"]: 2500, ben["id"]: 1000}

    def test_moving_to_same_participant_changes_nothing(self, api_client, ensemble, campaign):
        ava = campaign["participants"][0]
        donation = manual_donation(api_client, ensemble, 1000, participant_id=ava["id"])

        response = api_client.post(
            f"/api/donations/{donation['id']}/move", {"participant_id": ava["id"]}, format="json"
        )

        assert response.status_code == 200
        assert CampaignParticipant.objects.get(pk=ava["id"]).total_raised_cents == 1000

    def test_participant_of_other_campaign_returns_404(self, api_client, director, ensemble, campaign):
        other = api_client.post(
            "/api/campaigns",
            {"director_id": str(director.id), "ensemble_id": str(ensemble.id), "name": "Spring Drive"},
            format="json",
        ).json()
        donation = manual_donation(
            api_client, ensemble, 1000, participant_id=campaign["participants"][0]["id"]
        )

        response = api_client.post(
            f"/api/donations/{donation['id']}/move",
            {"participant_id": other["participants"][0]["id"]},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PARTICIPANT_NOT_FOUND"

    def test_unknown_donation_returns_404(self, api_client, campaign):
        response = api_client.post(
            f"/api/donations/{uuid4()}/move",
            {"participant_id": campaign["participants"][0]["id"]},
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DONATION_NOT_FOUND"


@pytest.mark.django_db
class TestLinkDonor:
    """Tests for POST /api/donations/{donation_id}/donor"""

    def test_linking_moves_aggregates_between_donors(self, api_client, ensemble):
        donation = manual_donation(api_client, ensemble, 3000, donor_email="first@example.org")
        second = make_donor(ensemble, "second@example.org")

        response = api_client.post(
            f"/api/donations/{donation['id']}/donor", {"donor_id": str(second.id)}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["donor_id"] == str(second.id)
        second.refresh_from_db()
        assert second.lifetime_total_cents == 3000
        first = Donor.objects.get(email="first@example.org")
        assert first.lifetime_total_cents == 0
        assert first.last_donation_at is None

    def test_donor_of_other_ensemble_returns_404(self, api_client, other_director, ensemble):
        from roster.models import Ensemble

        elsewhere = Ensemble.objects.create(director=other_director, name="Jazz Band")
        stranger = make_donor(elsewhere, "stranger@example.org")
        donation = manual_donation(api_client, ensemble, 1000)

        response = api_client.post(
            f"/api/donations/{donation['id']}/donor", {"donor_id": str(stranger.id)}, format="json"
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DONOR_NOT_FOUND"


@pytest.mark.django_db
class TestLedgerAggregates:
    """Aggregates stay equal to the ledger after arbitrary mutations."""

    def test_deleting_donation_recomputes_totals(self, api_client, ensemble, campaign):
        participant = campaign["participants"][0]
        kept = manual_donation(
            api_client, ensemble, 1000, participant_id=participant["id"], donor_email="g@example.org"
        )
        dropped = manual_donation(
            api_client, ensemble, 2500, participant_id=participant["id"], donor_email="g@example.org"
        )

        Donation.objects.get(pk=dropped["id"]).delete()

        donor = Donor.objects.get()
        assert donor.lifetime_total_cents == 1000
        assert donor.last_donation_at.isoformat().startswith(kept["donated_at"][:19])
        assert CampaignParticipant.objects.get(pk=participant["id"]).total_raised_cents == 1000

    def test_donation_saved_directly_credits_participant(self, ensemble, campaign):
        participant = CampaignParticipant.objects.get(pk=campaign["participants"][0]["id"])

        Donation.objects.create(
            campaign=participant.campaign,
            participant=participant,
            ensemble=ensemble,
            amount_cents=1200,
            donated_at=this_year(3),
        )

        participant.refresh_from_db()
        assert participant.total_raised_cents == 1200
        assert participant.last_donation_at == this_year(3)

    def test_random_mutations(self, ensemble, campaign):
        rng = random.Random(20260501)
        donors = [make_donor(ensemble, f"donor{n}@example.org") for n in range(3)]
        participants = list(CampaignParticipant.objects.all())

        for _ in range(60):
            action = rng.choice(["create", "create", "relink", "move", "amend", "delete"])
            existing = list(Donation.objects.all())
            if action == "create" or not existing:
                Donation.objects.create(
                    ensemble=ensemble,
                    donor=rng.choice(donors + [None]),
                    participant=rng.choice(participants + [None]),
                    amount_cents=rng.randint(1, 50000),
                    donated_at=timezone.now() - timedelta(days=rng.randint(0, 900)),
                )
            elif action == "relink":
                donation = rng.choice(existing)
                donation.donor = rng.choice(donors + [None])
                donation.save()
            elif action == "move":
                donation = rng.choice(existing)
                donation.participant = rng.choice(participants + [None])
                donation.save()
            elif action == "amend":
                donation = rng.choice(existing)
                donation.amount_cents = rng.randint(1, 50000)
                donation.save()
            else:
                rng.choice(existing).delete()

        for donor in donors:
            donor.refresh_from_db()
            expected = Donation.objects.filter(donor=donor).aggregate(total=Sum("amount_cents"))
            assert donor.lifetime_total_cents == (expected["total"] or 0)
        for participant in participants:
            participant.refresh_from_db()
            expected = Donation.objects.filter(participant=participant).aggregate(total=Sum("amount_cents"))
            assert participant.total_raised_cents == (expected["total"] or 0)


@pytest.mark.django_db
class TestDonorList:
    """Tests for GET /api/ensembles/{ensemble_id}/donors"""

    @pytest.fixture
    def donors(self, ensemble) -> dict[str, Donor]:
        now = timezone.now()
        rows = {
            "smith": make_donor(
                ensemble,
                "jo@smith.example",
                first_name="Jo",
                last_name="Smith",
                tags=["vip", "board"],
                lifetime_total_cents=90000,
                last_donation_at=now - timedelta(days=2),
            ),
            "acme": make_donor(
                ensemble,
                "giving@acme.example",
                first_name="",
                organization_name="Acme Music Supply",
                tags=["vip-emeritus"],
                lifetime_total_cents=250000,
                last_donation_at=now - timedelta(days=400),
            ),
            "new": make_donor(ensemble, "new@example.org", first_name="Nia", last_name="Ng"),
        }
        return rows

    def get(self, api_client, ensemble, **params):
        response = api_client.get(f"/api/ensembles/{ensemble.id}/donors", params)
        assert response.status_code == 200, response.json()
        return [donor["id"] for donor in response.json()["donors"]]

    def test_default_sort_is_most_recent_donation_first(self, api_client, ensemble, donors):
        ids = self.get(api_client, ensemble)

        assert ids == [str(donors["smith"].id), str(donors["acme"].id), str(donors["new"].id)]

    def test_sort_by_lifetime(self, api_client, ensemble, donors):
        ids = self.get(api_client, ensemble, sort="lifetime")

        assert ids[:2] == [str(donors["acme"].id), str(donors["smith"].id)]

    def test_search_matches_name_org_and_email(self, api_client, ensemble, donors):
        assert self.get(api_client, ensemble, search="SMITH") == [str(donors["smith"].id)]
        assert self.get(api_client, ensemble, search="music") == [str(donors["acme"].id)]

    def test_tag_matches_whole_tag_only(self, api_client, ensemble, donors):
        assert self.get(api_client, ensemble, tags="vip") == [str(donors["smith"].id)]
        assert self.get(api_client, ensemble, tags="vip,board") == [str(donors["smith"].id)]

    def test_lifetime_range(self, api_client, ensemble, donors):
        ids = self.get(api_client, ensemble, min_lifetime_cents=1, max_lifetime_cents=100000)

        assert ids == [str(donors["smith"].id)]

    def test_paging(self, api_client, ensemble, donors):
        assert len(self.get(api_client, ensemble, limit=2)) == 2
        assert len(self.get(api_client, ensemble, limit=2, offset=2)) == 1

    def test_donors_of_other_ensembles_are_hidden(self, api_client, other_director, ensemble, donors):
        from roster.models import Ensemble

        elsewhere = Ensemble.objects.create(director=other_director, name="Jazz Band")
        make_donor(elsewhere, "jo@smith.example", first_name="Jo")

        assert len(self.get(api_client, ensemble)) == 3

    def test_unknown_sort_returns_400(self, api_client, ensemble):
        response = api_client.get(f"/api/ensembles/{ensemble.id}/donors", {"sort": "email"})

        assert response.status_code == 400

    def test_unknown_ensemble_returns_404(self, api_client, db):
        response = api_client.get(f"/api/ensembles/{uuid4()}/donors")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ENSEMBLE_NOT_FOUND"


@pytest.mark.django_db
class TestDonorDetail:
    """Tests for GET/PATCH /api/donors/{donor_id} and POST .../activities"""

    def test_profile_includes_donations_and_activities(self, api_client, ensemble):
        manual_donation(api_client, ensemble, 1000, donor_email="grace@example.org", donor_name="Grace Hopper")
        donor = Donor.objects.get()

        response = api_client.get(f"/api/donors/{donor.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["donor"]["display_name"] == "Grace Hopper"
        assert data["donor"]["lifetime_total_cents"] == 1000
        assert [d["amount_cents"] for d in data["donations"]] == [1000]
        assert [a["type"] for a in data["activities"]] == ["donation"]

    def test_update_contact_fields(self, api_client, ensemble):
        donor = make_donor(ensemble, "grace@example.org")

        response = api_client.patch(
            f"/api/donors/{donor.id}",
            {"city": "Lincoln", "tags": ["alumni"], "preferred_contact_method": "phone"},
            format="json",
        )

        assert response.status_code == 200
        donor.refresh_from_db()
        assert donor.city == "Lincoln"
        assert donor.tags == ["alumni"]
        assert donor.preferred_contact_method == "phone"

    def test_email_taken_in_ensemble_returns_409(self, api_client, ensemble):
        make_donor(ensemble, "taken@example.org")
        donor = make_donor(ensemble, "grace@example.org")

        response = api_client.patch(
            f"/api/donors/{donor.id}", {"email": "TAKEN@example.org"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_DONOR_EMAIL"

    def test_clearing_every_name_returns_400(self, api_client, ensemble):
        donor = make_donor(ensemble, "grace@example.org", last_name="Hopper")

        response = api_client.patch(
            f"/api/donors/{donor.id}", {"first_name": "", "last_name": ""}, format="json"
        )

        assert response.status_code == 400
        donor.refresh_from_db()
        assert donor.last_name == "Hopper"

    def test_empty_update_returns_400(self, api_client, ensemble):
        donor = make_donor(ensemble, "grace@example.org")

        response = api_client.patch(f"/api/donors/{donor.id}", {}, format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOTHING_TO_UPDATE"

    def test_aggregates_are_not_editable(self, api_client, ensemble):
        donor = make_donor(ensemble, "grace@example.org")

        response = api_client.patch(
            f"/api/donors/{donor.id}", {"lifetime_total_cents": 999999}, format="json"
        )

        assert response.status_code == 400
        donor.refresh_from_db()
        assert donor.lifetime_total_cents == 0

    def test_log_activity(self, api_client, ensemble):
        donor = make_donor(ensemble, "grace@example.org")

        response = api_client.post(
            f"/api/donors/{donor.id}/activities",
            {"type": "note", "summary": "Met at spring concert", "details": {"by": "Dana"}},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["type"] == "note"
        assert DonorActivity.objects.filter(donor=donor, summary="Met at spring concert").exists()

    def test_unknown_donor_returns_404(self, api_client, db):
        response = api_client.get(f"/api/donors/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "DONOR_NOT_FOUND"
