"""API tests for ticket orders, check-in and sale links.

Run with: pytest tests/test_orders.py -v
"""

from datetime import date, time
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import DatabaseError

from ticketing.models import Order, OrderItem, Performance, StudentSaleLink, TicketType
from ticketing.stores import django_store


def order_payload(performance, ticket_type, quantity=2, **extra) -> dict:
    payload = {
        "performance_id": str(performance.id),
        "buyer_name": "Pat Parent",
        "buyer_email": "pat@example.org",
        "items": [{"ticket_type_id": str(ticket_type.id), "quantity": quantity}],
    }
    payload.update(extra)
    return payload


@pytest.mark.django_db
class TestCreateOrder:
    """Tests for POST /api/events/{event_id}/orders"""

    def test_prices_order_from_stored_ticket_prices(self, api_client, event, performance, adult_ticket):
        """Given two $20 tickets and a $5 donation, records a $46.50 order."""
        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket, donation_cents=500, payment_ref="pi_123"),
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["subtotal_cents"] == 4000
        assert data["fees_cents"] == 150
        assert data["donation_cents"] == 500
        assert data["total_cents"] == 4650
        assert data["status"] == "completed"
        assert len(data["items"]) == 2
        assert all(item["unit_price_cents"] == 2000 for item in data["items"])

        row = Order.objects.get(pk=data["id"])
        assert row.total_cents == 4650

    def test_every_ticket_gets_a_distinct_code(self, api_client, event, performance, adult_ticket):
        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket, quantity=5),
            format="json",
        )

        codes = [item["redemption_code"] for item in response.json()["items"]]
        assert len(set(codes)) == 5
        assert all(code.startswith("spring-concert-") for code in codes)

    def test_zero_price_order_still_pays_fixed_fee(self, api_client, event, performance):
        from ticketing.models import TicketType

        free = TicketType.objects.create(event=event, name="Student", price=0)
        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, free, quantity=1),
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["fees_cents"] == 30
        assert response.json()["total_cents"] == 30

    def test_unknown_ticket_type_writes_nothing(self, api_client, event, performance, adult_ticket):
        """Given one unknown ticket type among valid ones, returns 404 and records no order."""
        payload = order_payload(performance, adult_ticket)
        payload["items"].append({"ticket_type_id": str(uuid4()), "quantity": 1})

        response = api_client.post(f"/api/events/{event.id}/orders", payload, format="json")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TICKET_TYPE_NOT_FOUND"
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_performance_of_other_event_rejected(self, api_client, director, event, adult_ticket):
        from ticketing.models import TicketEvent

        other = TicketEvent.objects.create(director=director, title="Other Show")
        foreign = Performance.objects.create(
            event=other, performance_date=date(2026, 6, 1), start_time=time(19, 0)
        )

        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(foreign, adult_ticket),
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PERFORMANCE_NOT_FOUND"

    def test_unknown_event_returns_404(self, api_client, performance, adult_ticket):
        response = api_client.post(
            f"/api/events/{uuid4()}/orders",
            order_payload(performance, adult_ticket),
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EVENT_NOT_FOUND"

    def test_malformed_event_id_returns_400(self, api_client, performance, adult_ticket):
        response = api_client.post(
            "/api/events/not-a-uuid/orders",
            order_payload(performance, adult_ticket),
            format="json",
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"

    @pytest.mark.parametrize(
        "override",
        [
            {"items": []},
            {"items": [{"ticket_type_id": "x", "quantity": 0}]},
            {"donation_cents": -1},
            {"buyer_email": "not-an-email"},
        ],
    )
    def test_invalid_body_returns_400(self, api_client, event, performance, adult_ticket, override):
        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket, **override),
            format="json",
        )

        assert response.status_code == 400
        assert Order.objects.count() == 0

    def test_capacity_not_enforced_by_default(self, api_client, event, adult_ticket):
        small = Performance.objects.create(
            event=event, performance_date=date(2026, 5, 2), start_time=time(14, 0), capacity=1
        )

        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(small, adult_ticket, quantity=3),
            format="json",
        )

        assert response.status_code == 201

    def test_capacity_enforced_when_enabled(self, api_client, settings, event, adult_ticket):
        settings.LEDGER = {**settings.LEDGER, "ENFORCE_PERFORMANCE_CAPACITY": True}
        small = Performance.objects.create(
            event=event, performance_date=date(2026, 5, 2), start_time=time(14, 0), capacity=3
        )
        first = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(small, adult_ticket, quantity=2),
            format="json",
        )

        second = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(small, adult_ticket, quantity=2),
            format="json",
        )

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "SOLD_OUT"
        assert OrderItem.objects.filter(performance=small).count() == 2


@pytest.mark.django_db
class TestGetOrder:
    """Tests for GET /api/orders/{order_id}"""

    def test_returns_order_with_items(self, api_client, event, performance, adult_ticket):
        created = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket),
            format="json",
        ).json()

        response = api_client.get(f"/api/orders/{created['id']}")

        assert response.status_code == 200
        assert response.json()["total_cents"] == created["total_cents"]
        assert len(response.json()["items"]) == 2

    def test_unknown_order_returns_404(self, api_client, db):
        response = api_client.get(f"/api/orders/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ORDER_NOT_FOUND"


@pytest.mark.django_db
class TestCheckIn:
    """Tests for POST /api/tickets/{code}/check-in"""

    def test_ticket_redeems_once(self, api_client, event, performance, adult_ticket):
        order = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket, quantity=1),
            format="json",
        ).json()
        code = order["items"][0]["redemption_code"]

        first = api_client.post(f"/api/tickets/{code}/check-in")
        second = api_client.post(f"/api/tickets/{code}/check-in")

        assert first.status_code == 200
        assert first.json()["checked_in_at"] is not None
        assert second.status_code == 409
        assert second.json()["error"]["code"] == "ALREADY_CHECKED_IN"

    def test_unknown_code_returns_404(self, api_client, db):
        response = api_client.post("/api/tickets/no-such-code/check-in")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TICKET_NOT_FOUND"


@pytest.mark.django_db
class TestSaleLinks:
    """Tests for POST /api/events/{event_id}/sale-links"""

    def test_one_link_per_active_member(self, api_client, event, members):
        response = api_client.post(f"/api/events/{event.id}/sale-links")

        assert response.status_code == 200
        links = response.json()["links"]
        assert {link["member_id"] for link in links} == {str(member.id) for member in members}
        assert len({link["code"] for link in links}) == 3

    def test_regenerating_keeps_existing_codes(self, api_client, event, members):
        first = api_client.post(f"/api/events/{event.id}/sale-links").json()["links"]

        second = api_client.post(f"/api/events/{event.id}/sale-links").json()["links"]

        assert sorted(link["code"] for link in first) == sorted(link["code"] for link in second)
        assert StudentSaleLink.objects.count() == 3

    def test_event_without_ensemble_rejected(self, api_client, director):
        from ticketing.models import TicketEvent

        loose = TicketEvent.objects.create(director=director, title="Pop-up Recital")

        response = api_client.post(f"/api/events/{loose.id}/sale-links")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "EVENT_WITHOUT_ENSEMBLE"

    def test_order_through_link_is_attributed(self, api_client, event, performance, adult_ticket, members):
        links = api_client.post(f"/api/events/{event.id}/sale-links").json()["links"]
        link = links[0]

        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket, sale_link_code=link["code"]),
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["sale_link_id"] == link["id"]

    def test_unknown_link_code_returns_404(self, api_client, event, performance, adult_ticket):
        response = api_client.post(
            f"/api/events/{event.id}/orders",
            order_payload(performance, adult_ticket, sale_link_code="nobody-abcdef"),
            format="json",
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SALE_LINK_NOT_FOUND"
        assert Order.objects.count() == 0


@pytest.mark.django_db
class TestOrderFailures:
    """A failed order leaves nothing behind."""

    def test_colliding_codes_exhaust_retries(self, api_client, event, performance, adult_ticket, monkeypatch):
        """Given a generator that always repeats itself, returns 409 and writes no order."""
        monkeypatch.setattr("ticketing.stores.django_store.new_code", lambda seed: "spring-concert-aaaaaa")

        response = api_client.post(
            f"/api/events/{event.id}/orders", order_payload(performance, adult_ticket), format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CODE_EXHAUSTED"
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_datastore_error_mid_order_rolls_back(self, api_client, event, performance, adult_ticket, monkeypatch):
        """Given the second ticket line fails to insert, returns 503 and no partial order."""
        student = TicketType.objects.create(event=event, name="Student", price=Decimal("5.00"))
        real_insert = django_store.insert_with_fresh_codes
        calls = []

        def failing_insert(*args, **kwargs):
            calls.append(1)
            if len(calls) == 2:
                raise DatabaseError("connection lost")
            return real_insert(*args, **kwargs)

        monkeypatch.setattr(django_store, "insert_with_fresh_codes", failing_insert)
        payload = order_payload(performance, adult_ticket)
        payload["items"].append({"ticket_type_id": str(student.id), "quantity": 1})

        response = api_client.post(f"/api/events/{event.id}/orders", payload, format="json")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "TRANSACTION_FAILED"
        assert len(calls) == 2
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
