"""Pytest configuration and shared fixtures."""

from datetime import date, time
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from roster.models import Director, Ensemble, RosterMember
from ticketing.models import Performance, TicketEvent, TicketType


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def director(db) -> Director:
    return Director.objects.create(first_name="Dana", last_name="Reyes", email="dana@example.org")


@pytest.fixture
def other_director(db) -> Director:
    return Director.objects.create(first_name="Sam", last_name="Okafor", email="sam@example.org")


@pytest.fixture
def ensemble(director) -> Ensemble:
    return Ensemble.objects.create(director=director, name="Lincoln Wind Symphony")


@pytest.fixture
def members(ensemble) -> list[RosterMember]:
    """Three active members plus one inactive member who is never enrolled."""
    active = [
        RosterMember.objects.create(ensemble=ensemble, first_name=first, last_name=last)
        for first, last in (("Ava", "Adams"), ("Ben", "Brooks"), ("Cleo", "Chen"))
    ]
    RosterMember.objects.create(
        ensemble=ensemble,
        first_name="Dev",
        last_name="Diaz",
        status=RosterMember.STATUS_INACTIVE,
    )
    return active


@pytest.fixture
def event(director, ensemble) -> TicketEvent:
    return TicketEvent.objects.create(
        director=director,
        ensemble=ensemble,
        title="Spring Concert",
        venue_name="Lincoln Auditorium",
        status=TicketEvent.STATUS_PUBLISHED,
    )


@pytest.fixture
def performance(event) -> Performance:
    return Performance.objects.create(
        event=event,
        performance_date=date(2026, 5, 1),
        start_time=time(19, 30),
        capacity=100,
    )


@pytest.fixture
def adult_ticket(event) -> TicketType:
    return TicketType.objects.create(event=event, name="Adult", price=Decimal("20.00"))


@pytest.fixture
def campaign(api_client, director, ensemble, members) -> dict:
    """A campaign over the ensemble, as returned by the API, with 3 participants."""
    response = api_client.post(
        "/api/campaigns",
        {"director_id": str(director.id), "ensemble_id": str(ensemble.id), "name": "Fall Drive"},
        format="json",
    )
    assert response.status_code == 201
    return response.json()
