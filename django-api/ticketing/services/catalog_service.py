"""Catalog service - organizer-side event setup and the public event view."""

import logging

from core.domain.errors import NothingToUpdateError
from ticketing.domain import EventCatalog, EventId, Performance, TicketEvent, TicketType
from ticketing.domain.errors import EventNotFoundError
from ticketing.domain.models import (
    EVENT_UPDATABLE_FIELDS,
    EventDraft,
    PerformanceDraft,
    TicketTypeDraft,
)
from ticketing.stores.interfaces import TicketingStore

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for ticket event catalog operations."""

    def __init__(self, store: TicketingStore) -> None:
        self._store = store

    def get_public_event(self, event_id: str) -> EventCatalog:
        """Return a published event with its performances and public ticket types.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist or is not published.
        """
        parsed = EventId.parse(event_id, "event_id")
        event = self._store.get_event(parsed)
        if event is None or not event.is_published:
            raise EventNotFoundError(event_id)
        return EventCatalog(
            event=event,
            performances=tuple(self._store.get_performances(parsed)),
            ticket_types=tuple(self._store.get_ticket_types(parsed, public_only=True)),
        )

    def create_event(self, draft: EventDraft) -> TicketEvent:
        with self._store.unit_of_work("create_event"):
            event = self._store.create_event(draft)
        logger.info("Ticket event %s created", event.id)
        return event

    def update_event(self, event_id: str, changes: dict) -> TicketEvent:
        parsed = EventId.parse(event_id, "event_id")
        allowed = {name: value for name, value in changes.items() if name in EVENT_UPDATABLE_FIELDS}
        if not allowed:
            raise NothingToUpdateError()
        with self._store.unit_of_work("update_event"):
            event = self._store.update_event(parsed, allowed)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def delete_event(self, event_id: str) -> None:
        parsed = EventId.parse(event_id, "event_id")
        with self._store.unit_of_work("delete_event"):
            deleted = self._store.delete_event(parsed)
        if not deleted:
            raise EventNotFoundError(event_id)
        logger.info("Ticket event %s deleted", event_id)

    def add_performance(self, event_id: str, draft: PerformanceDraft) -> Performance:
        parsed = self._existing_event(event_id)
        with self._store.unit_of_work("add_performance"):
            return self._store.add_performance(parsed, draft)

    def add_ticket_type(self, event_id: str, draft: TicketTypeDraft) -> TicketType:
        parsed = self._existing_event(event_id)
        with self._store.unit_of_work("add_ticket_type"):
            return self._store.add_ticket_type(parsed, draft)

    def _existing_event(self, event_id: str) -> EventId:
        parsed = EventId.parse(event_id, "event_id")
        if self._store.get_event(parsed) is None:
            raise EventNotFoundError(event_id)
        return parsed
