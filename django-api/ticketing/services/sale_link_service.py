"""Sale link service - one durable solicitation code per student per event."""

import logging

from roster.stores.interfaces import RosterDirectory
from ticketing.domain import EventId, SaleLink
from ticketing.domain.errors import EventNotFoundError, EventWithoutEnsembleError
from ticketing.stores.interfaces import TicketingStore

logger = logging.getLogger(__name__)


class SaleLinkService:
    def __init__(self, store: TicketingStore, roster: RosterDirectory) -> None:
        self._store = store
        self._roster = roster

    def generate_links(self, event_id: str) -> list[SaleLink]:
        """Ensure every active member of the event's ensemble has a sale link.

        Safe to call repeatedly: existing links keep their codes.
        """
        parsed = EventId.parse(event_id, "event_id")
        with self._store.unit_of_work("generate_sale_links"):
            event = self._store.get_event(parsed)
            if event is None:
                raise EventNotFoundError(event_id)
            if event.ensemble_id is None:
                raise EventWithoutEnsembleError(event_id)
            members = self._roster.active_members(event.ensemble_id)
            links = self._store.ensure_sale_links(parsed, members)
        logger.info("Event %s has %d sale link(s)", event_id, len(links))
        return links
