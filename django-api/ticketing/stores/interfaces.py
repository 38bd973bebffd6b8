"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from roster.domain import Member
from ticketing.domain import (
    EventId,
    NewOrder,
    Order,
    OrderId,
    Performance,
    PerformanceId,
    SaleLink,
    TicketEvent,
    TicketType,
    TicketTypeId,
)
from ticketing.domain.models import EventDraft, OrderItem, PerformanceDraft, TicketTypeDraft


class TicketingStore(ABC):
    """Interface for ticket catalog and order persistence."""

    @abstractmethod
    def unit_of_work(self, operation: str) -> AbstractContextManager:
        """Return a context manager that commits everything inside it or nothing."""
        ...

    # Catalog

    @abstractmethod
    def get_event(self, event_id: EventId) -> TicketEvent | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def create_event(self, draft: EventDraft) -> TicketEvent:
        ...

    @abstractmethod
    def update_event(self, event_id: EventId, changes: dict) -> TicketEvent | None:
        """Apply a partial update. Return None if the event does not exist."""
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId) -> bool:
        """Delete an event and its children. Return False if it did not exist."""
        ...

    @abstractmethod
    def add_performance(self, event_id: EventId, draft: PerformanceDraft) -> Performance:
        ...

    @abstractmethod
    def add_ticket_type(self, event_id: EventId, draft: TicketTypeDraft) -> TicketType:
        ...

    @abstractmethod
    def get_performances(self, event_id: EventId) -> list[Performance]:
        """Return performances for an event ordered by date and start time."""
        ...

    @abstractmethod
    def get_ticket_types(self, event_id: EventId, public_only: bool = False) -> list[TicketType]:
        """Return ticket types for an event ordered by sort order."""
        ...

    # Orders

    @abstractmethod
    def get_performance(self, performance_id: PerformanceId) -> Performance | None:
        ...

    @abstractmethod
    def get_ticket_types_by_id(
        self, event_id: EventId, ticket_type_ids: list[TicketTypeId]
    ) -> dict[TicketTypeId, TicketType]:
        """Return the requested ticket types that belong to the event."""
        ...

    @abstractmethod
    def lock_performance(self, performance_id: PerformanceId) -> None:
        """Hold a row lock on the performance until the unit of work ends."""
        ...

    @abstractmethod
    def tickets_sold(self, performance_id: PerformanceId) -> int:
        ...

    @abstractmethod
    def insert_order(self, order: NewOrder) -> Order:
        """Persist an order and one item per physical ticket."""
        ...

    @abstractmethod
    def get_order(self, order_id: OrderId) -> Order | None:
        ...

    @abstractmethod
    def get_ticket(self, redemption_code: str) -> OrderItem | None:
        ...

    @abstractmethod
    def mark_checked_in(self, redemption_code: str, at: datetime) -> bool:
        """Set checked_in_at if still empty. Return True if this call set it."""
        ...

    # Sale links

    @abstractmethod
    def get_sale_link(self, event_id: EventId, code: str) -> SaleLink | None:
        ...

    @abstractmethod
    def ensure_sale_links(self, event_id: EventId, members: list[Member]) -> list[SaleLink]:
        """Create missing links for the members and return every link of the event."""
        ...
