"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in ticketing/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime, time

from core.domain.money import Money
from roster.domain import DirectorId, EnsembleId, MemberId
from ticketing.domain.value_objects import (
    EventId,
    OrderId,
    PerformanceId,
    SaleLinkId,
    TicketTypeId,
)


@dataclass(frozen=True)
class TicketEvent:
    """Domain representation of a ticketed production."""

    id: EventId
    director_id: DirectorId
    ensemble_id: EnsembleId | None
    title: str
    subtitle: str
    description: str
    venue_name: str
    venue_address: str
    status: str
    created_at: datetime
    updated_at: datetime

    @property
    def is_published(self) -> bool:
        return self.status == "published"


@dataclass(frozen=True)
class Performance:
    """Domain representation of a Performance."""

    id: PerformanceId
    event_id: EventId
    performance_date: date
    doors_open_time: time | None
    start_time: time
    end_time: time | None
    capacity: int | None


@dataclass(frozen=True)
class TicketType:
    """Domain representation of a TicketType. Price is normalized to cents."""

    id: TicketTypeId
    event_id: EventId
    name: str
    description: str
    price: Money
    quantity_available: int | None
    is_public: bool
    sort_order: int


@dataclass(frozen=True)
class SaleLink:
    id: SaleLinkId
    event_id: EventId
    member_id: MemberId
    code: str


@dataclass(frozen=True)
class OrderItem:
    """One physical ticket."""

    ticket_type_id: TicketTypeId
    unit_price: Money
    redemption_code: str
    checked_in_at: datetime | None


@dataclass(frozen=True)
class Order:
    id: OrderId
    event_id: EventId
    performance_id: PerformanceId
    sale_link_id: SaleLinkId | None
    buyer_name: str
    buyer_email: str
    buyer_phone: str
    subtotal: Money
    fees: Money
    donation: Money
    total: Money
    payment_ref: str
    status: str
    created_at: datetime
    items: tuple[OrderItem, ...] = ()


@dataclass(frozen=True)
class EventCatalog:
    """A published event with its performances and public ticket types."""

    event: TicketEvent
    performances: tuple[Performance, ...] = ()
    ticket_types: tuple[TicketType, ...] = ()


@dataclass(frozen=True)
class Buyer:
    name: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class OrderLine:
    """A requested ticket type and quantity, before pricing."""

    ticket_type_id: TicketTypeId
    quantity: int


@dataclass(frozen=True)
class PricedLine:
    ticket_type: TicketType
    quantity: int


@dataclass(frozen=True)
class NewOrder:
    """Everything the store needs to persist an order in one go."""

    event: TicketEvent
    performance_id: PerformanceId
    sale_link_id: SaleLinkId | None
    buyer: Buyer
    lines: tuple[PricedLine, ...]
    subtotal: Money
    fees: Money
    donation: Money
    total: Money
    payment_ref: str


@dataclass(frozen=True)
class EventDraft:
    director_id: DirectorId
    title: str
    ensemble_id: EnsembleId | None = None
    subtitle: str = ""
    description: str = ""
    venue_name: str = ""
    venue_address: str = ""
    status: str = "draft"


@dataclass(frozen=True)
class PerformanceDraft:
    performance_date: date
    start_time: time
    doors_open_time: time | None = None
    end_time: time | None = None
    capacity: int | None = None


@dataclass(frozen=True)
class TicketTypeDraft:
    name: str
    price: Money
    description: str = ""
    quantity_available: int | None = None
    is_public: bool = True
    sort_order: int = 0


EVENT_UPDATABLE_FIELDS = frozenset(
    {"title", "subtitle", "description", "venue_name", "venue_address", "status"}
)
