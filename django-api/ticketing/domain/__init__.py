from ticketing.domain.models import (
    Buyer,
    EventCatalog,
    NewOrder,
    Order,
    OrderItem,
    OrderLine,
    Performance,
    PricedLine,
    SaleLink,
    TicketEvent,
    TicketType,
)
from ticketing.domain.value_objects import (
    EventId,
    OrderId,
    PerformanceId,
    SaleLinkId,
    TicketTypeId,
)

__all__ = [
    "TicketEvent",
    "Performance",
    "TicketType",
    "SaleLink",
    "Order",
    "OrderItem",
    "EventCatalog",
    "Buyer",
    "OrderLine",
    "PricedLine",
    "NewOrder",
    "EventId",
    "PerformanceId",
    "TicketTypeId",
    "OrderId",
    "SaleLinkId",
]
