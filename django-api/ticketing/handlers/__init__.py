from ticketing.handlers.views import (
    CheckInView,
    EventDetailView,
    EventListView,
    OrderCreateView,
    OrderDetailView,
    PerformanceListView,
    SaleLinkListView,
    TicketTypeListView,
)

__all__ = [
    "EventListView",
    "EventDetailView",
    "PerformanceListView",
    "TicketTypeListView",
    "OrderCreateView",
    "OrderDetailView",
    "CheckInView",
    "SaleLinkListView",
]
