from django.urls import path

from ticketing.handlers import (
    CheckInView,
    EventDetailView,
    EventListView,
    OrderCreateView,
    OrderDetailView,
    PerformanceListView,
    SaleLinkListView,
    TicketTypeListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/performances",
        PerformanceListView.as_view(),
        name="performance-list",
    ),
    path(
        "events/<str:event_id>/ticket-types",
        TicketTypeListView.as_view(),
        name="ticket-type-list",
    ),
    path("events/<str:event_id>/orders", OrderCreateView.as_view(), name="order-create"),
    path("events/<str:event_id>/sale-links", SaleLinkListView.as_view(), name="sale-link-list"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path("tickets/<str:code>/check-in", CheckInView.as_view(), name="ticket-check-in"),
]
