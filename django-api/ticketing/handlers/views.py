"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Domain errors are mapped to HTTP responses by core.handlers.exceptions
- Never contain business logic
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.conf import fee_schedule, ledger_setting
from core.domain.money import Money
from core.notifications import send_receipt_on_commit
from roster.domain import DirectorId, EnsembleId
from roster.stores.django_store import DjangoRosterDirectory
from ticketing.domain import Buyer, EventId, Order
from ticketing.domain.models import EventDraft, PerformanceDraft, TicketTypeDraft
from ticketing.handlers.serializers import (
    EventCatalogSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventUpdateSerializer,
    OrderCreateSerializer,
    OrderItemSerializer,
    OrderSerializer,
    PerformanceCreateSerializer,
    PerformanceSerializer,
    SaleLinkSerializer,
    TicketTypeCreateSerializer,
    TicketTypeSerializer,
)
from ticketing.services import CatalogService, OrderRequest, OrderService, SaleLinkService
from ticketing.signals import event_cache_key
from ticketing.stores.django_store import DjangoTicketingStore


def send_order_receipt(order: Order) -> None:
    send_receipt_on_commit(
        order.buyer_email,
        "Your tickets",
        f"Thank you {order.buyer_name}! Order {order.id}: {len(order.items)} ticket(s), "
        f"total {order.total}.\nCodes: " + ", ".join(item.redemption_code for item in order.items),
    )


def catalog_service() -> CatalogService:
    return CatalogService(DjangoTicketingStore())


def order_service() -> OrderService:
    return OrderService(
        DjangoTicketingStore(),
        fees=fee_schedule(),
        enforce_capacity=ledger_setting("ENFORCE_PERFORMANCE_CAPACITY"),
        on_order_created=send_order_receipt,
    )


def sale_link_service() -> SaleLinkService:
    return SaleLinkService(DjangoTicketingStore(), DjangoRosterDirectory())


class EventListView(APIView):
    """Handler for POST /api/events"""

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        event = catalog_service().create_event(
            EventDraft(
                director_id=DirectorId(data["director_id"]),
                ensemble_id=EnsembleId(data["ensemble_id"]) if data.get("ensemble_id") else None,
                title=data["title"],
                subtitle=data["subtitle"],
                description=data["description"],
                venue_name=data["venue_name"],
                venue_address=data["venue_address"],
                status=data["status"],
            )
        )
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        key = event_cache_key(EventId.parse(event_id, "event_id"))
        payload = cache.get(key)
        if payload is None:
            catalog = catalog_service().get_public_event(event_id)
            payload = EventCatalogSerializer(catalog).data
            cache.set(key, payload, ledger_setting("CATALOG_CACHE_TIMEOUT"))
        return Response(payload)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        event = catalog_service().update_event(event_id, dict(serializer.validated_data))
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        catalog_service().delete_event(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PerformanceListView(APIView):
    """Handler for POST /api/events/{event_id}/performances"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = PerformanceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        performance = catalog_service().add_performance(
            event_id, PerformanceDraft(**serializer.validated_data)
        )
        return Response(PerformanceSerializer(performance).data, status=status.HTTP_201_CREATED)


class TicketTypeListView(APIView):
    """Handler for POST /api/events/{event_id}/ticket-types"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = TicketTypeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data["price"] = Money.from_decimal(data["price"])
        ticket_type = catalog_service().add_ticket_type(event_id, TicketTypeDraft(**data))
        return Response(TicketTypeSerializer(ticket_type).data, status=status.HTTP_201_CREATED)


class OrderCreateView(APIView):
    """Handler for POST /api/events/{event_id}/orders"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = order_service().create_order(
            OrderRequest(
                event_id=event_id,
                performance_id=data["performance_id"],
                buyer=Buyer(
                    name=data["buyer_name"],
                    email=data["buyer_email"],
                    phone=data["buyer_phone"],
                ),
                items=[(item["ticket_type_id"], item["quantity"]) for item in data["items"]],
                donation_cents=data["donation_cents"],
                payment_ref=data["payment_ref"],
                sale_link_code=data["sale_link_code"],
            )
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Handler for GET /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        order = order_service().get_order(order_id)
        return Response(OrderSerializer(order).data)


class CheckInView(APIView):
    """Handler for POST /api/tickets/{code}/check-in"""

    def post(self, request: Request, code: str) -> Response:
        ticket = order_service().check_in(code)
        return Response(OrderItemSerializer(ticket).data)


class SaleLinkListView(APIView):
    """Handler for POST /api/events/{event_id}/sale-links"""

    def post(self, request: Request, event_id: str) -> Response:
        links = sale_link_service().generate_links(event_id)
        return Response({"links": SaleLinkSerializer(links, many=True).data})
