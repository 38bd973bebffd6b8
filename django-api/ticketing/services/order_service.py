"""Order service - records completed ticket sales.

An order is priced from the stored ticket type prices, never from the
client, and is persisted together with one item per physical ticket in a
single unit of work.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from core.domain.errors import InvalidAmountError
from core.domain.money import FeeSchedule, Money, PriceLine, price
from ticketing.domain import (
    Buyer,
    EventId,
    NewOrder,
    Order,
    OrderId,
    OrderItem,
    OrderLine,
    PerformanceId,
    PricedLine,
    TicketTypeId,
)
from ticketing.domain.errors import (
    AlreadyCheckedInError,
    EmptyOrderError,
    EventNotFoundError,
    OrderNotFoundError,
    PerformanceNotFoundError,
    SaleLinkNotFoundError,
    SoldOutError,
    TicketNotFoundError,
    TicketTypeNotFoundError,
)
from ticketing.stores.interfaces import TicketingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderRequest:
    """Raw order input; ids are still strings from the request body."""

    event_id: str
    performance_id: str
    buyer: Buyer
    items: list[tuple[str, int]]
    donation_cents: int = 0
    payment_ref: str = ""
    sale_link_code: str | None = None


class OrderService:
    """Service for recording orders and redeeming tickets."""

    def __init__(
        self,
        store: TicketingStore,
        fees: FeeSchedule,
        enforce_capacity: bool = False,
        on_order_created: Callable[[Order], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._fees = fees
        self._enforce_capacity = enforce_capacity
        self._on_order_created = on_order_created
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def create_order(self, request: OrderRequest) -> Order:
        """Record a completed sale.

        Raises:
            InvalidIdError: If an id is not a valid UUID.
            EmptyOrderError: If no items were requested.
            InvalidAmountError: If a quantity is not positive or the donation is negative.
            EventNotFoundError, PerformanceNotFoundError, TicketTypeNotFoundError,
            SaleLinkNotFoundError: If a referenced entity is absent or not part of the event.
            SoldOutError: If capacity enforcement is on and the performance is full.
            CodeExhaustedError: If redemption codes kept colliding.
            TransactionFailedError: If the datastore failed; nothing was written.
        """
        event_id = EventId.parse(request.event_id, "event_id")
        performance_id = PerformanceId.parse(request.performance_id, "performance_id")
        lines = self._parse_lines(request.items)
        if request.donation_cents is None or request.donation_cents < 0:
            raise InvalidAmountError("donation_cents", "Donation cannot be negative")
        donation = Money(request.donation_cents)

        with self._store.unit_of_work("create_order"):
            event = self._store.get_event(event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))

            performance = self._store.get_performance(performance_id)
            if performance is None or performance.event_id != event_id:
                raise PerformanceNotFoundError(str(performance_id))

            ticket_types = self._store.get_ticket_types_by_id(
                event_id, [line.ticket_type_id for line in lines]
            )
            priced: list[PricedLine] = []
            for line in lines:
                ticket_type = ticket_types.get(line.ticket_type_id)
                if ticket_type is None:
                    raise TicketTypeNotFoundError(str(line.ticket_type_id))
                priced.append(PricedLine(ticket_type=ticket_type, quantity=line.quantity))

            sale_link_id = None
            if request.sale_link_code:
                sale_link = self._store.get_sale_link(event_id, request.sale_link_code)
                if sale_link is None:
                    raise SaleLinkNotFoundError(request.sale_link_code)
                sale_link_id = sale_link.id

            quantity = sum(line.quantity for line in priced)
            if self._enforce_capacity and performance.capacity is not None:
                self._store.lock_performance(performance_id)
                remaining = performance.capacity - self._store.tickets_sold(performance_id)
                if quantity > remaining:
                    raise SoldOutError(str(performance_id), max(remaining, 0))

            totals = price(
                [PriceLine(line.ticket_type.price, line.quantity) for line in priced],
                donation,
                self._fees,
            )
            order = self._store.insert_order(
                NewOrder(
                    event=event,
                    performance_id=performance_id,
                    sale_link_id=sale_link_id,
                    buyer=request.buyer,
                    lines=tuple(priced),
                    subtotal=totals.subtotal,
                    fees=totals.fees,
                    donation=totals.donation,
                    total=totals.total,
                    payment_ref=request.payment_ref,
                )
            )

        logger.info(
            "Order %s recorded for event %s: %d ticket(s), total %s",
            order.id,
            event_id,
            quantity,
            order.total,
        )
        if self._on_order_created is not None:
            self._on_order_created(order)
        return order

    def get_order(self, order_id: str) -> Order:
        parsed = OrderId.parse(order_id, "order_id")
        order = self._store.get_order(parsed)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def check_in(self, redemption_code: str) -> OrderItem:
        """Redeem one physical ticket. A ticket can be redeemed once."""
        ticket = self._store.get_ticket(redemption_code)
        if ticket is None:
            raise TicketNotFoundError(redemption_code)
        if not self._store.mark_checked_in(redemption_code, self._clock()):
            raise AlreadyCheckedInError(redemption_code)
        logger.info("Ticket %s checked in", redemption_code)
        return self._store.get_ticket(redemption_code)

    @staticmethod
    def _parse_lines(items: list[tuple[str, int]]) -> list[OrderLine]:
        if not items:
            raise EmptyOrderError()
        lines = []
        for ticket_type_id, quantity in items:
            if quantity is None or quantity <= 0:
                raise InvalidAmountError("items", "Quantity must be at least 1")
            lines.append(
                OrderLine(
                    ticket_type_id=TicketTypeId.parse(ticket_type_id, "ticket_type_id"),
                    quantity=quantity,
                )
            )
        return lines
