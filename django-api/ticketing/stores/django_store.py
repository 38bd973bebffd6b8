"""Django ORM implementation of the TicketingStore."""

import logging
from datetime import datetime

from django.db.models import ProtectedError

from core.conf import new_code
from core.db import insert_keyed_with_fresh_code, insert_with_fresh_codes, unit_of_work
from core.domain.money import Money
from roster.domain import DirectorId, EnsembleId, Member, MemberId
from ticketing import models
from ticketing.domain import (
    EventId,
    NewOrder,
    Order,
    OrderId,
    OrderItem,
    Performance,
    PerformanceId,
    SaleLink,
    SaleLinkId,
    TicketEvent,
    TicketType,
    TicketTypeId,
)
from ticketing.domain.errors import EventHasOrdersError
from ticketing.domain.models import EventDraft, PerformanceDraft, TicketTypeDraft
from ticketing.stores.interfaces import TicketingStore

logger = logging.getLogger(__name__)


def to_event(row: models.TicketEvent) -> TicketEvent:
    return TicketEvent(
        id=EventId(row.id),
        director_id=DirectorId(row.director_id),
        ensemble_id=EnsembleId(row.ensemble_id) if row.ensemble_id else None,
        title=row.title,
        subtitle=row.subtitle,
        description=row.description,
        venue_name=row.venue_name,
        venue_address=row.venue_address,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_performance(row: models.Performance) -> Performance:
    return Performance(
        id=PerformanceId(row.id),
        event_id=EventId(row.event_id),
        performance_date=row.performance_date,
        doors_open_time=row.doors_open_time,
        start_time=row.start_time,
        end_time=row.end_time,
        capacity=row.capacity,
    )


def to_ticket_type(row: models.TicketType) -> TicketType:
    return TicketType(
        id=TicketTypeId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        description=row.description,
        price=Money.from_decimal(row.price),
        quantity_available=row.quantity_available,
        is_public=row.is_public,
        sort_order=row.sort_order,
    )


def to_sale_link(row: models.StudentSaleLink) -> SaleLink:
    return SaleLink(
        id=SaleLinkId(row.id),
        event_id=EventId(row.event_id),
        member_id=MemberId(row.roster_member_id),
        code=row.unique_code,
    )


def to_order_item(row: models.OrderItem) -> OrderItem:
    return OrderItem(
        ticket_type_id=TicketTypeId(row.ticket_type_id),
        unit_price=Money(row.unit_price_cents),
        redemption_code=row.redemption_code,
        checked_in_at=row.checked_in_at,
    )


def to_order(row: models.Order, items: list[models.OrderItem]) -> Order:
    return Order(
        id=OrderId(row.id),
        event_id=EventId(row.event_id),
        performance_id=PerformanceId(row.performance_id),
        sale_link_id=SaleLinkId(row.sale_link_id) if row.sale_link_id else None,
        buyer_name=row.buyer_name,
        buyer_email=row.buyer_email,
        buyer_phone=row.buyer_phone,
        subtotal=Money(row.subtotal_cents),
        fees=Money(row.fees_cents),
        donation=Money(row.donation_cents),
        total=Money(row.total_cents),
        payment_ref=row.payment_ref,
        status=row.status,
        created_at=row.created_at,
        items=tuple(to_order_item(item) for item in items),
    )


class DjangoTicketingStore(TicketingStore):
    """PostgreSQL-backed ticketing store using Django ORM."""

    def unit_of_work(self, operation: str):
        return unit_of_work(operation)

    def get_event(self, event_id: EventId) -> TicketEvent | None:
        row = models.TicketEvent.objects.filter(pk=event_id.value).first()
        return to_event(row) if row else None

    def create_event(self, draft: EventDraft) -> TicketEvent:
        row = models.TicketEvent.objects.create(
            director_id=draft.director_id.value,
            ensemble_id=draft.ensemble_id.value if draft.ensemble_id else None,
            title=draft.title,
            subtitle=draft.subtitle,
            description=draft.description,
            venue_name=draft.venue_name,
            venue_address=draft.venue_address,
            status=draft.status,
        )
        return to_event(row)

    def update_event(self, event_id: EventId, changes: dict) -> TicketEvent | None:
        row = models.TicketEvent.objects.filter(pk=event_id.value).first()
        if row is None:
            return None
        for name, value in changes.items():
            setattr(row, name, value)
        row.save(update_fields=[*changes, "updated_at"])
        return to_event(row)

    def delete_event(self, event_id: EventId) -> bool:
        row = models.TicketEvent.objects.filter(pk=event_id.value).first()
        if row is None:
            return False
        try:
            row.delete()
        except ProtectedError as exc:
            raise EventHasOrdersError(str(event_id)) from exc
        return True

    def add_performance(self, event_id: EventId, draft: PerformanceDraft) -> Performance:
        row = models.Performance.objects.create(
            event_id=event_id.value,
            performance_date=draft.performance_date,
            doors_open_time=draft.doors_open_time,
            start_time=draft.start_time,
            end_time=draft.end_time,
            capacity=draft.capacity,
        )
        return to_performance(row)

    def add_ticket_type(self, event_id: EventId, draft: TicketTypeDraft) -> TicketType:
        row = models.TicketType.objects.create(
            event_id=event_id.value,
            name=draft.name,
            description=draft.description,
            price=draft.price.to_decimal(),
            quantity_available=draft.quantity_available,
            is_public=draft.is_public,
            sort_order=draft.sort_order,
        )
        return to_ticket_type(row)

    def get_performances(self, event_id: EventId) -> list[Performance]:
        rows = models.Performance.objects.filter(event_id=event_id.value)
        return [to_performance(row) for row in rows]

    def get_ticket_types(self, event_id: EventId, public_only: bool = False) -> list[TicketType]:
        rows = models.TicketType.objects.filter(event_id=event_id.value)
        if public_only:
            rows = rows.filter(is_public=True)
        return [to_ticket_type(row) for row in rows]

    def get_performance(self, performance_id: PerformanceId) -> Performance | None:
        row = models.Performance.objects.filter(pk=performance_id.value).first()
        return to_performance(row) if row else None

    def get_ticket_types_by_id(
        self, event_id: EventId, ticket_type_ids: list[TicketTypeId]
    ) -> dict[TicketTypeId, TicketType]:
        rows = models.TicketType.objects.filter(
            event_id=event_id.value,
            pk__in=[ticket_type_id.value for ticket_type_id in ticket_type_ids],
        )
        return {TicketTypeId(row.id): to_ticket_type(row) for row in rows}

    def lock_performance(self, performance_id: PerformanceId) -> None:
        list(models.Performance.objects.select_for_update().filter(pk=performance_id.value))

    def tickets_sold(self, performance_id: PerformanceId) -> int:
        return models.OrderItem.objects.filter(performance_id=performance_id.value).count()

    def insert_order(self, order: NewOrder) -> Order:
        row = models.Order.objects.create(
            event_id=order.event.id.value,
            performance_id=order.performance_id.value,
            sale_link_id=order.sale_link_id.value if order.sale_link_id else None,
            buyer_name=order.buyer.name,
            buyer_email=order.buyer.email,
            buyer_phone=order.buyer.phone,
            subtotal_cents=order.subtotal.cents,
            fees_cents=order.fees.cents,
            donation_cents=order.donation.cents,
            total_cents=order.total.cents,
            payment_ref=order.payment_ref,
        )
        items: list[models.OrderItem] = []
        for line in order.lines:
            ticket_type = line.ticket_type

            def build(ticket_type=ticket_type) -> models.OrderItem:
                return models.OrderItem(
                    order=row,
                    performance_id=order.performance_id.value,
                    ticket_type_id=ticket_type.id.value,
                    unit_price_cents=ticket_type.price.cents,
                    redemption_code=new_code(order.event.title),
                )

            items.extend(insert_with_fresh_codes(build, line.quantity, kind="redemption code"))
        return to_order(row, items)

    def get_order(self, order_id: OrderId) -> Order | None:
        row = models.Order.objects.filter(pk=order_id.value).first()
        if row is None:
            return None
        return to_order(row, list(row.items.order_by("created_at", "redemption_code")))

    def get_ticket(self, redemption_code: str) -> OrderItem | None:
        row = models.OrderItem.objects.filter(redemption_code=redemption_code).first()
        return to_order_item(row) if row else None

    def mark_checked_in(self, redemption_code: str, at: datetime) -> bool:
        updated = models.OrderItem.objects.filter(
            redemption_code=redemption_code, checked_in_at__isnull=True
        ).update(checked_in_at=at)
        return updated == 1

    def get_sale_link(self, event_id: EventId, code: str) -> SaleLink | None:
        row = models.StudentSaleLink.objects.filter(
            event_id=event_id.value, unique_code=code
        ).first()
        return to_sale_link(row) if row else None

    def ensure_sale_links(self, event_id: EventId, members: list[Member]) -> list[SaleLink]:
        linked = set(
            models.StudentSaleLink.objects.filter(event_id=event_id.value).values_list(
                "roster_member_id", flat=True
            )
        )
        for member in members:
            if member.id.value not in linked:
                self._insert_link(event_id, member)
        rows = models.StudentSaleLink.objects.filter(event_id=event_id.value).order_by(
            "roster_member__last_name", "roster_member__first_name"
        )
        return [to_sale_link(row) for row in rows]

    def _insert_link(self, event_id: EventId, member: Member) -> None:
        def build() -> models.StudentSaleLink:
            return models.StudentSaleLink(
                event_id=event_id.value,
                roster_member_id=member.id.value,
                unique_code=new_code(member.display_name),
            )

        def key_exists() -> bool:
            return models.StudentSaleLink.objects.filter(
                event_id=event_id.value, roster_member_id=member.id.value
            ).exists()

        if insert_keyed_with_fresh_code(build, key_exists, kind="sale link code") is None:
            logger.info("Sale link for member %s already exists", member.id)
