"""Serializers for request validation and for rendering domain models."""

from rest_framework import serializers

from ticketing.models import TicketEvent as TicketEventRow


# Requests


class EventCreateSerializer(serializers.Serializer):
    director_id = serializers.UUIDField()
    ensemble_id = serializers.UUIDField(required=False, allow_null=True)
    title = serializers.CharField(max_length=255)
    subtitle = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    venue_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    venue_address = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.ChoiceField(
        choices=TicketEventRow.STATUS_CHOICES, default=TicketEventRow.STATUS_DRAFT
    )


class EventUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    subtitle = serializers.CharField(max_length=255, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    venue_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    venue_address = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=TicketEventRow.STATUS_CHOICES, required=False)


class PerformanceCreateSerializer(serializers.Serializer):
    performance_date = serializers.DateField()
    start_time = serializers.TimeField()
    doors_open_time = serializers.TimeField(required=False, allow_null=True, default=None)
    end_time = serializers.TimeField(required=False, allow_null=True, default=None)
    capacity = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)


class TicketTypeCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    quantity_available = serializers.IntegerField(
        min_value=0, required=False, allow_null=True, default=None
    )
    is_public = serializers.BooleanField(required=False, default=True)
    sort_order = serializers.IntegerField(required=False, default=0)


class OrderLineSerializer(serializers.Serializer):
    ticket_type_id = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    performance_id = serializers.CharField()
    buyer_name = serializers.CharField(max_length=255)
    buyer_email = serializers.EmailField()
    buyer_phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    items = OrderLineSerializer(many=True, allow_empty=False)
    donation_cents = serializers.IntegerField(min_value=0, required=False, default=0)
    payment_ref = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    sale_link_code = serializers.CharField(max_length=50, required=False, allow_null=True, default=None)


# Responses


class EventSerializer(serializers.Serializer):
    """Serializer for TicketEvent domain model."""

    id = serializers.CharField(source="id.value")
    director_id = serializers.CharField(source="director_id.value")
    ensemble_id = serializers.SerializerMethodField()
    title = serializers.CharField()
    subtitle = serializers.CharField()
    description = serializers.CharField()
    venue_name = serializers.CharField()
    venue_address = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_ensemble_id(self, event) -> str | None:
        return str(event.ensemble_id) if event.ensemble_id else None


class TicketTypeSerializer(serializers.Serializer):
    """Serializer for TicketType domain model."""

    id = serializers.CharField(source="id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    price_cents = serializers.IntegerField(source="price.cents")
    quantity_available = serializers.IntegerField(allow_null=True)
    is_public = serializers.BooleanField()
    sort_order = serializers.IntegerField()


class PerformanceSerializer(serializers.Serializer):
    """Serializer for Performance domain model."""

    id = serializers.CharField(source="id.value")
    performance_date = serializers.DateField()
    doors_open_time = serializers.TimeField(allow_null=True)
    start_time = serializers.TimeField()
    end_time = serializers.TimeField(allow_null=True)
    capacity = serializers.IntegerField(allow_null=True)


class EventCatalogSerializer(serializers.Serializer):
    event = EventSerializer()
    performances = PerformanceSerializer(many=True)
    ticket_types = TicketTypeSerializer(many=True)


class OrderItemSerializer(serializers.Serializer):
    ticket_type_id = serializers.CharField(source="ticket_type_id.value")
    unit_price_cents = serializers.IntegerField(source="unit_price.cents")
    redemption_code = serializers.CharField()
    checked_in_at = serializers.DateTimeField(allow_null=True)


class OrderSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    event_id = serializers.CharField(source="event_id.value")
    performance_id = serializers.CharField(source="performance_id.value")
    sale_link_id = serializers.SerializerMethodField()
    buyer_name = serializers.CharField()
    buyer_email = serializers.CharField()
    buyer_phone = serializers.CharField()
    subtotal_cents = serializers.IntegerField(source="subtotal.cents")
    fees_cents = serializers.IntegerField(source="fees.cents")
    donation_cents = serializers.IntegerField(source="donation.cents")
    total_cents = serializers.IntegerField(source="total.cents")
    payment_ref = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()
    items = OrderItemSerializer(many=True)

    def get_sale_link_id(self, order) -> str | None:
        return str(order.sale_link_id) if order.sale_link_id else None


class SaleLinkSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    member_id = serializers.CharField(source="member_id.value")
    code = serializers.CharField()
