"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.

``TicketType.price`` is a legacy decimal currency column. Every other money
column in this app is integer cents; the store converts at read time.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class TicketEvent(models.Model):
    """Persistence model for ticketed productions."""

    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"
    STATUS_CANCELLED = "cancelled"
    STATUS_ARCHIVED = "archived"
    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_ARCHIVED, "Archived"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    director = models.ForeignKey(
        "roster.Director", on_delete=models.CASCADE, related_name="ticket_events"
    )
    ensemble = models.ForeignKey(
        "roster.Ensemble",
        on_delete=models.SET_NULL,
        related_name="ticket_events",
        null=True,
        blank=True,
    )
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    venue_name = models.CharField(max_length=255, blank=True)
    venue_address = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"]),
        ]

    def __str__(self) -> str:
        return self.title


class Performance(models.Model):
    """One scheduled showing. Capacity is advisory unless enforcement is enabled."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(TicketEvent, on_delete=models.CASCADE, related_name="performances")
    performance_date = models.DateField()
    doors_open_time = models.TimeField(null=True, blank=True)
    start_time = models.TimeField()
    end_time = models.TimeField(null=True, blank=True)
    capacity = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["performance_date", "start_time"]
        indexes = [
            models.Index(fields=["event", "performance_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.event.title} - {self.performance_date}"


class TicketType(models.Model):
    """Persistence model for ticket types."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(TicketEvent, on_delete=models.CASCADE, related_name="ticket_types")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity_available = models.PositiveIntegerField(null=True, blank=True)
    is_public = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["sort_order", "name"]
        indexes = [
            models.Index(fields=["event"]),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(price__gte=0), name="ticket_type_price_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"


class StudentSaleLink(models.Model):
    """Durable per-student code that attributes ticket sales."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(TicketEvent, on_delete=models.CASCADE, related_name="sale_links")
    roster_member = models.ForeignKey(
        "roster.RosterMember", on_delete=models.CASCADE, related_name="sale_links"
    )
    unique_code = models.CharField(max_length=50, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "roster_member"], name="unique_sale_link_per_member"
            ),
        ]

    def __str__(self) -> str:
        return self.unique_code


class Order(models.Model):
    """A completed sale. Never updated after insert."""

    STATUS_COMPLETED = "completed"
    STATUS_CHOICES = [(STATUS_COMPLETED, "Completed")]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(TicketEvent, on_delete=models.PROTECT, related_name="orders")
    performance = models.ForeignKey(Performance, on_delete=models.PROTECT, related_name="orders")
    sale_link = models.ForeignKey(
        StudentSaleLink,
        on_delete=models.SET_NULL,
        related_name="orders",
        null=True,
        blank=True,
    )
    buyer_name = models.CharField(max_length=255)
    buyer_email = models.EmailField()
    buyer_phone = models.CharField(max_length=50, blank=True)
    subtotal_cents = models.PositiveIntegerField()
    fees_cents = models.PositiveIntegerField(default=0)
    donation_cents = models.PositiveIntegerField(default=0)
    total_cents = models.PositiveIntegerField()
    payment_ref = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_COMPLETED)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "-created_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_cents=F("subtotal_cents") + F("fees_cents") + F("donation_cents")),
                name="order_total_is_sum_of_parts",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.id} ({self.buyer_email})"


class OrderItem(models.Model):
    """Exactly one physical ticket, redeemable once by its code."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    performance = models.ForeignKey(Performance, on_delete=models.PROTECT, related_name="tickets")
    ticket_type = models.ForeignKey(TicketType, on_delete=models.PROTECT, related_name="tickets")
    unit_price_cents = models.PositiveIntegerField()
    redemption_code = models.CharField(max_length=50, unique=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["order"]),
            models.Index(fields=["performance"]),
        ]

    def __str__(self) -> str:
        return self.redemption_code
