"""Django ORM models for member fees.

An assignment's status is derived from the sum of its payments; payments
are append-only.
"""

import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone


class FeeDefinition(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ensemble = models.ForeignKey(
        "roster.Ensemble", on_delete=models.CASCADE, related_name="fee_definitions"
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    amount_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=10, default="usd")
    default_due_date = models.DateField(null=True, blank=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class FeeAssignment(models.Model):
    STATUS_INVOICED = "invoiced"
    STATUS_PARTIAL = "partial"
    STATUS_PAID = "paid"
    STATUS_WAIVED = "waived"
    STATUS_CANCELED = "canceled"
    STATUS_CHOICES = [
        (STATUS_INVOICED, "Invoiced"),
        (STATUS_PARTIAL, "Partially paid"),
        (STATUS_PAID, "Paid"),
        (STATUS_WAIVED, "Waived"),
        (STATUS_CANCELED, "Canceled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    definition = models.ForeignKey(
        FeeDefinition, on_delete=models.CASCADE, related_name="assignments"
    )
    ensemble = models.ForeignKey(
        "roster.Ensemble", on_delete=models.CASCADE, related_name="fee_assignments"
    )
    roster_member = models.ForeignKey(
        "roster.RosterMember", on_delete=models.CASCADE, related_name="fee_assignments"
    )
    amount_cents = models.PositiveIntegerField()
    discount_cents = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_INVOICED)
    due_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["due_date", "created_at"]
        indexes = [
            models.Index(fields=["roster_member"]),
            models.Index(fields=["ensemble", "status"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(discount_cents__lte=models.F("amount_cents")),
                name="fee_discount_within_amount",
            ),
        ]


class FeePayment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    assignment = models.ForeignKey(
        FeeAssignment, on_delete=models.PROTECT, related_name="payments"
    )
    amount_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=10, default="usd")
    provider = models.CharField(max_length=50, default="offline")
    # Set for processor-backed payments; makes a retried recording a no-op.
    provider_charge_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    notes = models.TextField(blank=True)
    paid_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["paid_at"]
        constraints = [
            models.CheckConstraint(condition=Q(amount_cents__gt=0), name="fee_payment_amount_positive"),
        ]
