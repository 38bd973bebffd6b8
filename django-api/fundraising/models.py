"""Django ORM models (persistence layer) for campaigns, donations and donors.

All money columns are integer cents. ``CampaignParticipant.total_raised_cents``
and the ``Donor`` aggregate columns are derived from ``Donation`` rows and are
never edited directly.
"""

import uuid

from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower
from django.utils import timezone


class Campaign(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    director = models.ForeignKey(
        "roster.Director", on_delete=models.CASCADE, related_name="campaigns"
    )
    ensemble = models.ForeignKey(
        "roster.Ensemble",
        on_delete=models.SET_NULL,
        related_name="campaigns",
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True)
    goal_cents = models.PositiveIntegerField(null=True, blank=True)
    per_student_goal_cents = models.PositiveIntegerField(null=True, blank=True)
    starts_at = models.DateTimeField(null=True, blank=True)
    ends_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name


class CampaignParticipant(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name="participants")
    roster_member = models.ForeignKey(
        "roster.RosterMember", on_delete=models.CASCADE, related_name="campaign_participations"
    )
    token = models.CharField(max_length=50, unique=True)
    personal_goal_cents = models.PositiveIntegerField(null=True, blank=True)
    total_raised_cents = models.PositiveIntegerField(default=0)
    last_donation_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["campaign", "roster_member"], name="unique_participant_per_campaign"
            ),
        ]

    def __str__(self) -> str:
        return self.token


class Donor(models.Model):
    CONTACT_EMAIL = "email"
    CONTACT_PHONE = "phone"
    CONTACT_MAIL = "mail"
    CONTACT_CHOICES = [
        (CONTACT_EMAIL, "Email"),
        (CONTACT_PHONE, "Phone"),
        (CONTACT_MAIL, "Mail"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    ensemble = models.ForeignKey("roster.Ensemble", on_delete=models.CASCADE, related_name="donors")

    first_name = models.CharField(max_length=255, blank=True)
    last_name = models.CharField(max_length=255, blank=True)
    organization_name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(null=True, blank=True)
    phone = models.CharField(max_length=50, blank=True)

    address_line1 = models.TextField(blank=True)
    address_line2 = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=50, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=50, default="US")

    employer = models.CharField(max_length=255, blank=True)
    preferred_contact_method = models.CharField(
        max_length=20, choices=CONTACT_CHOICES, default=CONTACT_EMAIL
    )
    tags = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)

    lifetime_total_cents = models.PositiveIntegerField(default=0)
    ytd_total_cents = models.PositiveIntegerField(default=0)
    first_donation_at = models.DateTimeField(null=True, blank=True)
    last_donation_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["ensemble", "-last_donation_at"]),
            models.Index(fields=["ensemble", "-lifetime_total_cents"]),
        ]
        constraints = [
            models.UniqueConstraint(
                "ensemble", Lower("email"), name="unique_donor_email_per_ensemble"
            ),
            models.CheckConstraint(
                condition=~Q(first_name="") | ~Q(last_name="") | ~Q(organization_name=""),
                name="donor_has_name_or_org",
            ),
        ]

    def __str__(self) -> str:
        return self.organization_name or f"{self.first_name} {self.last_name}".strip()


class Donation(models.Model):
    METHOD_CARD = "card"
    METHOD_CASH = "cash"
    METHOD_CHECK = "check"
    METHOD_OTHER = "other"
    METHOD_CHOICES = [
        (METHOD_CARD, "Card"),
        (METHOD_CASH, "Cash"),
        (METHOD_CHECK, "Check"),
        (METHOD_OTHER, "Other"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    campaign = models.ForeignKey(
        Campaign, on_delete=models.CASCADE, related_name="donations", null=True, blank=True
    )
    participant = models.ForeignKey(
        CampaignParticipant,
        on_delete=models.SET_NULL,
        related_name="donations",
        null=True,
        blank=True,
    )
    ensemble = models.ForeignKey(
        "roster.Ensemble",
        on_delete=models.CASCADE,
        related_name="donations",
        null=True,
        blank=True,
    )
    donor = models.ForeignKey(
        Donor, on_delete=models.SET_NULL, related_name="donations", null=True, blank=True
    )
    # External payment confirmation id; the idempotency key. Empty for manual entries.
    payment_ref = models.CharField(max_length=255, unique=True, null=True, blank=True)
    amount_cents = models.PositiveIntegerField()
    currency = models.CharField(max_length=10, default="usd")
    donor_name = models.CharField(max_length=255, blank=True)
    donor_email = models.EmailField(blank=True)
    is_anonymous = models.BooleanField(default=False)
    message = models.TextField(blank=True)
    payment_method = models.CharField(max_length=20, choices=METHOD_CHOICES, default=METHOD_CARD)
    donated_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-donated_at"]
        indexes = [
            models.Index(fields=["campaign"]),
            models.Index(fields=["participant"]),
            models.Index(fields=["donor"]),
            models.Index(fields=["ensemble"]),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(amount_cents__gt=0), name="donation_amount_positive"),
        ]

    def __str__(self) -> str:
        return f"Donation {self.id} ({self.amount_cents} {self.currency})"


class DonorActivity(models.Model):
    TYPE_DONATION = "donation"
    TYPE_TICKET_PURCHASE = "ticket_purchase"
    TYPE_NOTE = "note"
    TYPE_EMAIL_SENT = "email_sent"
    TYPE_MANUAL_LOG = "manual_log"
    TYPE_CHOICES = [
        (TYPE_DONATION, "Donation"),
        (TYPE_TICKET_PURCHASE, "Ticket purchase"),
        (TYPE_NOTE, "Note"),
        (TYPE_EMAIL_SENT, "Email sent"),
        (TYPE_MANUAL_LOG, "Manual log"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor = models.ForeignKey(Donor, on_delete=models.CASCADE, related_name="activities")
    ensemble = models.ForeignKey(
        "roster.Ensemble", on_delete=models.CASCADE, related_name="donor_activities"
    )
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    summary = models.TextField()
    details = models.JSONField(default=dict, blank=True)
    related_id = models.UUIDField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["donor", "-created_at"]),
            models.Index(fields=["type"]),
        ]


class UnreconciledPayment(models.Model):
    """Confirmed payment that could not be attributed. Needs manual review."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    payment_ref = models.CharField(max_length=255, unique=True)
    amount_cents = models.PositiveIntegerField()
    reason = models.CharField(max_length=255)
    payload = models.JSONField(default=dict, blank=True)
    resolved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.payment_ref}: {self.reason}"
