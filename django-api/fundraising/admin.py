from django.contrib import admin

from fundraising.models import (
    Campaign,
    CampaignParticipant,
    Donation,
    Donor,
    DonorActivity,
    UnreconciledPayment,
)


class CampaignParticipantInline(admin.TabularInline):
    model = CampaignParticipant
    extra = 0
    readonly_fields = ["token", "total_raised_cents", "last_donation_at"]


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "ensemble", "goal_cents", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "slug"]
    inlines = [CampaignParticipantInline]


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ["id", "campaign", "participant", "amount_cents", "payment_method", "donated_at"]
    list_filter = ["payment_method"]
    search_fields = ["payment_ref", "donor_email", "donor_name"]

    def has_change_permission(self, request, obj=None):
        return False


class DonorActivityInline(admin.TabularInline):
    model = DonorActivity
    extra = 0
    readonly_fields = ["type", "summary", "created_at"]


@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display = ["__str__", "email", "ensemble", "lifetime_total_cents", "last_donation_at"]
    search_fields = ["first_name", "last_name", "organization_name", "email"]
    readonly_fields = [
        "lifetime_total_cents",
        "ytd_total_cents",
        "first_donation_at",
        "last_donation_at",
    ]
    inlines = [DonorActivityInline]


@admin.register(UnreconciledPayment)
class UnreconciledPaymentAdmin(admin.ModelAdmin):
    list_display = ["payment_ref", "amount_cents", "reason", "resolved", "created_at"]
    list_filter = ["resolved"]
    search_fields = ["payment_ref"]
