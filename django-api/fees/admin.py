from django.contrib import admin

from fees.models import FeeAssignment, FeeDefinition, FeePayment


class FeePaymentInline(admin.TabularInline):
    model = FeePayment
    extra = 0
    readonly_fields = ["amount_cents", "provider", "provider_charge_id", "paid_at"]
    can_delete = False


@admin.register(FeeDefinition)
class FeeDefinitionAdmin(admin.ModelAdmin):
    list_display = ["name", "ensemble", "amount_cents", "default_due_date", "active"]
    list_filter = ["active"]
    search_fields = ["name"]


@admin.register(FeeAssignment)
class FeeAssignmentAdmin(admin.ModelAdmin):
    list_display = ["definition", "roster_member", "amount_cents", "discount_cents", "status", "due_date"]
    list_filter = ["status"]
    readonly_fields = ["status"]
    inlines = [FeePaymentInline]
