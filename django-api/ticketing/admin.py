from django.contrib import admin

from ticketing.models import Order, OrderItem, Performance, TicketEvent, TicketType


class PerformanceInline(admin.TabularInline):
    model = Performance
    extra = 1


class TicketTypeInline(admin.TabularInline):
    model = TicketType
    extra = 1


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ["ticket_type", "unit_price_cents", "redemption_code", "checked_in_at"]
    can_delete = False


@admin.register(TicketEvent)
class TicketEventAdmin(admin.ModelAdmin):
    list_display = ["title", "venue_name", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["title", "venue_name"]
    inlines = [PerformanceInline, TicketTypeInline]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "buyer_email", "total_cents", "created_at"]
    list_filter = ["event"]
    search_fields = ["buyer_email", "buyer_name", "payment_ref"]
    inlines = [OrderItemInline]

    def has_change_permission(self, request, obj=None):
        return False
