from django.contrib import admin

from roster.models import Director, Ensemble, RosterMember


class RosterMemberInline(admin.TabularInline):
    model = RosterMember
    extra = 1


@admin.register(Ensemble)
class EnsembleAdmin(admin.ModelAdmin):
    list_display = ["name", "director", "created_at"]
    search_fields = ["name", "organization_name"]
    inlines = [RosterMemberInline]


admin.site.register(Director)
