from django.contrib import admin

from accreditation.models import Event, QuotaRule, Registration, ZoneRule


class QuotaRuleInline(admin.TabularInline):
    model = QuotaRule
    extra = 1
    fields = ["category", "max_per_organization", "max_global", "priority"]


class ZoneRuleInline(admin.TabularInline):
    model = ZoneRule
    extra = 1
    fields = ["match_field", "match_value", "zone"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "tenant", "created_at"]
    search_fields = ["name", "tenant"]
    inlines = [QuotaRuleInline, ZoneRuleInline]


@admin.register(QuotaRule)
class QuotaRuleAdmin(admin.ModelAdmin):
    list_display = ["category", "event", "max_per_organization", "max_global", "priority", "created_at"]
    list_filter = ["event"]


@admin.register(ZoneRule)
class ZoneRuleAdmin(admin.ModelAdmin):
    list_display = ["match_field", "match_value", "zone", "event", "created_at"]
    list_filter = ["event", "match_field"]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["organization", "category", "cargo", "status", "zone", "event", "created_at"]
    list_filter = ["event", "status", "category"]
    search_fields = ["organization", "cargo"]
    # Registrations are created through the admission service only.
    readonly_fields = ["event", "organization", "category", "cargo", "created_at"]

    def has_add_permission(self, request):
        return False
