from django.contrib import admin

from queues.models import Event, EventCounter, Ticket


class EventCounterInline(admin.StackedInline):
    model = EventCounter
    can_delete = False
    readonly_fields = ["last_number"]

    def has_add_permission(self, request, obj=None) -> bool:
        return False


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["number", "name", "status", "created_at"]
    readonly_fields = ["number", "created_at"]

    def has_add_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "is_active", "created_at"]
    search_fields = ["name"]
    exclude = ["pin_hash"]
    inlines = [EventCounterInline, TicketInline]

    def has_add_permission(self, request) -> bool:
        # Events need a PIN and a counter row; create them through the API.
        return False


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["number", "name", "event", "status", "created_at"]
    list_filter = ["status", "event"]
    readonly_fields = ["number", "event", "created_at"]

    def has_add_permission(self, request) -> bool:
        return False
