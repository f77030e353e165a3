from django.contrib import admin

from ticketing.models import (
    CommissionRange,
    CommissionRangeHistory,
    Event,
    EventBatch,
    EventContract,
    ManagerProfile,
)


class EventBatchInline(admin.TabularInline):
    model = EventBatch
    extra = 0


class CommissionRangeHistoryInline(admin.TabularInline):
    model = CommissionRangeHistory
    extra = 0
    readonly_fields = ["min_tickets", "max_tickets", "percentage", "changed_at"]
    can_delete = False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "owner", "date", "status", "is_paid", "created_at"]
    list_filter = ["status", "is_paid", "category"]
    search_fields = ["title", "location"]
    inlines = [EventBatchInline]
    actions = ["approve", "reject"]

    @admin.action(description="Approve selected events")
    def approve(self, request, queryset):
        # save() per row so the cache signals fire.
        for event in queryset:
            event.status = Event.Status.APPROVED
            event.save(update_fields=["status", "updated_at"])

    @admin.action(description="Reject selected events")
    def reject(self, request, queryset):
        for event in queryset:
            event.status = Event.Status.REJECTED
            event.save(update_fields=["status", "updated_at"])


@admin.register(EventContract)
class EventContractAdmin(admin.ModelAdmin):
    list_display = ["title", "version", "is_active", "updated_at"]
    list_filter = ["is_active"]


@admin.register(CommissionRange)
class CommissionRangeAdmin(admin.ModelAdmin):
    list_display = ["min_tickets", "max_tickets", "percentage", "active"]
    list_filter = ["active"]
    inlines = [CommissionRangeHistoryInline]


@admin.register(ManagerProfile)
class ManagerProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "role", "company_name"]
    list_filter = ["role"]
