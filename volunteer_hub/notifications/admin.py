from django.contrib import admin
from django.utils.html import format_html

from .models import LedgerEntry, OverdueAlertLedgerEntry, ReminderLedgerEntry


STATUS_COLORS = {
    LedgerEntry.Status.CLAIMED: "#f59e0b",  # orange
    LedgerEntry.Status.SENT: "#16a34a",     # green
    LedgerEntry.Status.VOID: "#6b7280",     # gray
}


class LedgerEntryAdmin(admin.ModelAdmin):
    """
    Read-mostly view of the dedup ledger.

    Voiding an entry lets the next run claim (and send) it again.
    """

    # =====================================================
    # LIST VIEW
    # =====================================================
    list_filter = (
        "status",
        "claimed_at",
    )

    search_fields = (
        "task__title",
        "volunteer__full_name",
        "volunteer__email",
        "delivery_id",
    )

    ordering = ("-claimed_at",)
    list_per_page = 25

    readonly_fields = (
        "task",
        "volunteer",
        "claimed_at",
        "sent_at",
        "delivery_id",
    )

    list_select_related = ("task", "volunteer")

    actions = ("mark_as_void",)

    # =====================================================
    # CUSTOM DISPLAY HELPERS
    # =====================================================
    def colored_status(self, obj):
        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            STATUS_COLORS.get(obj.status, "#000000"),
            obj.get_status_display(),
        )

    colored_status.short_description = "Status"

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Void selected entries (allow resend)")
    def mark_as_void(self, request, queryset):
        updated = queryset.update(status=LedgerEntry.Status.VOID)
        self.message_user(request, f"{updated} ledger entries voided.")

    def has_add_permission(self, request):
        return False


@admin.register(ReminderLedgerEntry)
class ReminderLedgerEntryAdmin(LedgerEntryAdmin):
    list_display = (
        "id",
        "volunteer",
        "task",
        "sent_on",
        "colored_status",
        "claimed_at",
        "sent_at",
    )

    list_filter = LedgerEntryAdmin.list_filter + ("sent_on",)
    date_hierarchy = "sent_on"


@admin.register(OverdueAlertLedgerEntry)
class OverdueAlertLedgerEntryAdmin(LedgerEntryAdmin):
    list_display = (
        "id",
        "task",
        "volunteer",
        "admin_email",
        "colored_status",
        "claimed_at",
        "sent_at",
    )

    search_fields = LedgerEntryAdmin.search_fields + ("admin_email",)
    readonly_fields = LedgerEntryAdmin.readonly_fields + ("admin_email",)
