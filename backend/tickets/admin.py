from django.contrib import admin

from tickets.models import TicketBalance, TicketOrder, TicketTransaction


@admin.register(TicketBalance)
class TicketBalanceAdmin(admin.ModelAdmin):
    list_display = ["user", "balance", "updated_at"]
    search_fields = ["user__username"]
    readonly_fields = ["balance", "updated_at"]


@admin.register(TicketTransaction)
class TicketTransactionAdmin(admin.ModelAdmin):
    """Ledger is append-only, so everything is read-only here"""

    list_display = ["user", "type", "amount", "reference_id", "created_at"]
    list_filter = ["type"]
    search_fields = ["user__username", "reference_id"]

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(TicketOrder)
class TicketOrderAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "quantity", "total_amount", "status", "created_at", "paid_at")
    list_filter = ("status",)
    search_fields = ("user__username",)
    readonly_fields = ("status", "paid_at")
