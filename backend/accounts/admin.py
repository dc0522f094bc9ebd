from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from accounts.models import User
from drivers.models import DriverAvailability
from stores.models import StoreAvailability
from tickets.models import TicketBalance


class DriverAvailabilityInline(admin.StackedInline):
    model = DriverAvailability
    can_delete = False
    extra = 0
    readonly_fields = ("latitude", "longitude", "updated_at")


class StoreAvailabilityInline(admin.StackedInline):
    model = StoreAvailability
    can_delete = False
    extra = 0
    readonly_fields = ("latitude", "longitude", "updated_at")


class TicketBalanceInline(admin.TabularInline):
    """Shown read-only: balances change only through the ledger."""
    model = TicketBalance
    can_delete = False
    extra = 0
    readonly_fields = ("balance", "updated_at")

    def has_add_permission(self, request, obj=None):
        return False


ROLE_INLINES = {
    User.DRIVER: [DriverAvailabilityInline, TicketBalanceInline],
    User.STORE: [StoreAvailabilityInline, TicketBalanceInline],
}


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Marketplace accounts with their role-specific availability and tickets"""

    list_display = ["username", "role", "phone_number", "is_active"]
    list_filter = ["role", "is_active"]
    search_fields = ["username", "email", "phone_number"]
    ordering = ("role", "username")

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Marketplace", {"fields": ("role", "phone_number")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Marketplace", {"fields": ("role", "phone_number")}),
    )

    def get_inlines(self, request, obj):
        if obj is None:
            return []
        return ROLE_INLINES.get(obj.role, [])
