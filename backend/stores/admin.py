from django.contrib import admin

from stores.models import MenuItem, StoreAvailability


@admin.register(StoreAvailability)
class StoreAvailabilityAdmin(admin.ModelAdmin):
    """Admin panel for store regions and open/closed status"""

    list_display = ["store_name", "user", "region", "status", "updated_at"]
    list_filter = ["region", "status"]
    search_fields = ["store_name", "user__username"]
    readonly_fields = ["updated_at"]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "store", "price", "promo_price", "is_available", "is_active")
    list_filter = ("is_available", "is_active")
    search_fields = ("name", "store__username")
