from django.contrib import admin
from drivers.models import DriverAvailability


@admin.register(DriverAvailability)
class DriverAvailabilityAdmin(admin.ModelAdmin):
    """Admin panel for managing driver regions and availability"""

    list_display = [
        "user",
        "region",
        "status",
        "latitude",
        "longitude",
        "updated_at",
    ]

    list_filter = [
        "status",
        "region",
    ]

    search_fields = [
        "user__username",
    ]

    readonly_fields = [
        "updated_at",
    ]

    ordering = ("user__username",)
