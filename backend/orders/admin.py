"""Tells what to show in the Django admin interface for orders app"""

from django.contrib import admin
from .models import Order, DeliveryPricing, OrderRating


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Order admin"""
    list_display = ['id', 'order_type', 'status', 'customer', 'driver', 'store', 'created_at', 'completed_at']
    list_filter = ['order_type', 'status', 'pickup_region', 'created_at']
    search_fields = ['customer__username', 'driver__username', 'store__username', 'external_store_name']
    readonly_fields = [
        'created_at', 'updated_at', 'confirmed_at', 'assigned_at',
        'picked_up_at', 'completed_at', 'cancelled_at',
        'pickup_proof_refs', 'delivery_proof_refs',
    ]
    date_hierarchy = 'created_at'


@admin.register(DeliveryPricing)
class DeliveryPricingAdmin(admin.ModelAdmin):
    list_display = ("id", "under_1km", "km_1_to_1_5", "km_1_5_to_2", "km_2_to_2_5", "km_2_5_to_3", "above_3_per_km", "created_at")
    readonly_fields = ("created_at",)


@admin.register(OrderRating)
class OrderRatingAdmin(admin.ModelAdmin):
    list_display = ("order", "customer", "driver", "driver_rating", "store", "store_rating", "created_at")
    list_filter = ("driver_rating", "store_rating")
    search_fields = ("customer__username", "driver__username", "store__username")
    readonly_fields = ("order", "customer", "driver", "store", "driver_rating", "store_rating", "created_at")
