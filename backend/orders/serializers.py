from rest_framework import serializers

from accounts.serializers import UserBasicSerializer
from common.regions import REGION_CHOICES
from .models import DeliveryPricing, Order, OrderRating


class MenuItemBasicSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.IntegerField()
    promo_price = serializers.IntegerField(allow_null=True)
    effective_price = serializers.IntegerField(read_only=True)


class OrderSerializer(serializers.ModelSerializer):
    """Serializer for orders, shared by customer, store and driver endpoints"""
    customer = UserBasicSerializer(read_only=True)
    driver = UserBasicSerializer(read_only=True)
    store = UserBasicSerializer(read_only=True)
    store_name = serializers.SerializerMethodField()
    menu_item = MenuItemBasicSerializer(read_only=True)
    relevant_region = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_type', 'status', 'customer', 'driver', 'store', 'store_name',
            'menu_item', 'quantity', 'payment_method', 'note',
            'external_store_name', 'external_store_address', 'external_map_link',
            'pickup_address', 'pickup_map_link', 'pickup_latitude', 'pickup_longitude', 'pickup_region',
            'dropoff_address', 'dropoff_map_link', 'dropoff_latitude', 'dropoff_longitude', 'dropoff_region',
            'relevant_region', 'estimated_distance_km', 'estimated_fare',
            'pickup_proof_refs', 'delivery_proof_refs',
            'cancel_reason', 'cancel_note', 'rejection_reason',
            'created_at', 'updated_at', 'confirmed_at', 'assigned_at',
            'picked_up_at', 'completed_at', 'cancelled_at',
        ]
        read_only_fields = fields

    def get_store_name(self, obj):
        if obj.order_type == Order.FOOD_EXTERNAL_STORE:
            return obj.external_store_name
        availability = getattr(obj.store, 'store_availability', None) if obj.store_id else None
        return availability.store_name if availability else None


class OrderCreateSerializer(serializers.Serializer):
    """
    Validates the create-order body. Per-type requirements are enforced by
    the order service so the API and other callers share one rule set.
    """
    order_type = serializers.ChoiceField(choices=Order.TYPE_CHOICES)
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_CHOICES, default=Order.CASH)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, required=False)

    # registered store
    store_id = serializers.IntegerField(required=False)
    menu_item_id = serializers.IntegerField(required=False)

    # external store
    external_store_name = serializers.CharField(max_length=120, required=False, allow_blank=True)
    external_store_address = serializers.CharField(required=False, allow_blank=True)
    external_map_link = serializers.URLField(max_length=500, required=False, allow_blank=True)

    pickup_address = serializers.CharField(required=False, allow_blank=True)
    pickup_map_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    pickup_region = serializers.ChoiceField(choices=REGION_CHOICES, required=False)

    dropoff_address = serializers.CharField(required=False, allow_blank=True)
    dropoff_map_link = serializers.URLField(max_length=500, required=False, allow_blank=True)
    dropoff_region = serializers.ChoiceField(choices=REGION_CHOICES, required=False)


class FareEstimateRequestSerializer(serializers.Serializer):
    pickup_map_link = serializers.CharField(max_length=500)
    dropoff_map_link = serializers.CharField(max_length=500)


class DriverCancelSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=Order.DRIVER_CANCEL_REASONS)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True)


class StoreRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ProofUploadSerializer(serializers.Serializer):
    """One or more images under the `images` (or single `image`) field"""
    images = serializers.ListField(child=serializers.ImageField(), required=False)
    image = serializers.ImageField(required=False)

    def validate(self, attrs):
        images = list(attrs.get('images') or [])
        if attrs.get('image'):
            images.append(attrs['image'])
        if not images:
            raise serializers.ValidationError({'images': 'At least one proof image is required'})
        return {'images': images}


class DeliveryPricingSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryPricing
        fields = [
            'id', 'under_1km', 'km_1_to_1_5', 'km_1_5_to_2',
            'km_2_to_2_5', 'km_2_5_to_3', 'above_3_per_km', 'created_at',
        ]
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {
            name: {'required': True}
            for name in ('under_1km', 'km_1_to_1_5', 'km_1_5_to_2', 'km_2_to_2_5', 'km_2_5_to_3', 'above_3_per_km')
        }

    def validate(self, attrs):
        bands = [attrs.get(name) for name in ('under_1km', 'km_1_to_1_5', 'km_1_5_to_2', 'km_2_to_2_5', 'km_2_5_to_3')]
        if all(value is not None for value in bands) and bands != sorted(bands):
            raise serializers.ValidationError("Band prices must not decrease with distance")
        return attrs


class OrderRatingSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderRating
        fields = ['id', 'order', 'driver', 'store', 'driver_rating', 'store_rating', 'created_at']
        read_only_fields = fields


class RatingCreateSerializer(serializers.Serializer):
    driver_rating = serializers.IntegerField(min_value=1, max_value=5)
    store_rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)
