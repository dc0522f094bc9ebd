from rest_framework import serializers

from stores.models import StoreAvailability


class StoreAvailabilitySerializer(serializers.ModelSerializer):
    class Meta:
        model = StoreAvailability
        fields = [
            "id",
            "store_name",
            "address",
            "region",
            "status",
            "location_url",
            "latitude",
            "longitude",
            "updated_at",
        ]
        read_only_fields = ["id", "latitude", "longitude", "updated_at"]


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    per_page = serializers.IntegerField(min_value=1, max_value=50, default=10)
