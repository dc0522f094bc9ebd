from rest_framework import serializers

from drivers.models import DriverAvailability


class DriverAvailabilitySerializer(serializers.ModelSerializer):
    """
    Driver's availability as shown to the driver; also validates PATCH bodies.
    """
    username = serializers.CharField(source="user.username", read_only=True)

    class Meta:
        model = DriverAvailability
        fields = [
            "id",
            "username",
            "region",
            "status",
            "location_url",
            "latitude",
            "longitude",
            "note",
            "updated_at",
        ]
        read_only_fields = ["id", "username", "latitude", "longitude", "updated_at"]
