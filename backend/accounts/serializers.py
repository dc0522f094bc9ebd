from rest_framework import serializers

from .models import User


class UserBasicSerializer(serializers.ModelSerializer):
    """
    Basic party representation used inside order responses
    (customer, driver and store contact details).
    """
    class Meta:
        model = User
        fields = ["id", "username", "email", "phone_number", "role"]
        read_only_fields = fields
