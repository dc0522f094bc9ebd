from django.conf import settings
from rest_framework import serializers

from tickets.models import TicketOrder, TicketTransaction


class TicketTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = TicketTransaction
        fields = ["id", "type", "amount", "description", "reference_id", "created_at"]
        read_only_fields = fields


class TicketOrderSerializer(serializers.ModelSerializer):
    class Meta:
        model = TicketOrder
        fields = [
            "id", "quantity", "price_per_ticket", "total_amount", "status",
            "payment_method", "payment_payload", "created_at", "paid_at",
        ]
        read_only_fields = fields


class TicketOrderCreateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()

    def validate_quantity(self, value):
        minimum = getattr(settings, "TICKET_MIN_PURCHASE", 5)
        if value < minimum:
            raise serializers.ValidationError(f"Minimum purchase is {minimum} tickets")
        return value


class TicketGrantSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    amount = serializers.IntegerField(min_value=1, default=3)
    description = serializers.CharField(max_length=255, default="Initial grant")
