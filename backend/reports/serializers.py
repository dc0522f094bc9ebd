from rest_framework import serializers

from reports.models import TransactionReport


class TransactionReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = TransactionReport
        fields = ["id", "order", "category", "detail", "proof_ref", "status", "created_at"]
        read_only_fields = fields


class ReportCreateSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=TransactionReport.CATEGORY_CHOICES)
    detail = serializers.CharField()
    proof = serializers.ImageField(required=False)
