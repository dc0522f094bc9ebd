from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from common.responses import success_response
from reports.serializers import ReportCreateSerializer, TransactionReportSerializer
from services import reporting


class OrderReportsView(APIView):
    """
    GET: Reports the caller filed on this order.
    POST: File a report (max two per order per reporter).
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id: int):
        reports = reporting.list_reports(request.user, order_id)
        return success_response(reports=TransactionReportSerializer(reports, many=True).data)

    def post(self, request, order_id: int):
        serializer = ReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        report = reporting.file_report(
            request.user,
            order_id,
            serializer.validated_data["category"],
            serializer.validated_data["detail"],
            proof=serializer.validated_data.get("proof"),
        )
        return success_response(
            "Report submitted",
            status=status.HTTP_201_CREATED,
            report=TransactionReportSerializer(report).data,
        )
