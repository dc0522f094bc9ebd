from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from accounts.permissions import IsStore
from common.responses import success_response
from orders.serializers import OrderSerializer, StoreRejectSerializer
from services import order_management
from stores import services
from stores.serializers import PageQuerySerializer, StoreAvailabilitySerializer


class StoreAvailabilityView(APIView):
    """
    GET: Store's region, open/closed status and pickup location.
    PATCH: Update them.
    """
    permission_classes = [IsAuthenticated, IsStore]

    def get(self, request):
        availability = services.get_availability(request.user)
        return success_response(availability=StoreAvailabilitySerializer(availability).data)

    def patch(self, request):
        serializer = StoreAvailabilitySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        availability = services.update_availability(request.user, serializer.validated_data)
        return success_response(
            "Availability updated",
            availability=StoreAvailabilitySerializer(availability).data,
        )


class _StoreOrderListView(APIView):
    permission_classes = [IsAuthenticated, IsStore]
    history = False

    def get(self, request):
        query = PageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        page, per_page = query.validated_data["page"], query.validated_data["per_page"]

        queryset = order_management.list_store_orders(request.user, history=self.history)
        start = (page - 1) * per_page
        orders = queryset[start:start + per_page]

        return success_response(
            orders=OrderSerializer(orders, many=True).data,
            page=page,
            per_page=per_page,
            total=queryset.count(),
        )


class StoreOrdersView(_StoreOrderListView):
    """GET: Orders still in progress for this store."""


class StoreOrderHistoryView(_StoreOrderListView):
    """GET: Every order this store ever received."""
    history = True


class StoreAcceptOrderView(APIView):
    permission_classes = [IsAuthenticated, IsStore]

    def post(self, request, order_id: int):
        result = order_management.accept_order(request.user, order_id)
        return success_response(result.message, order=OrderSerializer(result.order).data)


class StoreRejectOrderView(APIView):
    permission_classes = [IsAuthenticated, IsStore]

    def post(self, request, order_id: int):
        serializer = StoreRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = order_management.reject_order(
            request.user, order_id, serializer.validated_data.get("reason", "")
        )
        return success_response(result.message, order=OrderSerializer(result.order).data)


class StoreOrderReadyView(APIView):
    permission_classes = [IsAuthenticated, IsStore]

    def post(self, request, order_id: int):
        result = order_management.mark_ready(request.user, order_id)
        return success_response(result.message, order=OrderSerializer(result.order).data)
