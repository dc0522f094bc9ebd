from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from accounts.permissions import IsDriver
from common.responses import success_response
from drivers import services
from drivers.serializers import DriverAvailabilitySerializer
from orders.serializers import DriverCancelSerializer, OrderSerializer, ProofUploadSerializer
from services import matching, order_management


class DriverAvailabilityView(APIView):
    """
    GET: Driver's declared region and status.
    PATCH: Update region / ACTIVE-INACTIVE / note / location link.
    """
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        availability = services.get_availability(request.user)
        return success_response(availability=DriverAvailabilitySerializer(availability).data)

    def patch(self, request):
        serializer = DriverAvailabilitySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        availability = services.update_availability(request.user, serializer.validated_data)

        return success_response(
            "Availability updated",
            availability=DriverAvailabilitySerializer(availability).data,
        )


class AvailableOrdersView(APIView):
    """
    GET: Open orders in the driver's region, with fare estimates, plus
    whether the driver already holds an order and their ticket balance.
    """
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        result = matching.list_available_orders(request.user)

        orders = []
        for item in result.orders:
            data = OrderSerializer(item.order).data
            data["distance_km"] = item.distance_km
            data["fare"] = item.fare
            orders.append(data)

        return success_response(
            result.message,
            orders=orders,
            has_active=result.has_active,
            ticket_balance=result.balance,
        )


class DriverActiveOrderView(APIView):
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        order = order_management.get_active_driver_order(request.user)
        if order is None:
            return success_response("No active order", has_active_order=False, order=None)
        return success_response(has_active_order=True, order=OrderSerializer(order).data)


class DriverOrderHistoryView(APIView):
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request):
        orders = order_management.list_driver_history(request.user)
        return success_response(orders=OrderSerializer(orders, many=True).data)


class DriverOrderDetailView(APIView):
    permission_classes = [IsAuthenticated, IsDriver]

    def get(self, request, order_id: int):
        order = order_management.get_driver_order(request.user, order_id)
        return success_response(order=OrderSerializer(order).data)


class ClaimOrderView(APIView):
    """
    POST: Atomically take an open order. Exactly one driver wins.
    """
    permission_classes = [IsAuthenticated, IsDriver]

    def post(self, request, order_id: int):
        order = matching.claim_order(request.user, order_id)
        return success_response("Order claimed", order=OrderSerializer(order).data)


class PickupProofView(APIView):
    permission_classes = [IsAuthenticated, IsDriver]

    def post(self, request, order_id: int):
        serializer = ProofUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = order_management.submit_pickup_proof(
            request.user, order_id, serializer.validated_data["images"]
        )
        return success_response(result.message, order=OrderSerializer(result.order).data)


class DeliveryProofView(APIView):
    """
    POST: Delivery photo(s). Completes the order and spends the tickets.
    """
    permission_classes = [IsAuthenticated, IsDriver]

    def post(self, request, order_id: int):
        serializer = ProofUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = order_management.submit_delivery_proof(
            request.user, order_id, serializer.validated_data["images"]
        )
        return success_response(result.message, order=OrderSerializer(result.order).data)


class DriverCancelOrderView(APIView):
    """
    POST: Give up an external-store order with a reason code.
    """
    permission_classes = [IsAuthenticated, IsDriver]

    def post(self, request, order_id: int):
        serializer = DriverCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = order_management.cancel_external_by_driver(
            request.user,
            order_id,
            serializer.validated_data["reason"],
            serializer.validated_data.get("note", ""),
        )
        return success_response(result.message, order=OrderSerializer(result.order).data)
