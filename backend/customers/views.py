# customers/views.py

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from accounts.permissions import IsCustomer
from common.responses import success_response
from orders.serializers import (
    FareEstimateRequestSerializer,
    OrderCreateSerializer,
    OrderRatingSerializer,
    OrderSerializer,
    RatingCreateSerializer,
)
from services import order_management
from services.geocoding import resolve_coordinates
from services.pricing import estimate_fare


class CustomerOrdersView(APIView):
    """
    GET: Customer's orders, newest first.
    POST: Create an order (registered store, external store or ride).
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request):
        orders = order_management.list_customer_orders(request.user)
        return success_response(orders=OrderSerializer(orders, many=True).data)

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = order_management.create_order(request.user, serializer.validated_data)

        return success_response(
            result.message,
            status=status.HTTP_201_CREATED,
            order=OrderSerializer(result.order).data,
            **result.extra,
        )


class CustomerActiveOrderView(APIView):
    """
    GET: Polling endpoint for the customer's current non-terminal order.
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request):
        order = order_management.get_active_customer_order(request.user)
        if order is None:
            return success_response("No active order", has_active_order=False, order=None)
        return success_response(has_active_order=True, order=OrderSerializer(order).data)


class CustomerOrderDetailView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request, order_id: int):
        order = order_management.get_customer_order(request.user, order_id)
        return success_response(order=OrderSerializer(order).data)


class CustomerCancelOrderView(APIView):
    """
    POST: Customer cancels an order that no one has started on yet.
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def post(self, request, order_id: int):
        result = order_management.cancel_by_customer(request.user, order_id)
        return success_response(result.message, order=OrderSerializer(result.order).data)


class CustomerFareEstimateView(APIView):
    """
    POST: Preview distance and fare between two map links before ordering.
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def post(self, request):
        serializer = FareEstimateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        origin = resolve_coordinates(serializer.validated_data["pickup_map_link"])
        destination = resolve_coordinates(serializer.validated_data["dropoff_map_link"])
        estimate = estimate_fare(origin, destination)

        return success_response(
            pickup=origin.as_dict() if origin else None,
            dropoff=destination.as_dict() if destination else None,
            **estimate.as_dict(),
        )


class CustomerRateOrderView(APIView):
    """
    GET: The rating left on this order, if any.
    POST: Rate the driver (and the store for registered-store orders) once the order is completed.
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request, order_id: int):
        rating = order_management.get_order_rating(request.user, order_id)
        return success_response(rating=OrderRatingSerializer(rating).data if rating else None)

    def post(self, request, order_id: int):
        serializer = RatingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rating = order_management.rate_order(
            request.user,
            order_id,
            serializer.validated_data["driver_rating"],
            serializer.validated_data.get("store_rating"),
        )

        return success_response(
            "Thanks for your rating",
            status=status.HTTP_201_CREATED,
            rating=OrderRatingSerializer(rating).data,
        )
