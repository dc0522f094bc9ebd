from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import IsAdminRole, IsTicketHolder
from common.responses import success_response
from services import ledger
from services.exceptions import NotFoundError, OrderValidationError
from tickets.models import TicketOrder
from tickets.serializers import (
    TicketGrantSerializer,
    TicketOrderCreateSerializer,
    TicketOrderSerializer,
    TicketTransactionSerializer,
)


class TicketBalanceView(APIView):
    """
    GET: Driver/store ticket balance and last 20 ledger entries.
    """
    permission_classes = [IsAuthenticated, IsTicketHolder]

    def get(self, request):
        return success_response(
            balance=ledger.get_balance(request.user),
            transactions=TicketTransactionSerializer(ledger.recent_transactions(request.user), many=True).data,
        )


class TicketOrdersView(APIView):
    """
    GET: Caller's ticket purchase orders.
    POST: Request a purchase; an admin marks it paid later.
    """
    permission_classes = [IsAuthenticated, IsTicketHolder]

    def get(self, request):
        orders = TicketOrder.objects.filter(user=request.user)
        return success_response(orders=TicketOrderSerializer(orders, many=True).data)

    def post(self, request):
        serializer = TicketOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ticket_order = ledger.create_ticket_order(request.user, serializer.validated_data["quantity"])
        return success_response(
            "Ticket order created",
            status=status.HTTP_201_CREATED,
            order=TicketOrderSerializer(ticket_order).data,
        )


class AdminGrantTicketsView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request):
        serializer = TicketGrantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = User.objects.filter(id=data["user_id"]).first()
        if user is None:
            raise NotFoundError("User not found")
        if user.role not in (User.DRIVER, User.STORE):
            raise OrderValidationError("Only drivers and stores hold tickets")

        balance = ledger.grant(user, data["amount"], data["description"], reference_id="GRANT")
        return success_response("Tickets granted", user_id=user.id, amount=data["amount"], balance=balance)


class AdminMarkTicketOrderPaidView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def post(self, request, ticket_order_id: int):
        ticket_order = ledger.purchase(ticket_order_id)
        return success_response("Ticket order paid", order=TicketOrderSerializer(ticket_order).data)


class AdminTicketBalanceView(APIView):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get(self, request, user_id: int):
        info = ledger.balance_for_user_id(user_id)
        return success_response(
            user_id=info["user_id"],
            balance=info["balance"],
            transactions=TicketTransactionSerializer(info["transactions"], many=True).data,
        )
