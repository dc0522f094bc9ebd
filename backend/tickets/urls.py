from django.urls import path

from .views import (
    TicketBalanceView,
    TicketOrdersView,
    AdminGrantTicketsView,
    AdminMarkTicketOrderPaidView,
    AdminTicketBalanceView,
)

urlpatterns = [
    path("", TicketBalanceView.as_view(), name="ticket-balance"),
    path("orders/", TicketOrdersView.as_view(), name="ticket-orders"),
    path("admin/grant/", AdminGrantTicketsView.as_view(), name="ticket-admin-grant"),
    path("admin/orders/<int:ticket_order_id>/mark-paid/", AdminMarkTicketOrderPaidView.as_view(), name="ticket-admin-mark-paid"),
    path("admin/balance/<int:user_id>/", AdminTicketBalanceView.as_view(), name="ticket-admin-balance"),
]
