from django.urls import path
from .views import (
    DriverAvailabilityView,
    AvailableOrdersView,
    DriverActiveOrderView,
    DriverOrderHistoryView,
    DriverOrderDetailView,
    ClaimOrderView,
    PickupProofView,
    DeliveryProofView,
    DriverCancelOrderView,
)

urlpatterns = [
    path("availability/", DriverAvailabilityView.as_view(), name="driver-availability"),
    path("orders/available/", AvailableOrdersView.as_view(), name="driver-available-orders"),
    path("orders/active/", DriverActiveOrderView.as_view(), name="driver-active-order"),
    path("orders/history/", DriverOrderHistoryView.as_view(), name="driver-history"),
    path("orders/<int:order_id>/", DriverOrderDetailView.as_view(), name="driver-order-detail"),
    path("orders/<int:order_id>/claim/", ClaimOrderView.as_view(), name="driver-claim-order"),
    path("orders/<int:order_id>/pickup-proof/", PickupProofView.as_view(), name="driver-pickup-proof"),
    path("orders/<int:order_id>/delivery-proof/", DeliveryProofView.as_view(), name="driver-delivery-proof"),
    path("orders/<int:order_id>/cancel/", DriverCancelOrderView.as_view(), name="driver-cancel-order"),
]
