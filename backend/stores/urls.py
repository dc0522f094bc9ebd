from django.urls import path

from .views import (
    StoreAvailabilityView,
    StoreOrdersView,
    StoreOrderHistoryView,
    StoreAcceptOrderView,
    StoreRejectOrderView,
    StoreOrderReadyView,
)

urlpatterns = [
    path("availability/", StoreAvailabilityView.as_view(), name="store-availability"),
    path("orders/", StoreOrdersView.as_view(), name="store-orders"),
    path("orders/history/", StoreOrderHistoryView.as_view(), name="store-order-history"),
    path("orders/<int:order_id>/accept/", StoreAcceptOrderView.as_view(), name="store-accept-order"),
    path("orders/<int:order_id>/reject/", StoreRejectOrderView.as_view(), name="store-reject-order"),
    path("orders/<int:order_id>/ready/", StoreOrderReadyView.as_view(), name="store-order-ready"),
]
