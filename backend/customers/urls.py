# customers/urls.py

from django.urls import path

from .views import (
    CustomerOrdersView,
    CustomerActiveOrderView,
    CustomerOrderDetailView,
    CustomerCancelOrderView,
    CustomerFareEstimateView,
    CustomerRateOrderView,
)

app_name = "customers"

urlpatterns = [
    path("orders/", CustomerOrdersView.as_view(), name="orders"),
    path("orders/active/", CustomerActiveOrderView.as_view(), name="active-order"),
    path("orders/estimate/", CustomerFareEstimateView.as_view(), name="estimate"),
    path("orders/<int:order_id>/", CustomerOrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:order_id>/cancel/", CustomerCancelOrderView.as_view(), name="cancel-order"),
    path("orders/<int:order_id>/rating/", CustomerRateOrderView.as_view(), name="rate-order"),
]
