from django.urls import path

from .views import OrderReportsView

urlpatterns = [
    path("orders/<int:order_id>/reports/", OrderReportsView.as_view(), name="order-reports"),
]
