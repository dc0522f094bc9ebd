"""WebSocket URL routing for the realtime app."""

from django.urls import re_path

from .consumers.orders_consumer import OrdersConsumer

websocket_urlpatterns = [
    # URL: ws://localhost:8000/ws/orders/?token=<jwt>
    re_path(
        r"ws/orders/$",
        OrdersConsumer.as_asgi(),
        name="orders-ws"
    ),
]
