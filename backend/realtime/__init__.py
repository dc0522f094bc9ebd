"""
Realtime app: pushes "orders changed" events to dashboards over WebSockets.

Key Components:
    - notifications.py: broadcast helpers, scheduled on transaction commit
    - consumers/: OrdersConsumer joined to the `orders` group
    - middleware.py: JWT (querystring) or session auth for WebSocket scopes
"""
