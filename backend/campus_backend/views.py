import redis
from django.conf import settings
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from channels.layers import get_channel_layer

from orders.models import Order
from campus_backend.celery import app as celery_app


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """Health check endpoint for monitoring system status"""

    health_status = {
        "status": "healthy",
        "timestamp": timezone.now().isoformat(),
        "services": {}
    }

    def mark(name, error=None):
        if error is None:
            health_status["services"][name] = "healthy"
        else:
            health_status["services"][name] = f"unhealthy: {error}"
            health_status["status"] = "unhealthy"

    # Database check
    try:
        Order.objects.exists()
        mark("database")
    except Exception as e:
        mark("database", e)

    # Redis check
    try:
        redis.Redis.from_url(settings.REDIS_URL, socket_timeout=3).ping()
        mark("redis")
    except Exception as e:
        mark("redis", e)

    # Channel layer check
    try:
        mark("channels", None if get_channel_layer() is not None else "no channel layer")
    except Exception as e:
        mark("channels", e)

    # Celery check
    try:
        registered = "tickets.tasks.reconcile_ticket_balances_task" in celery_app.tasks
        mark("celery", None if registered else "task not registered")
    except Exception as e:
        mark("celery", e)

    status_code = (
        status.HTTP_200_OK
        if health_status["status"] == "healthy"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )

    return Response(health_status, status=status_code)
