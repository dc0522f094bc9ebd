"""Uniform success envelope for API responses."""

from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(message: str = "", status: int = http_status.HTTP_200_OK, **data) -> Response:
    """
    Wrap payload data in the success envelope:
    {"success": true, "message": ..., "data": {...}}
    """
    return Response(
        {
            "success": True,
            "message": message,
            "data": data,
        },
        status=status,
    )
