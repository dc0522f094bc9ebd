"""Road distance lookup against an OSRM-compatible routing service."""

import logging

import requests
from django.conf import settings

from common.utils import Coordinates
from services.exceptions import UpstreamDegradedError

logger = logging.getLogger(__name__)


def road_distance_km(origin: Coordinates, destination: Coordinates, session=None) -> float:
    """
    Driving distance in km between two points.

    Raises UpstreamDegradedError when routing is disabled, the service fails
    or times out, or no route comes back. Callers fall back to haversine.
    """
    if not getattr(settings, "ROUTING_ENABLED", True):
        raise UpstreamDegradedError("Routing lookup disabled")

    base = getattr(settings, "ROUTING_SERVICE_URL", "https://router.project-osrm.org").rstrip("/")
    url = (
        f"{base}/route/v1/driving/"
        f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
    )
    http = session or requests

    try:
        response = http.get(
            url,
            params={"overview": "false"},
            timeout=getattr(settings, "ROUTING_TIMEOUT", 4),
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise UpstreamDegradedError(f"Routing lookup failed: {exc}") from exc

    routes = payload.get("routes") or []
    if payload.get("code", "Ok") != "Ok" or not routes:
        raise UpstreamDegradedError("Routing service returned no route")

    distance_m = routes[0].get("distance")
    if distance_m is None:
        raise UpstreamDegradedError("Routing service returned no distance")
    return float(distance_m) / 1000.0
