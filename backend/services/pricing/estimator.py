"""Distance and fare estimation for a pickup/dropoff pair."""

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings

from common.utils import Coordinates, haversine_km
from orders.models import DeliveryPricing
from services.exceptions import UpstreamDegradedError
from .fare import fare_for_distance, flat_fare, round_distance
from .routing import road_distance_km

logger = logging.getLogger(__name__)

SOURCE_ROUTING = "routing"
SOURCE_HAVERSINE = "haversine"
SOURCE_FLAT = "flat"


@dataclass
class FareEstimate:
    distance_km: Optional[float]
    fare: int
    source: str

    def as_dict(self):
        return {
            "distance_km": self.distance_km,
            "fare": self.fare,
            "source": self.source,
        }


def estimate_distance_km(origin: Coordinates, destination: Coordinates, session=None):
    """
    Returns (distance_km rounded to 2 decimals, source).

    Road distance when the routing service answers, otherwise straight-line
    distance times the detour factor.
    """
    try:
        distance = road_distance_km(origin, destination, session=session)
        source = SOURCE_ROUTING
    except UpstreamDegradedError as exc:
        logger.info("Falling back to haversine estimate: %s", exc)
        factor = getattr(settings, "ROAD_DETOUR_FACTOR", 1.3)
        distance = haversine_km(origin, destination) * factor
        source = SOURCE_HAVERSINE
    return round_distance(distance), source


def estimate_fare(origin: Optional[Coordinates], destination: Optional[Coordinates], pricing=None, session=None) -> FareEstimate:
    """
    Estimate the delivery fare between two points.

    `pricing` defaults to the current DeliveryPricing record. Missing
    coordinates give the flat fare with an unknown distance.
    """
    if pricing is None:
        pricing = DeliveryPricing.current()

    if origin is None or destination is None:
        return FareEstimate(distance_km=None, fare=flat_fare(pricing), source=SOURCE_FLAT)

    distance, source = estimate_distance_km(origin, destination, session=session)
    return FareEstimate(distance_km=distance, fare=fare_for_distance(distance, pricing), source=source)
