"""
Pricing service - distance and fare estimation.

This module handles:
    - Road distance lookup (OSRM) with haversine fallback
    - Tiered fare computation from the current DeliveryPricing
"""

from .estimator import FareEstimate, estimate_distance_km, estimate_fare
from .fare import fare_for_distance, flat_fare

__all__ = [
    "FareEstimate",
    "estimate_distance_km",
    "estimate_fare",
    "fare_for_distance",
    "flat_fare",
]
