"""Common utility functions."""

from .geo import Coordinates, calculate_distance, haversine_km

__all__ = [
    "Coordinates",
    "calculate_distance",
    "haversine_km",
]
