"""
Geographic utility functions.

This module provides core geospatial calculations used throughout the application.
"""

from dataclasses import dataclass
from math import radians, cos, sin, asin, sqrt


@dataclass(frozen=True)
class Coordinates:
    """A resolved latitude/longitude pair."""
    lat: float
    lng: float

    @classmethod
    def from_values(cls, lat, lng):
        """Build from nullable model/decimal values; None if either side is missing."""
        if lat is None or lng is None:
            return None
        return cls(float(lat), float(lng))

    def is_valid(self) -> bool:
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0

    def as_dict(self):
        return {"lat": self.lat, "lng": self.lng}


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two points in meters using Haversine formula.
    
    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point
    
    Returns:
        Distance in meters
    """
    lat1, lon1, lat2, lon2 = map(radians, [float(lat1), float(lon1), float(lat2), float(lon2)])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * asin(sqrt(a))
    r = 6371000  # Earth's radius in meters
    return c * r


def haversine_km(origin: Coordinates, destination: Coordinates) -> float:
    """Great-circle distance between two resolved points, in kilometers."""
    return calculate_distance(origin.lat, origin.lng, destination.lat, destination.lng) / 1000.0
