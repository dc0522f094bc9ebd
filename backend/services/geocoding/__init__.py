"""
Geocoding service - map links to coordinates.
"""

from .resolver import resolve_coordinates
from .map_links import extract_direct, extract_from_body

__all__ = [
    "resolve_coordinates",
    "extract_direct",
    "extract_from_body",
]
