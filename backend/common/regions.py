"""
Campus regions used to match orders with drivers.

OTHER is a wildcard: it matches every region, from either side.
"""

from typing import List, Optional

CAMPUS_SUTOMO = "CAMPUS_SUTOMO"
CAMPUS_TUNTUNGAN = "CAMPUS_TUNTUNGAN"
CAMPUS_PANCING = "CAMPUS_PANCING"
OTHER = "OTHER"

REGION_CHOICES = [
    (CAMPUS_SUTOMO, "Campus Sutomo"),
    (CAMPUS_TUNTUNGAN, "Campus Tuntungan"),
    (CAMPUS_PANCING, "Campus Pancing"),
    (OTHER, "Other area"),
]

REGIONS = [value for value, _ in REGION_CHOICES]


def regions_match(a: Optional[str], b: Optional[str]) -> bool:
    """Reflexive, symmetric match with OTHER as wildcard. Missing regions never match."""
    if not a or not b:
        return False
    if a == OTHER or b == OTHER:
        return True
    return a == b


def matching_regions(region: str) -> Optional[List[str]]:
    """
    Order regions a driver in `region` may serve.

    Returns None when every region matches (driver declared OTHER).
    """
    if region == OTHER:
        return None
    return [region, OTHER]
