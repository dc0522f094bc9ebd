"""
Tiered fare table.

Bands are half-open on the upper end, so exactly 1.00 km falls into the
1-1.5 km band. Beyond 3 km the 2.5-3 km price is topped up per extra km.
"""

from decimal import Decimal, ROUND_HALF_UP

DEFAULT_BASE_FARE = 4000
DEFAULT_PER_KM = 2000


def round_half_up(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_distance(distance_km) -> float:
    return float(Decimal(str(distance_km)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def fare_for_distance(distance_km: float, pricing=None) -> int:
    d = round_distance(distance_km)

    if pricing is None:
        return max(DEFAULT_BASE_FARE, round_half_up(DEFAULT_BASE_FARE + Decimal(str(d)) * DEFAULT_PER_KM))

    if d < 1:
        return pricing.under_1km
    if d < 1.5:
        return pricing.km_1_to_1_5
    if d < 2:
        return pricing.km_1_5_to_2
    if d < 2.5:
        return pricing.km_2_to_2_5
    if d < 3:
        return pricing.km_2_5_to_3
    extra = Decimal(str(d)) - Decimal("3")
    return pricing.km_2_5_to_3 + round_half_up(extra * pricing.above_3_per_km)


def flat_fare(pricing=None) -> int:
    """Fare used when the distance cannot be computed."""
    if pricing is None:
        return DEFAULT_BASE_FARE
    return pricing.under_1km

