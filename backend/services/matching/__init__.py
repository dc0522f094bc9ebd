"""
Matching service - which drivers see which orders, and who gets one.

This module handles:
    - Listing open orders for a driver's declared region (fare-enriched)
    - The atomic claim
"""

from .claims import AvailableOrder, AvailableOrders, claim_order, list_available_orders

__all__ = [
    "AvailableOrder",
    "AvailableOrders",
    "claim_order",
    "list_available_orders",
]
