"""
Reporting service - disputes on orders.
"""

from .reports import file_report, list_reports

__all__ = [
    "file_report",
    "list_reports",
]
