"""
Coordinate extraction from map links and map page bodies.

All extractors return a valid Coordinates or None, never raise.
Pairs outside lat [-90, 90] / lng [-180, 180] are discarded.
"""

import re
from typing import Optional
from urllib.parse import unquote

from common.utils import Coordinates

_NUM = r"([+-]?\d+(?:\.\d+)?)"

# q=3.5952,98.6722 (comma may arrive URL-encoded as %2C)
QUERY_PAIR_RE = re.compile(r"(?:^|[?&;/])q=" + _NUM + r"\s*(?:,|%2C)\s*" + _NUM, re.IGNORECASE)
# .../@3.5952,98.6722,17z
AT_PAIR_RE = re.compile(r"@" + _NUM + r"," + _NUM)
# vendor data blob: ...!3d3.5952!4d98.6722
BANG_PAIR_RE = re.compile(r"!3d" + _NUM + r"!4d" + _NUM)
META_REFRESH_RE = re.compile(
    r"""<meta[^>]+http-equiv=["']?refresh["']?[^>]*content=["']?\s*\d*\s*;?\s*url=([^"'>\s]+)""",
    re.IGNORECASE,
)


def _to_coordinates(match) -> Optional[Coordinates]:
    if not match:
        return None
    try:
        coords = Coordinates(float(match.group(1)), float(match.group(2)))
    except (TypeError, ValueError):
        return None
    return coords if coords.is_valid() else None


def _last_match(pattern, text: str):
    last = None
    for last in pattern.finditer(text):
        pass
    return last


def extract_from_query(text: str) -> Optional[Coordinates]:
    return _to_coordinates(QUERY_PAIR_RE.search(text))


def extract_from_at_marker(text: str, last: bool = False) -> Optional[Coordinates]:
    match = _last_match(AT_PAIR_RE, text) if last else AT_PAIR_RE.search(text)
    return _to_coordinates(match)


def extract_from_bang_marker(text: str) -> Optional[Coordinates]:
    return _to_coordinates(_last_match(BANG_PAIR_RE, text))


def extract_direct(url: str) -> Optional[Coordinates]:
    """Read coordinates straight off a link: query pair first, then @lat,lng."""
    if not url:
        return None
    return extract_from_query(url) or extract_from_at_marker(url)


def extract_from_body(body: str) -> Optional[Coordinates]:
    """
    Scan a fetched page in priority order:
    query pair, last !3d/!4d marker, last @lat,lng camera marker.
    """
    if not body:
        return None
    decoded = unquote(body)
    return (
        extract_from_query(decoded)
        or extract_from_bang_marker(decoded)
        or extract_from_at_marker(decoded, last=True)
    )


def find_meta_refresh(body: str) -> Optional[str]:
    if not body:
        return None
    match = META_REFRESH_RE.search(body)
    if not match:
        return None
    return match.group(1).replace("&amp;", "&")
