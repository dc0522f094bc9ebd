"""
Map-link geocoding resolver.

Turns a free-text location reference (usually a shortened map link) into
coordinates by walking redirects by hand. Never raises: any network failure
aborts the walk and the caller gets None.

Every request is streamed and its body is read under a deadline measured
from the moment the request was sent, up to `GEOCODER_MAX_BODY_BYTES`. A page
that trickles bytes is cut off once the hop's time is up, so one resolution
costs at most (hop cap + 1) hop timeouts plus one request timeout.
"""

import logging
import time
from typing import Optional
from urllib.parse import urljoin

import requests
from django.conf import settings

from common.utils import Coordinates
from .map_links import extract_direct, extract_from_body, find_meta_refresh

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 8192


def _headers():
    return {"User-Agent": getattr(settings, "GEOCODER_USER_AGENT", "Mozilla/5.0")}


def _read_body(response, deadline: float) -> str:
    """
    Read the body of a streamed response until EOF, the byte cap or the deadline.

    read1() returns whatever a single socket read yields, so a slow sender
    cannot hold the loop past the deadline by more than one read timeout.
    """
    limit = getattr(settings, "GEOCODER_MAX_BODY_BYTES", 512 * 1024)
    chunks = []
    size = 0
    while size < limit:
        if time.monotonic() >= deadline:
            logger.debug("Geocoder body read hit the deadline after %d bytes", size)
            break
        chunk = response.raw.read1(min(READ_CHUNK_SIZE, limit - size), decode_content=True)
        if not chunk:
            break
        chunks.append(chunk)
        size += len(chunk)
    return b"".join(chunks).decode(response.encoding or "utf-8", errors="replace")


def _fetch(session, url: str, timeout: float, deadline: float):
    """One streamed GET without auto-redirect. Returns (location header, body)."""
    with session.get(
        url, allow_redirects=False, timeout=timeout, headers=_headers(), stream=True,
    ) as response:
        location = response.headers.get("Location")
        if location:
            return location, ""
        return None, _read_body(response, deadline)


def _walk_redirects(session, url: str, max_hops: int, timeout: float):
    """
    Follow at most `max_hops` hops without auto-redirect.

    Returns (coordinates, last_url). coordinates is None when the walk ended
    without a result; a network failure is propagated to the caller.
    """
    current = url
    for hop in range(max_hops):
        location, body = _fetch(session, current, timeout, time.monotonic() + timeout)

        if location:
            current = urljoin(current, location)
            logger.debug("Geocoder hop %d -> %s", hop + 1, current)
            coords = extract_direct(current)
            if coords:
                return coords, current
            continue

        refresh = find_meta_refresh(body)
        if refresh:
            current = urljoin(current, refresh)
            coords = extract_direct(current)
            if coords:
                return coords, current
            continue

        return extract_from_body(body), current

    return None, current


def _follow_to_end(session, url: str, timeout: float):
    """
    The final auto-following request: redirects are followed to the end under
    a single deadline, and redirect bodies are never read.

    Returns (final_url, body).
    """
    deadline = time.monotonic() + timeout
    current = url
    for _ in range(requests.models.DEFAULT_REDIRECT_LIMIT):
        location, body = _fetch(session, current, timeout, deadline)
        if not location:
            return current, body
        current = urljoin(current, location)
        if time.monotonic() >= deadline:
            break
    return current, ""


def resolve_coordinates(reference: str, session=None) -> Optional[Coordinates]:
    """
    Resolve a location reference into coordinates.

    1. direct extraction from the literal string (no network)
    2. manual redirect walk, re-extracting at every hop
    3. one final auto-following request on the last address reached

    Returns None when nothing could be read.
    """
    if not reference or not str(reference).strip():
        return None
    reference = str(reference).strip()

    direct = extract_direct(reference)
    if direct:
        return direct

    if not reference.lower().startswith(("http://", "https://")):
        return None

    max_hops = getattr(settings, "GEOCODER_MAX_HOPS", 5)
    timeout = getattr(settings, "GEOCODER_HOP_TIMEOUT", 4)
    http = session or requests.Session()

    try:
        coords, last_url = _walk_redirects(http, reference, max_hops, timeout)
        if coords:
            return coords

        final_url, body = _follow_to_end(http, last_url, timeout)
        return extract_direct(final_url) or extract_from_body(body)
    except requests.RequestException as exc:
        logger.warning("Geocoding aborted for %s: %s", reference, exc)
        return None
    finally:
        if session is None:
            http.close()
