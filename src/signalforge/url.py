"""URL handling utilities."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def extract_host(url: str) -> str:
    """Extract the hostname from a URL.

    Unlike a display domain, the hostname is kept verbatim (``www.`` included)
    so that origin identifiers stay stable across runs.

    Args:
        url: The URL to extract the hostname from.

    Returns:
        The lower-cased hostname, or the raw URL if none can be parsed.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        logger.debug(f"Could not get hostname from url {url}")
        return url
    return hostname
