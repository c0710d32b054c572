"""URL handling utilities."""

from __future__ import annotations

import logging
from urllib.parse import quote_plus, urlparse

logger = logging.getLogger(__name__)

WEB_SEARCH_URL = "https://www.google.com/search?q="


def extract_domain(url: str) -> str:
    """Extract the lower-cased host name from a URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The host (without 'www.' prefix), or "" if extraction fails.
    """
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        logger.debug(f"Could not parse url {url!r}")
        return ""
    hostname = hostname.lower()
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def is_valid_url(url: str) -> bool:
    """Return True if *url* is an absolute http(s) URL with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def host_matches(host: str, domain: str) -> bool:
    """Return True if *host* equals *domain* or is one of its subdomains."""
    host = host.lower()
    domain = domain.lower()
    return host == domain or host.endswith("." + domain)


def web_search_url(query: str) -> str:
    """Build a generic web-search URL for *query*."""
    return WEB_SEARCH_URL + quote_plus(query)
