"""
URL utility functions.

Helpers for building the upstream search request URL and the same-origin
proxy links handed back to clients.
"""

import json
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, quote_plus, urlsplit

PROXY_PATH = "/image"


def build_search_payload(query: str, bookmark: str) -> Dict[str, Any]:
    """
    Build the `data` payload for the upstream search resource.

    `bookmarks` is always a one-element list holding the pagination token,
    even when the token is empty.
    """
    return {"options": {"query": query, "bookmarks": [bookmark]}}


def build_search_url(endpoint: str, payload: Dict[str, Any]) -> str:
    """
    Serialize `payload` compactly and append it as the `data` query parameter.

    Args:
        endpoint: Upstream resource URL without a query string
        payload: JSON-serializable request options

    Returns:
        Full request URL, e.g. ``<endpoint>?data=%7B%22options%22...``

    Raises:
        TypeError, ValueError: If the payload cannot be serialized
    """
    data = json.dumps(payload, separators=(",", ":"), sort_keys=True)
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}data={quote_plus(data)}"


def build_proxy_url(base_url: str, image_url: str) -> str:
    """Return ``<base_url>/image?url=<form-encoded image_url>``."""
    return f"{base_url.rstrip('/')}{PROXY_PATH}?url={quote_plus(image_url)}"


def extract_proxied_url(proxy_url: str) -> Optional[str]:
    """Decode the original image URL back out of a proxy link."""
    values = parse_qs(urlsplit(proxy_url).query).get("url")
    return values[0] if values else None
