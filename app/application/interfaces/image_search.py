from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


@dataclass
class SearchPage:
    """One page of upstream hits: original image URLs in upstream order."""

    image_urls: List[str] = field(default_factory=list)
    bookmark: str = ""


class IImageSearch(Protocol):
    """Adapter for a third-party image search API.

    The application layer filters and rewrites what this returns; it should
    not know about the concrete provider's wire format.
    """

    async def search(
        self, query: str, bookmark: str, *, csrf_token: Optional[str] = None
    ) -> SearchPage:
        """Return the raw image URLs for one page of results."""
        ...
