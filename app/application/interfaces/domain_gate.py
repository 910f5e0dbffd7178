from __future__ import annotations

from typing import Protocol


class IDomainGate(Protocol):
    """Decides whether a URL may be fetched or handed out as a proxy target."""

    def is_allowed(self, raw_url: str) -> bool:
        """Return True iff the URL's host is allow-listed. Never raises."""
        ...
