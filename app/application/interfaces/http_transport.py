from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


@dataclass(frozen=True)
class HttpResult:
    """Buffered response of a single outbound GET."""

    status: int
    body: bytes
    content_type: str = ""
    location: str = ""

    @property
    def is_redirect(self) -> bool:
        return self.status in REDIRECT_STATUSES and bool(self.location)


class IHttpTransport(Protocol):
    """Outbound HTTP seam shared by the search relay and the image proxy."""

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        follow_redirects: bool = False,
    ) -> HttpResult:
        """GET `url` and return the buffered response.

        Redirects are returned as-is unless `follow_redirects` is set; only
        fixed, trusted endpoints should set it. Non-2xx statuses are returned,
        not raised. Connection errors, timeouts and unsendable requests raise
        TransportError.
        """
        ...
