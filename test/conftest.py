"""
Shared fixtures for the relay tests.
"""

import logging
from types import SimpleNamespace
from typing import Mapping, Optional

import pytest

from app.application.interfaces import HttpResult, SearchPage
from app.core.exceptions import TransportError
from app.infrastructure.adapters.domain_gate import AllowListDomainGate

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)

DEFAULT_ALLOWED_DOMAINS = ("pinimg.com", "i.pinimg.com", "pinterest.com")

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


class FakeTransport:
    """IHttpTransport stand-in that records every call.

    `responses` maps a URL (or URL prefix) to an HttpResult or an exception to
    raise. Unmatched URLs fall back to `default`.
    """

    def __init__(self, responses=None, default: Optional[HttpResult] = None):
        self.responses = dict(responses or {})
        self.default = default or HttpResult(status=404, body=b"")
        self.calls: list[dict] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        follow_redirects: bool = False,
    ) -> HttpResult:
        self.calls.append(
            {"url": url, "headers": dict(headers or {}), "follow_redirects": follow_redirects}
        )
        outcome = self.responses.get(url)
        if outcome is None:
            for prefix, value in self.responses.items():
                if url.startswith(prefix):
                    outcome = value
                    break
        if outcome is None:
            outcome = self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeImageSearch:
    def __init__(self, page: Optional[SearchPage] = None, error: Exception | None = None):
        self.page = page or SearchPage()
        self.error = error
        self.calls: list[dict] = []

    async def search(self, query: str, bookmark: str, *, csrf_token=None) -> SearchPage:
        self.calls.append({"query": query, "bookmark": bookmark, "csrf_token": csrf_token})
        if self.error is not None:
            raise self.error
        return self.page


@pytest.fixture
def domain_gate():
    return AllowListDomainGate(DEFAULT_ALLOWED_DOMAINS)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def failing_transport():
    return FakeTransport(default=TransportError("connection refused"))  # type: ignore[arg-type]


@pytest.fixture
def fake_image_search():
    return FakeImageSearch()


@pytest.fixture
def fake_adapters(domain_gate, fake_transport, fake_image_search):
    """Adapters container matching IRelayAdapters, wired to fakes."""
    return SimpleNamespace(
        domain_gate=domain_gate,
        transport=fake_transport,
        image_search=fake_image_search,
    )


@pytest.fixture(name="FakeTransport")
def fake_transport_class():
    """The FakeTransport class, for tests that build several transports."""
    return FakeTransport
