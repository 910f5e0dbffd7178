from __future__ import annotations

from types import SimpleNamespace

from app.application.interfaces import IRelayAdapters
from app.infrastructure.adapters import (
    AiohttpTransport,
    AllowListDomainGate,
    PinterestImageSearch,
)
from app.core.config import settings


def get_relay_adapter_bundle() -> IRelayAdapters:
    """Provide the adapters container shared by the search and image routes.

    The allow-list and transport policy come from settings; both are read once
    per bundle and not mutated afterwards.
    """
    transport = AiohttpTransport(
        timeout=settings.upstream_timeout,
        retry_attempts=settings.upstream_retry_attempts,
        retry_backoff=settings.upstream_retry_backoff,
    )
    return SimpleNamespace(
        domain_gate=AllowListDomainGate(settings.allowed_domains),
        transport=transport,
        image_search=PinterestImageSearch(transport, settings.upstream_search_url),
    )
