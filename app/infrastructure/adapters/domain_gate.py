from __future__ import annotations

import logging
from typing import Iterable, Tuple
from urllib.parse import urlsplit

from app.application.interfaces import IDomainGate

logger = logging.getLogger(__name__)


class AllowListDomainGate(IDomainGate):
    """Allow a URL when its host is an allow-listed domain or a subdomain of one.

    The allow-list is fixed at construction. Anything that does not parse, has
    no host, or carries an explicit port is rejected.
    """

    def __init__(self, allowed_domains: Iterable[str]) -> None:
        self._allowed: Tuple[str, ...] = tuple(
            d.strip().lower() for d in allowed_domains if d and d.strip()
        )

    @property
    def allowed_domains(self) -> Tuple[str, ...]:
        return self._allowed

    def is_allowed(self, raw_url: str) -> bool:
        try:
            parts = urlsplit(raw_url)
            host = parts.hostname
            port = parts.port
        except (ValueError, TypeError, AttributeError):
            return False
        if not host or port is not None:
            return False

        for domain in self._allowed:
            if host == domain or host.endswith("." + domain):
                return True

        logger.debug("AllowListDomainGate: rejected host %s", host)
        return False
