import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.application.interfaces import IDomainGate, IImageSearch
from app.core.exceptions import ConfigurationMissingError
from utils.url_utils import build_proxy_url

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    images: List[str] = field(default_factory=list)
    next_bookmark: str = ""


class SearchImagesUseCase:
    """Relay a search upstream and rewrite hits into same-origin proxy links.

    Hits with an empty URL or a host outside the allow-list are dropped; the
    rest keep their upstream order.
    """

    def __init__(
        self, image_search: IImageSearch, domain_gate: IDomainGate, base_url: str
    ) -> None:
        self._image_search = image_search
        self._domain_gate = domain_gate
        self._base_url = (base_url or "").strip().rstrip("/")

    async def execute(
        self, query: str, bookmark: str = "", csrf_token: Optional[str] = None
    ) -> SearchResult:
        if not self._base_url:
            logger.error("URL not set; search is unavailable")
            raise ConfigurationMissingError("URL is not configured", config_key="URL")

        page = await self._image_search.search(query, bookmark, csrf_token=csrf_token)

        images = [
            build_proxy_url(self._base_url, url)
            for url in page.image_urls
            if url and self._domain_gate.is_allowed(url)
        ]
        dropped = len(page.image_urls) - len(images)
        if dropped:
            logger.debug("Dropped %d of %d upstream hits", dropped, len(page.image_urls))

        return SearchResult(images=images, next_bookmark=page.bookmark or "")
