from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ValidationError

from app.application.interfaces import IHttpTransport, IImageSearch, SearchPage
from app.core.config import settings
from app.core.exceptions import DecodeError, RequestBuildError
from utils.url_utils import build_search_payload, build_search_url

logger = logging.getLogger(__name__)


class _OrigImage(BaseModel):
    url: Optional[str] = None


class _Images(BaseModel):
    orig: Optional[_OrigImage] = None


class _Result(BaseModel):
    images: Optional[_Images] = None


class _Data(BaseModel):
    results: Optional[List[Optional[_Result]]] = None


class _ResourceResponse(BaseModel):
    data: Optional[_Data] = None
    bookmark: Optional[str] = None


class PinterestSearchResponse(BaseModel):
    """Subset of the BaseSearchResource response the relay reads.

    Unknown keys are ignored; missing or null keys, null results and a null
    body decode as empty.
    """

    resource_response: Optional[_ResourceResponse] = None

    def image_urls(self) -> List[str]:
        rr = self.resource_response
        if rr is None or rr.data is None or not rr.data.results:
            return []
        urls: List[str] = []
        for result in rr.data.results:
            if result is None:
                continue
            orig = result.images.orig if result.images else None
            urls.append((orig.url if orig else None) or "")
        return urls

    def next_bookmark(self) -> str:
        rr = self.resource_response
        return (rr.bookmark if rr else None) or ""


class PinterestImageSearch(IImageSearch):
    """IImageSearch implementation for Pinterest's BaseSearchResource endpoint.

    The query and bookmark travel as a JSON `data` query parameter. A CSRF
    token, when given, is sent both as the `x-csrftoken` header and as the
    `csrftoken` cookie, since the upstream checks both.
    """

    def __init__(self, transport: IHttpTransport, endpoint: Optional[str] = None) -> None:
        self.transport = transport
        self.endpoint = endpoint or settings.upstream_search_url

    def build_request(
        self, query: str, bookmark: str, csrf_token: Optional[str] = None
    ) -> tuple[str, Dict[str, str]]:
        """Return the request URL and headers for one search page."""
        try:
            url = build_search_url(self.endpoint, build_search_payload(query, bookmark))
        except (TypeError, ValueError) as e:
            raise RequestBuildError(f"Failed to encode data: {e}") from e

        headers: Dict[str, str] = {}
        if csrf_token:
            if _has_control_chars(csrf_token):
                raise RequestBuildError("CSRF token contains control characters")
            headers["x-csrftoken"] = csrf_token
            headers["cookie"] = f"csrftoken={csrf_token}"
        return url, headers

    async def search(
        self, query: str, bookmark: str, *, csrf_token: Optional[str] = None
    ) -> SearchPage:
        url, headers = self.build_request(query, bookmark, csrf_token)
        result = await self.transport.get(url, headers=headers, follow_redirects=True)
        if result.status != 200:
            # The body is still decoded; error payloads simply yield no results
            logger.warning("PinterestImageSearch: upstream returned HTTP %d", result.status)

        try:
            raw = json.loads(result.body)
            decoded = PinterestSearchResponse.model_validate({} if raw is None else raw)
        except (ValueError, ValidationError) as e:
            raise DecodeError(f"Failed to decode response: {e}") from e

        page = SearchPage(image_urls=decoded.image_urls(), bookmark=decoded.next_bookmark())
        logger.debug(
            "PinterestImageSearch: %d results, bookmark=%s",
            len(page.image_urls),
            bool(page.bookmark),
        )
        return page


def _has_control_chars(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in value)
