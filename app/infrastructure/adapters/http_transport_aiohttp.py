from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional

import aiohttp

from app.application.interfaces import HttpResult, IHttpTransport
from app.core.config import settings
from app.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class AiohttpTransport(IHttpTransport):
    """IHttpTransport backed by a short-lived aiohttp session per call.

    Every call is bounded by `timeout` seconds in total. Transport errors are
    retried `retry_attempts` extra times with linear backoff; HTTP statuses are
    never retried. The default policy is a single attempt. Redirects are
    returned to the caller unless `follow_redirects` is set.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_backoff: Optional[float] = None,
    ) -> None:
        self.timeout = settings.upstream_timeout if timeout is None else timeout
        self.retry_attempts = max(
            0,
            settings.upstream_retry_attempts if retry_attempts is None else retry_attempts,
        )
        self.retry_backoff = (
            settings.upstream_retry_backoff if retry_backoff is None else retry_backoff
        )

    async def get(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        follow_redirects: bool = False,
    ) -> HttpResult:
        attempts = self.retry_attempts + 1
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await self._get_once(url, headers, follow_redirects)
            except ValueError as e:
                # Raised by aiohttp while writing a malformed URL or header
                raise TransportError(f"Request failed: {e}", url=url) from e
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = e
                logger.warning(
                    "GET %s failed (attempt %d/%d): %s",
                    _without_query(url),
                    attempt,
                    attempts,
                    type(e).__name__,
                )
                if attempt < attempts and self.retry_backoff > 0:
                    await asyncio.sleep(self.retry_backoff * attempt)
        raise TransportError(f"Request failed: {last_error}", url=url)

    async def _get_once(
        self,
        url: str,
        headers: Optional[Mapping[str, str]],
        follow_redirects: bool,
    ) -> HttpResult:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(
                url,
                headers=dict(headers or {}),
                allow_redirects=follow_redirects,
            ) as response:
                body = await response.read()
                logger.debug(
                    "GET %s -> %d (%d bytes)", _without_query(url), response.status, len(body)
                )
                return HttpResult(
                    status=response.status,
                    body=body,
                    content_type=response.headers.get("Content-Type", ""),
                    location=response.headers.get("Location", ""),
                )


def _without_query(url: str) -> str:
    # Keep query strings (search terms, tokens) out of the logs
    return url.split("?", 1)[0]
