import logging
from dataclasses import dataclass
from urllib.parse import urljoin

from app.application.interfaces import HttpResult, IDomainGate, IHttpTransport
from app.core.exceptions import AuthorizationDeniedError, FetchError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/png"
DEFAULT_MAX_REDIRECTS = 5


@dataclass(frozen=True)
class ProxiedImage:
    content: bytes
    media_type: str = DEFAULT_MEDIA_TYPE


class ProxyImageUseCase:
    """Fetch an allow-listed image and hand its bytes back unchanged.

    Redirects are followed here, not by the transport, so every hop is checked
    against the allow-list before it is requested. At most `max_redirects`
    hops are followed.

    The media type is `default_media_type` regardless of the origin's format
    unless `forward_content_type` is set, in which case an image/* Content-Type
    from the origin is passed through.
    """

    def __init__(
        self,
        transport: IHttpTransport,
        domain_gate: IDomainGate,
        *,
        default_media_type: str = DEFAULT_MEDIA_TYPE,
        forward_content_type: bool = False,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self._transport = transport
        self._domain_gate = domain_gate
        self._default_media_type = default_media_type
        self._forward_content_type = forward_content_type
        self._max_redirects = max(0, max_redirects)

    async def execute(self, raw_url: str) -> ProxiedImage:
        if not self._domain_gate.is_allowed(raw_url):
            raise AuthorizationDeniedError(url=raw_url)

        result = await self._fetch(raw_url)
        url = raw_url
        hops = 0
        while result.is_redirect:
            hops += 1
            if hops > self._max_redirects:
                logger.warning("Image fetch exceeded %d redirects", self._max_redirects)
                raise FetchError("Too many redirects", url=raw_url, status=result.status)
            url = urljoin(url, result.location)
            if not self._domain_gate.is_allowed(url):
                logger.warning("Image fetch redirected outside the allow-list")
                raise FetchError("Redirect target not allowed", url=raw_url, status=result.status)
            result = await self._fetch(url)

        if result.status != 200:
            logger.warning("Image fetch returned HTTP %d", result.status)
            raise FetchError(url=raw_url, status=result.status)

        return ProxiedImage(content=result.body, media_type=self._media_type_for(result.content_type))

    async def _fetch(self, url: str) -> HttpResult:
        try:
            return await self._transport.get(url)
        except TransportError as e:
            raise FetchError(url=url) from e

    def _media_type_for(self, content_type: str) -> str:
        if self._forward_content_type:
            mime = content_type.split(";", 1)[0].strip().lower()
            if mime.startswith("image/"):
                return mime
        return self._default_media_type
