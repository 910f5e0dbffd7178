from .domain_gate import AllowListDomainGate
from .http_transport_aiohttp import AiohttpTransport
from .image_search_pinterest import PinterestImageSearch

__all__ = [
    "AllowListDomainGate",
    "AiohttpTransport",
    "PinterestImageSearch",
]
