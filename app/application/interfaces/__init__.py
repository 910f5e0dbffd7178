from .domain_gate import IDomainGate
from .http_transport import IHttpTransport, HttpResult
from .image_search import IImageSearch, SearchPage
from .relay_adapters import IRelayAdapters

__all__ = [
    "IDomainGate",
    "IHttpTransport",
    "HttpResult",
    "IImageSearch",
    "SearchPage",
    "IRelayAdapters",
]
