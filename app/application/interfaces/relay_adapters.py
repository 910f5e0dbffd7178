from __future__ import annotations

from typing import Protocol, runtime_checkable

from .domain_gate import IDomainGate
from .http_transport import IHttpTransport
from .image_search import IImageSearch


@runtime_checkable
class IRelayAdapters(Protocol):
    domain_gate: IDomainGate
    transport: IHttpTransport
    image_search: IImageSearch
