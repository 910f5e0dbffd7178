from fastapi import Depends

from app.application.interfaces import IRelayAdapters
from app.application.use_cases.proxy_image import ProxyImageUseCase
from app.application.use_cases.search_images import SearchImagesUseCase
from app.core.config import settings
from app.infrastructure.adapters.bundles.relay import get_relay_adapter_bundle


def get_relay_adapters() -> IRelayAdapters:
    return get_relay_adapter_bundle()


def get_search_images_use_case(
    adapters: IRelayAdapters = Depends(get_relay_adapters),
) -> SearchImagesUseCase:
    """Compose the search relay at the Presentation layer."""
    return SearchImagesUseCase(
        adapters.image_search, adapters.domain_gate, settings.public_base_url
    )


def get_proxy_image_use_case(
    adapters: IRelayAdapters = Depends(get_relay_adapters),
) -> ProxyImageUseCase:
    return ProxyImageUseCase(
        adapters.transport,
        adapters.domain_gate,
        default_media_type=settings.proxy_default_content_type,
        forward_content_type=settings.proxy_forward_content_type,
        max_redirects=settings.proxy_max_redirects,
    )
