from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.application.use_cases.proxy_image import ProxyImageUseCase
from app.presentation.api.v1.dependencies.relay import get_proxy_image_use_case

router = APIRouter(tags=["image"])


@router.get("/image")
async def proxy_image(
    url: str = Query("", description="Allow-listed image URL to proxy"),
    use_case: ProxyImageUseCase = Depends(get_proxy_image_use_case),
):
    """
    Proxy an allow-listed image so the client never contacts the origin host.

    Returns 403 for hosts outside the allow-list and 500 when the origin
    fetch fails.
    """
    image = await use_case.execute(url)
    return Response(content=image.content, media_type=image.media_type)
