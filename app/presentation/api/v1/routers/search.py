import logging

from fastapi import APIRouter, Depends, Query

from app.application.use_cases.search_images import SearchImagesUseCase
from app.presentation.api.v1.dependencies.relay import get_search_images_use_case
from app.presentation.api.v1.schemas.search import SearchPinsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/pins/", response_model=SearchPinsResponse)
async def search_pins(
    q: str = Query("", description="Free-text search query"),
    bookmark: str = Query("", description="Opaque pagination token from a previous page"),
    csrftoken: str = Query("", description="Upstream CSRF token, forwarded as header and cookie"),
    use_case: SearchImagesUseCase = Depends(get_search_images_use_case),
):
    """Search upstream and return same-origin proxy links for each image."""
    result = await use_case.execute(q, bookmark, csrf_token=csrftoken or None)
    return SearchPinsResponse(
        images=result.images,
        bookmark=result.next_bookmark,
        query=q,
        csrftoken=csrftoken,
    )
