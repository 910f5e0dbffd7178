"""
Health check API endpoints
"""

from fastapi import APIRouter
from app.core.config import settings
from app.core.monitoring import health_checker, SystemHealth

router = APIRouter(tags=["health"])


@router.get("/health", response_model=SystemHealth)
async def health_check():
    """
    Health check endpoint that returns process status and relay configuration
    """
    return health_checker.get_system_health()


@router.get("/")
async def root():
    """
    Root endpoint
    """
    return {
        "message": f"{settings.api_title} is running",
        "search": "/search/pins/?q=<query>&bookmark=<token>",
        "image": "/image?url=<encoded image url>",
    }
