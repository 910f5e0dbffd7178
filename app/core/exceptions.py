"""
Relay error types and their FastAPI exception handlers
"""

from fastapi import Request
from fastapi.responses import JSONResponse
import logging
import traceback
from typing import Optional

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base exception for search relay and image proxy failures"""

    status_code: int = 500
    error_code: str = "RELAY_ERROR"
    error: str = "Relay failed"

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)


class ConfigurationMissingError(RelayError):
    """Raised when a required setting (e.g. the public base URL) is not set"""

    error_code = "CONFIGURATION_MISSING"
    error = "Service not configured"

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key


class RequestBuildError(RelayError):
    """Raised when the outbound upstream request cannot be built"""

    error_code = "REQUEST_BUILD_FAILED"
    error = "Failed to create request"


class TransportError(RelayError):
    """Raised when an outbound HTTP call fails before a response arrives

    Args:
        message (str): Error message
        url (Optional[str]): Target URL of the failed call
    """

    error_code = "TRANSPORT_FAILED"
    error = "Request failed"

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class DecodeError(RelayError):
    """Raised when the upstream search response cannot be decoded"""

    error_code = "DECODE_FAILED"
    error = "Failed to decode response"


class AuthorizationDeniedError(RelayError):
    """Raised when a URL's host is not in the allow-list"""

    status_code = 403
    error_code = "DOMAIN_NOT_ALLOWED"
    error = "Domain not allowed"

    def __init__(self, message: str = "Domain not allowed", url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class FetchError(RelayError):
    """Raised when an allowed image cannot be fetched from its origin"""

    error_code = "FETCH_FAILED"
    error = "Failed to fetch image"

    def __init__(
        self,
        message: str = "Failed to fetch image",
        url: Optional[str] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status = status


async def relay_exception_handler(request: Request, exc: RelayError):
    """Map relay errors to their HTTP status with the standard error body"""
    if exc.status_code >= 500:
        logger.error("Relay error on %s: %s (%s)", request.url.path, exc.message, exc.error_code)
    else:
        logger.warning("Relay request rejected on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": {
                "error": exc.error,
                "details": exc.message,
                "error_code": exc.error_code,
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.error(f"Unexpected error: {type(exc).__name__}: {str(exc)}")
    logger.error(f"Traceback: {traceback.format_exc()}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": {
                "error": "Internal server error",
                "details": "An unexpected error occurred",
            }
        },
    )
