"""
Rate limiting middleware using slowapi
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import structlog

from speaknotes.config import Settings
from speaknotes.errors import error_body

logger = structlog.get_logger()


def build_limiter(settings: Settings) -> Limiter:
    """Create a per-app limiter applying the configured default limit to every route"""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Custom rate limit exceeded handler"""
    client = request.client.host if request.client else "unknown"
    logger.warning("rate_limit_exceeded", client_ip=client, limit=exc.detail)
    return JSONResponse(
        status_code=429,
        content=error_body(f"Rate limit exceeded: {exc.detail}"),
    )
