import hmac
from typing import Optional

from fastapi import Request
import structlog

from speaknotes.config import Settings
from speaknotes.errors import UnauthorizedError

logger = structlog.get_logger()

API_KEY_HEADER = "x-api-key"


def verify_api_key(client_key: Optional[str], settings: Settings) -> bool:
    if not settings.auth_enabled:
        return True
    if not client_key:
        logger.warning("api_key_missing")
        return False
    if not hmac.compare_digest(client_key.encode(), settings.api_key.encode()):
        logger.warning("api_key_mismatch")
        return False
    return True


def require_api_key(request: Request) -> None:
    """FastAPI dependency: reject the request unless the shared secret matches."""
    settings: Settings = request.app.state.settings
    if not verify_api_key(request.headers.get(API_KEY_HEADER), settings):
        raise UnauthorizedError()
