"""
API error types and their JSON rendering.

Every error leaves the service as {"status": "error", "message": ...}.
"""
from fastapi import Request
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger()


class NotesAPIError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class UnauthorizedError(NotesAPIError):
    status_code = 401
    message = "Unauthorized: Invalid API key"


class InvalidPromptError(NotesAPIError):
    status_code = 400
    message = "Missing or invalid 'prompt' field in request body"


class NotesGenerationError(NotesAPIError):
    status_code = 500
    message = "Internal server error while generating notes"


def error_body(message: str) -> dict:
    return {"status": "error", "message": message}


async def notes_api_error_handler(request: Request, exc: NotesAPIError) -> JSONResponse:
    logger.warning(
        "api_error",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.__class__.__name__,
    )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))
