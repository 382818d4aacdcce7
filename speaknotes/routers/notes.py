from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
import structlog

from speaknotes.auth import require_api_key
from speaknotes.errors import InvalidPromptError, NotesGenerationError
from speaknotes.services.monitoring import NOTES_GENERATION_REQUESTS, NOTES_SENTENCES
from speaknotes.services.notes_generator import generate_notes


router = APIRouter(prefix="/api", tags=["notes"])
logger = structlog.get_logger()


async def _read_body(request: Request) -> Dict[str, Any]:
    # Unparseable or non-object bodies are treated like an empty object.
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _echo(value: Any) -> Any:
    # JSON-falsy scalars (null, false, 0, NaN, "") are echoed as null; empty
    # arrays and objects are passed through unchanged.
    if value is None or value is False or value == "":
        return None
    if isinstance(value, (int, float)) and (value == 0 or value != value):
        return None
    return value


@router.post("/process", dependencies=[Depends(require_api_key)])
async def process_lecture(request: Request):
    body = await _read_body(request)
    prompt = body.get("prompt")
    if not prompt or not isinstance(prompt, str):
        NOTES_GENERATION_REQUESTS.labels(status="invalid").inc()
        raise InvalidPromptError()

    try:
        notes = await run_in_threadpool(generate_notes, prompt)
    except Exception:
        NOTES_GENERATION_REQUESTS.labels(status="error").inc()
        logger.exception("notes_generation_failed", prompt_chars=len(prompt))
        raise NotesGenerationError()

    NOTES_GENERATION_REQUESTS.labels(status="success").inc()
    NOTES_SENTENCES.observe(notes.raw_sentence_count)
    return {
        "status": "success",
        "message": "Lecture notes generated",
        "note_id": _echo(body.get("note_id")),
        "timestamp": _echo(body.get("timestamp")),
        "data": notes.to_response(),
    }
