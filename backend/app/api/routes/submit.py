"""
Form submission endpoint: POST /api/submit with {schema, destination, data}.

Flow: content-type check -> body check -> validate -> write_submission (in a
thread) -> 204. Failures return 500 with the first two lines of the error; the
full error is logged.
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError

from app.api.deps import RegistryDep
from app.core.errors import shorten_message
from app.engines.sql import write_submission
from app.schemas import Submission

_log = logging.getLogger(__name__)

router = APIRouter(tags=["submit"])

_REQUIRED_KEYS = ("schema", "destination", "data")


def _text(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code)


def _validation_summary(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", []))
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(messages)


@router.get("/", response_class=PlainTextResponse)
def api_index() -> str:
    return "api index"


@router.post("/submit", status_code=204, response_class=Response)
async def submit(request: Request, registry: RegistryDep) -> Response:
    """
    Insert the submitted form data as one row of ``destination.table``.

    - 415: content-type is not application/json
    - 400: body is not a JSON object, or lacks schema/destination/data
    - 500: resolve/synthesize/bind/execute failed (short message)
    """
    content_type = request.headers.get("content-type")
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type != "application/json":
        return _text(
            415,
            f"invalid content-type, expect application/json, actual {content_type}.",
        )

    try:
        body = await request.json()
    except ValueError:
        return _text(400, "invalid post body")
    if not isinstance(body, dict):
        return _text(400, "invalid post body")

    _log.debug("receive POST body %s", body)
    if any(body.get(k) is None for k in _REQUIRED_KEYS):
        return _text(400, "require {schema, destination, data}")

    try:
        submission = Submission.model_validate(body)
    except ValidationError as e:
        return _text(400, _validation_summary(e))

    log = logging.LoggerAdapter(
        _log,
        {
            "table": submission.destination.table,
            "destination": submission.destination.url,
        },
    )
    try:
        # Blocking DB I/O; keep the event loop free for other submissions
        await asyncio.to_thread(
            write_submission,
            submission.form_schema,
            submission.destination,
            submission.data,
            registry=registry,
            logger=log,
        )
    except Exception as e:
        log.error(
            "writing submission to table %s failed",
            submission.destination.table,
            exc_info=True,
        )
        return _text(500, shorten_message(str(e)))

    return Response(status_code=204)
