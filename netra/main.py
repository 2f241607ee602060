"""FastAPI entry point. Device agents post window/notification events to
POST /events; GET / reports whether protection is active."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from netra import service
from netra.auth import require_device_key
from netra.config import DetectorConfig
from netra.errors import NetraError
from netra.extractor import extract_window_text, notification_text
from netra.models import EventKind, EventRequest, EventResponse, RawTextEvent, now_ms

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Netra Scam Monitor",
    description="Debounced scam-message classification with throttled alerts",
    version=VERSION,
)

# The one pipeline this process runs; None while inactive
_handle: Optional[service.MonitorHandle] = None
_startup_error: Optional[str] = None


def get_handle() -> Optional[service.MonitorHandle]:
    return _handle


@app.on_event("startup")
async def _on_startup() -> None:
    global _handle, _startup_error
    try:
        _handle = service.init(DetectorConfig.from_env())
        _startup_error = None
    except NetraError as exc:
        _handle = None
        _startup_error = str(exc)
        logger.error(f"Error starting monitor, protection INACTIVE: {exc}")


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    global _handle
    service.shutdown(_handle)
    _handle = None


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error(f"422 VALIDATION ERROR | {request.url.path} | {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "message": "Invalid event payload."},
    )


@app.get("/")
async def health_check() -> dict:
    handle = get_handle()
    active = handle is not None and handle.active
    body = {
        "status": "active" if active else "inactive",
        "service": "Netra Scam Monitor",
        "version": VERSION,
    }
    if active:
        body["sources"] = sorted(handle.config.monitored_sources)
    elif _startup_error:
        body["error"] = _startup_error
    return body


def event_text(request: EventRequest) -> str:
    """Flatten the payload to the text the pipeline classifies."""
    if request.kind == EventKind.WINDOW:
        return extract_window_text(request.window)
    if request.kind == EventKind.NOTIFICATION:
        return notification_text(request.title, request.body)
    return request.text or ""


@app.post("/events", response_model=EventResponse)
async def receive_event(
    request: EventRequest,
    api_key: str = Depends(require_device_key),
) -> EventResponse:
    handle = get_handle()
    if handle is None or not handle.active:
        return EventResponse(status="inactive")

    text = event_text(request)
    event = RawTextEvent(
        source_id=request.sourceId,
        text=text,
        observed_at=request.observedAt or now_ms(),
    )
    accepted = handle.submit(event)
    logger.debug(
        f"[{request.sourceId}] EVENT kind={request.kind.value} "
        f"len={len(text)} accepted={accepted}"
    )
    return EventResponse(status="accepted" if accepted else "ignored")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
