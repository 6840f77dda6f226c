"""HTTP routes: job submission, credentials management and health."""

from __future__ import annotations

import logging
import queue
import shutil
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from ..app.pipeline import ServiceContainer
from ..errors import ValidationError
from ..security import CredentialsBundle
from ..services import JobSubmission, ProgressChannel, format_sse, format_sse_done
from ..utils.file_helper import safe_upload_name
from .models import (
    CredentialsPayload,
    CredentialTestResponse,
    ErrorResponse,
    HealthResponse,
    SaveCredentialsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

KEEPALIVE_SECONDS = 15.0


def _get_services(request: Request) -> ServiceContainer:
    """Get the service container from app state."""
    return request.app.state.services


def _is_audio(upload: UploadFile, allowed_extensions: tuple[str, ...]) -> bool:
    suffix = Path(upload.filename or "").suffix.lower()
    content_type = (upload.content_type or "").lower()
    return suffix in allowed_extensions or content_type.startswith("audio/")


def _store_upload(upload: UploadFile, uploads_dir: Path) -> Path:
    uploads_dir.mkdir(parents=True, exist_ok=True)
    target = uploads_dir / safe_upload_name(upload.filename, stamp=time.time_ns())
    with target.open("wb") as out:
        shutil.copyfileobj(upload.file, out)
    return target


def event_stream(channel: ProgressChannel, *, keepalive: float = KEEPALIVE_SECONDS) -> Iterator[str]:
    """Forward channel events as SSE frames; comments keep idle connections open."""
    try:
        while True:
            try:
                event = channel.get(timeout=keepalive)
            except queue.Empty:
                yield ": keep-alive\n\n"
                continue
            if event is None:
                break
            yield format_sse(event)
        yield format_sse_done()
    finally:
        channel.detach()


@router.post("/upload")
def upload_recording(
    request: Request,
    file: Optional[UploadFile] = File(default=None),
    date: Optional[str] = Form(default=None),
    title: Optional[str] = Form(default=None),
):
    """
    Accept a recording and stream pipeline progress as Server-Sent Events.

    Each frame is ``data: <json>``; the stream ends with ``data: [DONE]``.
    """
    services = _get_services(request)
    config = services.config

    source_path: Path | None = None
    if file is not None and file.filename:
        if not _is_audio(file, config.server.allowed_extensions):
            logger.warning(
                "Rejected non-audio upload",
                extra={"event": "upload.rejected", "upload_name": file.filename, "content_type": file.content_type},
            )
            return JSONResponse(
                status_code=400,
                content=ErrorResponse(error="Only audio files allowed").model_dump(exclude_none=True),
            )
        source_path = _store_upload(file, config.paths.uploads_dir)

    submission = JobSubmission(source_path=source_path, date=date, title=title)
    channel = services.job_runner.start(submission)

    return StreamingResponse(
        event_stream(channel),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "X-Job-Id": submission.job_id,
        },
    )


@router.get("/credentials")
def get_credentials(request: Request):
    """Report whether credentials are stored; passwords are never returned."""
    bundle = _get_services(request).credential_store.load()
    if bundle is None:
        return {"configured": False}
    return {"configured": True, **bundle.public_view()}


@router.post("/credentials", response_model=SaveCredentialsResponse)
def save_credentials(request: Request, body: CredentialsPayload):
    bundle = CredentialsBundle.from_wire(body.to_wire())
    try:
        _get_services(request).credential_store.save(bundle)
    except OSError:
        logger.exception("Error saving credentials", extra={"event": "credentials.error"})
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to save credentials").model_dump(exclude_none=True),
        )
    return SaveCredentialsResponse(success=True, message="Credentials saved successfully")


@router.post("/test-credentials", response_model=CredentialTestResponse)
def check_credentials(request: Request, body: CredentialsPayload):
    """Probe both services with the submitted bundle without saving it."""
    report = _get_services(request).credential_tester.run(body.to_wire())
    return report.as_dict()


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        credentials_configured=_get_services(request).credential_store.is_configured(),
    )


def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=exc.message, details=exc.details).model_dump(exclude_none=True),
    )
