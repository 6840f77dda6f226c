"""Progress events streamed to the client while a job runs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from ..errors import PipelineError
from .podcast_models import JobResult

DONE_MARKER = "[DONE]"
COMPLETE_MESSAGE = "File processed, uploaded, and WordPress draft created"


@dataclass(slots=True, frozen=True)
class StatusEvent:
    status: str


@dataclass(slots=True, frozen=True)
class CompleteEvent:
    result: JobResult


@dataclass(slots=True, frozen=True)
class ErrorEvent:
    error: str
    details: str | None = None
    code: str = "internal_error"

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorEvent":
        if isinstance(exc, PipelineError):
            return cls(error=exc.message, details=exc.details, code=exc.code)
        return cls(error="Failed to process file", details=str(exc) or type(exc).__name__)


ProgressEvent = Union[StatusEvent, CompleteEvent, ErrorEvent]


def is_terminal(event: ProgressEvent) -> bool:
    return isinstance(event, (CompleteEvent, ErrorEvent))


def event_to_payload(event: ProgressEvent) -> dict[str, object]:
    """Map each event variant to its JSON shape; unknown variants are a programming error."""
    if isinstance(event, StatusEvent):
        return {"status": event.status}
    if isinstance(event, CompleteEvent):
        result = event.result
        return {
            "complete": True,
            "message": COMPLETE_MESSAGE,
            "mp3Name": result.filename,
            "fileBrowserUrl": result.remote_url,
            "podcastUrl": result.podcast_url,
            "year": result.year,
            "wordpress": {
                "postId": result.draft.post_id,
                "editLink": result.draft.edit_link,
                "previewLink": result.draft.preview_link,
            },
        }
    if isinstance(event, ErrorEvent):
        payload: dict[str, object] = {"error": event.error, "code": event.code}
        if event.details:
            payload["details"] = event.details
        return payload
    raise TypeError(f"Unsupported progress event: {event!r}")


def format_sse(event: ProgressEvent) -> str:
    return f"data: {json.dumps(event_to_payload(event), ensure_ascii=False)}\n\n"


def format_sse_done() -> str:
    return f"data: {DONE_MARKER}\n\n"


__all__ = [
    "CompleteEvent",
    "DONE_MARKER",
    "ErrorEvent",
    "ProgressEvent",
    "StatusEvent",
    "event_to_payload",
    "format_sse",
    "format_sse_done",
    "is_terminal",
]
