from __future__ import annotations

import json

import pytest

from podcast_drafter.errors import UploadError
from podcast_drafter.platforms import DraftResult
from podcast_drafter.services import (
    CompleteEvent,
    ErrorEvent,
    ProgressChannel,
    StatusEvent,
    event_to_payload,
    format_sse,
    format_sse_done,
)
from podcast_drafter.services.podcast_models import JobResult


def _complete() -> CompleteEvent:
    return CompleteEvent(
        JobResult(
            filename="2024-03-10_easter.mp3",
            remote_url="https://files.example.org/api/public/dl/2024/2024-03-10_easter.mp3",
            podcast_url="https://podcast.example.org/2024/2024-03-10_easter.mp3",
            year=2024,
            draft=DraftResult(post_id=9, edit_link="https://wp/edit", preview_link="https://wp/?p=9"),
        )
    )


def test_channel_delivers_in_order_and_ends_after_close() -> None:
    channel = ProgressChannel("job")
    channel.publish(StatusEvent("one"))
    channel.publish(StatusEvent("two"))
    channel.publish(ErrorEvent("boom"))
    channel.close()

    assert list(channel) == [StatusEvent("one"), StatusEvent("two"), ErrorEvent("boom")]
    assert channel.get(timeout=0.1) is None


def test_nothing_is_accepted_after_the_terminal_event() -> None:
    channel = ProgressChannel()
    assert channel.publish(_complete()) is True
    assert channel.publish(StatusEvent("late")) is False
    assert channel.publish(ErrorEvent("late")) is False
    channel.close()

    events = list(channel)
    assert len(events) == 1
    assert isinstance(events[0], CompleteEvent)


def test_detached_channel_drops_events_without_raising() -> None:
    channel = ProgressChannel()
    channel.publish(StatusEvent("seen"))
    channel.detach()

    assert channel.detached
    assert channel.publish(StatusEvent("unseen")) is False
    assert channel.publish(ErrorEvent("unseen")) is False
    channel.close()
    channel.close()

    assert list(channel) == [StatusEvent("seen")]


def test_complete_payload_shape() -> None:
    payload = event_to_payload(_complete())

    assert payload == {
        "complete": True,
        "message": "File processed, uploaded, and WordPress draft created",
        "mp3Name": "2024-03-10_easter.mp3",
        "fileBrowserUrl": "https://files.example.org/api/public/dl/2024/2024-03-10_easter.mp3",
        "podcastUrl": "https://podcast.example.org/2024/2024-03-10_easter.mp3",
        "year": 2024,
        "wordpress": {"postId": 9, "editLink": "https://wp/edit", "previewLink": "https://wp/?p=9"},
    }


def test_error_event_from_pipeline_error_keeps_code_and_details() -> None:
    event = ErrorEvent.from_exception(UploadError("Failed to upload to FileBrowser", details="401"))

    assert event_to_payload(event) == {
        "error": "Failed to upload to FileBrowser",
        "code": "upload_error",
        "details": "401",
    }


def test_error_event_from_unexpected_exception() -> None:
    event = ErrorEvent.from_exception(KeyError("id"))

    assert event.error == "Failed to process file"
    assert event.code == "internal_error"


def test_sse_framing() -> None:
    frame = format_sse(StatusEvent("Uploading to FileBrowser..."))

    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    assert json.loads(frame[len("data: "):]) == {"status": "Uploading to FileBrowser..."}
    assert format_sse_done() == "data: [DONE]\n\n"


def test_unknown_event_type_is_rejected() -> None:
    with pytest.raises(TypeError):
        event_to_payload("status")  # type: ignore[arg-type]
