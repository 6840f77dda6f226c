from __future__ import annotations

import re
from datetime import date

import pytest

from podcast_drafter.errors import ValidationError
from podcast_drafter.utils.file_helper import safe_upload_name
from podcast_drafter.utils.naming import (
    container_name,
    display_date,
    output_filename,
    parse_recording_date,
    podcast_url,
    sanitize_title,
)


def test_sanitize_title_replaces_each_unsafe_character() -> None:
    assert sanitize_title("Grace & Truth!") == "grace___truth_"
    assert sanitize_title("Psalm 23") == "psalm_23"
    assert sanitize_title("") == ""


@pytest.mark.parametrize("title", ["Easter Service!", "Über Gnade / 2. Teil", "a-b.c", "   "])
def test_sanitize_title_is_idempotent_and_restricted(title: str) -> None:
    once = sanitize_title(title)

    assert sanitize_title(once) == once
    assert re.fullmatch(r"[a-z0-9_]*", once)


def test_output_filename_uses_date_prefix_and_mp3_extension() -> None:
    name = output_filename(date(2024, 3, 10), "Grace & Truth!")

    assert name == "2024-03-10_grace___truth_.mp3"


def test_output_filename_is_deterministic() -> None:
    first = output_filename(date(2024, 3, 10), "Easter Sunday")
    second = output_filename(date(2024, 3, 10), "Easter Sunday")

    assert first == second == "2024-03-10_easter_sunday.mp3"


def test_parse_recording_date_accepts_date_and_timestamp() -> None:
    assert parse_recording_date("2024-03-10") == date(2024, 3, 10)
    assert parse_recording_date("2024-03-10T09:30:00") == date(2024, 3, 10)
    assert parse_recording_date("2024-03-10T09:30:00Z") == date(2024, 3, 10)


@pytest.mark.parametrize("value", ["", "yesterday", "2024-13-40"])
def test_parse_recording_date_rejects_garbage(value: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_recording_date(value)

    assert excinfo.value.message == "Invalid recording date"
    assert excinfo.value.code == "validation_error"


def test_container_and_podcast_url_use_the_recording_year() -> None:
    recorded = date(2023, 12, 31)

    assert container_name(recorded) == "2023"
    assert display_date(recorded) == "12/31/2023"
    assert (
        podcast_url("https://podcast.example.org/", recorded, "2023-12-31_watchnight.mp3")
        == "https://podcast.example.org/2023/2023-12-31_watchnight.mp3"
    )


def test_safe_upload_name_drops_client_directories() -> None:
    assert safe_upload_name("../../etc/passwd", stamp=17) == "17-passwd"
    assert safe_upload_name("C:\\Users\\me\\sermon.wav", stamp=5) == "5-sermon.wav"
