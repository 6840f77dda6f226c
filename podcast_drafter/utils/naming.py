"""Deterministic names derived from the recording date and title."""

from __future__ import annotations

import re
from datetime import date, datetime

from ..errors import ValidationError

_UNSAFE = re.compile(r"[^A-Za-z0-9]")
SEPARATOR = "_"
OUTPUT_EXTENSION = ".mp3"


def sanitize_title(title: str) -> str:
    """Fold every non-alphanumeric character to ``_`` and lower-case the rest."""
    return _UNSAFE.sub(SEPARATOR, title).lower()


def parse_recording_date(value: str) -> date:
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp."""
    text = (value or "").strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:
        raise ValidationError("Invalid recording date", details=value) from exc


def output_filename(recording_date: date, title: str) -> str:
    return f"{recording_date:%Y-%m-%d}{SEPARATOR}{sanitize_title(title)}{OUTPUT_EXTENSION}"


def container_name(recording_date: date) -> str:
    return str(recording_date.year)


def display_date(recording_date: date) -> str:
    return f"{recording_date:%m/%d/%Y}"


def podcast_url(base_url: str, recording_date: date, filename: str) -> str:
    return f"{base_url.rstrip('/')}/{container_name(recording_date)}/{filename}"


__all__ = [
    "container_name",
    "display_date",
    "output_filename",
    "parse_recording_date",
    "podcast_url",
    "sanitize_title",
]
