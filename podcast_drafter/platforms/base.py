"""Base contracts for the remote storage and publishing platforms."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol

import requests

from ..security import ServiceCredentials

ProgressCallback = Callable[[str], None]


class PlatformApiError(RuntimeError):
    """Raised when a remote API call fails; ``upstream`` holds the service's own message."""

    def __init__(
        self,
        message: str,
        *,
        upstream: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.upstream = upstream
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if self.upstream:
            base = f"{base}: {self.upstream}"
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


def upstream_message(exc: requests.RequestException) -> str:
    """Prefer the service's JSON ``message``, then its body text, then the transport error."""
    response = exc.response
    if response is not None:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, Mapping) and data.get("message"):
            return str(data["message"])
        text = (response.text or "").strip()
        if text:
            return text[:200]
    return str(exc)


@dataclass(slots=True)
class DraftResult:
    """Outcome of creating a draft post."""

    post_id: int
    edit_link: str
    preview_link: str | None
    meta_attached: bool = True


@dataclass(slots=True)
class ProbeResult:
    """Outcome of a live credential check against one service."""

    success: bool
    message: str

    def as_dict(self) -> dict[str, object]:
        return {"success": self.success, "message": self.message}


class StorageUploader(Protocol):
    """Uploads a file to remote storage and returns its public URL."""

    def upload(
        self,
        file_path: Path,
        filename: str,
        container: str,
        config: ServiceCredentials,
        on_progress: ProgressCallback,
    ) -> str:
        """Raise :class:`~podcast_drafter.errors.UploadError` on failure."""

    def probe(self, config: ServiceCredentials) -> ProbeResult:
        """Check the login without uploading anything."""


class DraftPublisher(ABC):
    """Creates a draft post referencing an uploaded media file."""

    @abstractmethod
    def publish(
        self,
        title: str,
        media_url: str,
        date: str,
        config: ServiceCredentials,
        on_progress: ProgressCallback,
    ) -> DraftResult:
        """Raise :class:`~podcast_drafter.errors.PublishError` if the post is not created."""

    @abstractmethod
    def probe(self, config: ServiceCredentials) -> ProbeResult:
        """Check the login without creating anything."""
