"""Platform integration package."""

from __future__ import annotations

from .base import (
    DraftPublisher,
    DraftResult,
    PlatformApiError,
    ProbeResult,
    ProgressCallback,
    StorageUploader,
)

__all__ = [
    "DraftPublisher",
    "DraftResult",
    "PlatformApiError",
    "ProbeResult",
    "ProgressCallback",
    "StorageUploader",
]
