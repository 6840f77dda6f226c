"""FileBrowser platform adapters."""

from __future__ import annotations

from .api import FileBrowserApiClient, FileBrowserApiError
from .uploader import FileBrowserUploader

__all__ = [
    "FileBrowserApiClient",
    "FileBrowserApiError",
    "FileBrowserUploader",
]
