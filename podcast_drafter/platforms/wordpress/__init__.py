"""WordPress platform adapters."""

from __future__ import annotations

from .api import WordPressApiClient, WordPressApiError
from .content import ContentBuilder, EpisodePost, PayloadBuilder
from .publisher import WordPressDraftPublisher

__all__ = [
    "ContentBuilder",
    "EpisodePost",
    "PayloadBuilder",
    "WordPressApiClient",
    "WordPressApiError",
    "WordPressDraftPublisher",
]
