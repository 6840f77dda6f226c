"""Builders for the draft post title, body and request payload."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from html import escape

from ...utils.naming import display_date


@dataclass(slots=True)
class EpisodePost:
    """Everything needed to render one draft."""

    title: str
    media_url: str
    recording_date: date
    submitted_date: str


class ContentBuilder:
    """Renders the HTML body: audio player, download link and a custom field reminder."""

    def __init__(self, media_field: str = "Media-Input-Podcast") -> None:
        self._media_field = media_field

    def build(self, media_url: str) -> str:
        src = escape(media_url, quote=True)
        text = escape(media_url)
        return (
            '<div class="podcast-audio">\n'
            '  <audio controls style="width: 100%; max-width: 600px;">\n'
            f'    <source src="{src}" type="audio/mpeg">\n'
            "    Your browser does not support the audio element.\n"
            "  </audio>\n"
            f'  <p><a href="{src}" download>Download MP3</a></p>\n'
            "</div>\n"
            f"<p><strong>Podcast URL:</strong> {text}</p>\n"
            f'<p><em>Note: Add this URL to the "{escape(self._media_field)}" custom field.</em></p>\n'
        )


class PayloadBuilder:
    """Builds the JSON body for ``POST /wp/v2/posts``."""

    def __init__(self, content_builder: ContentBuilder, *, title_suffix: str = "SUNDAY SERVICE") -> None:
        self._content_builder = content_builder
        self._title_suffix = title_suffix

    def title(self, post: EpisodePost) -> str:
        """``MM/DD/YYYY | title | suffix`` with the title's original casing."""
        return f"{display_date(post.recording_date)} | {post.title} | {self._title_suffix}"

    def build(self, post: EpisodePost, *, category_id: int | None = None) -> dict[str, object]:
        payload: dict[str, object] = {
            "title": self.title(post),
            "content": self._content_builder.build(post.media_url),
            "status": "draft",
            "date": post.submitted_date,
        }
        if category_id is not None:
            payload["categories"] = [category_id]
        return payload


__all__ = ["ContentBuilder", "EpisodePost", "PayloadBuilder"]
