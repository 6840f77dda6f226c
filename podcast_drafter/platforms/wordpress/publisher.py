"""Draft post creation on WordPress."""

from __future__ import annotations

import logging
from typing import Callable

import requests

from ...errors import PublishError
from ...security import ServiceCredentials
from ...settings import PublishingSettings
from ...utils.naming import parse_recording_date
from ..base import DraftPublisher, DraftResult, ProbeResult, ProgressCallback
from .api import WordPressApiClient, WordPressApiError
from .content import ContentBuilder, EpisodePost, PayloadBuilder

LOGGER = logging.getLogger(__name__)


class WordPressDraftPublisher(DraftPublisher):
    """Creates the episode draft; category lookup and the custom field are best-effort."""

    def __init__(
        self,
        settings: PublishingSettings | None = None,
        *,
        timeout: float | None = 60.0,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._settings = settings or PublishingSettings()
        self._timeout = timeout
        self._session_factory = session_factory
        self._payload_builder = PayloadBuilder(
            ContentBuilder(self._settings.media_field),
            title_suffix=self._settings.title_suffix,
        )

    def _client(self, config: ServiceCredentials, session: requests.Session) -> WordPressApiClient:
        return WordPressApiClient(config, session=session, timeout=self._timeout)

    def publish(
        self,
        title: str,
        media_url: str,
        date: str,
        config: ServiceCredentials,
        on_progress: ProgressCallback,
    ) -> DraftResult:
        on_progress("Creating WordPress draft...")
        with self._session_factory() as session:
            return self._publish(self._client(config, session), title, media_url, date)

    def _publish(
        self, client: WordPressApiClient, title: str, media_url: str, date: str
    ) -> DraftResult:
        post = EpisodePost(
            title=title,
            media_url=media_url,
            recording_date=parse_recording_date(date),
            submitted_date=date,
        )
        category_id = self._find_category_id(client)
        payload = self._payload_builder.build(post, category_id=category_id)

        try:
            created = client.create_post(payload)
        except WordPressApiError as exc:
            LOGGER.error(
                "WordPress post creation failed",
                extra={"event": "wordpress.error", "reason": exc.upstream or str(exc)},
            )
            raise PublishError(
                "Failed to create WordPress post", details=exc.upstream or str(exc)
            ) from exc

        post_id = created["id"]
        meta_attached = self._attach_media_field(client, post_id, media_url)

        LOGGER.info(
            "WordPress draft created",
            extra={"event": "wordpress.draft", "post_id": post_id, "meta_attached": meta_attached},
        )
        return DraftResult(
            post_id=post_id,
            edit_link=client.edit_link(post_id),
            preview_link=created.get("link"),
            meta_attached=meta_attached,
        )

    def probe(self, config: ServiceCredentials) -> ProbeResult:
        try:
            with self._session_factory() as session:
                self._client(config, session).get_current_user()
        except WordPressApiError as exc:
            return ProbeResult(success=False, message=exc.upstream or str(exc))
        return ProbeResult(success=True, message="Connected successfully")

    def _find_category_id(self, client: WordPressApiClient) -> int | None:
        name = self._settings.category_name
        try:
            matches = client.search_categories(name)
        except WordPressApiError as exc:
            LOGGER.warning(
                "Category lookup failed; creating post without a category",
                extra={"event": "wordpress.category", "category": name, "reason": str(exc)},
            )
            return None
        for item in matches:
            if isinstance(item, dict) and item.get("id") is not None:
                return int(item["id"])
        return None

    def _attach_media_field(self, client: WordPressApiClient, post_id: int, media_url: str) -> bool:
        try:
            client.update_post_meta(post_id, {self._settings.media_field: media_url})
        except WordPressApiError as exc:
            LOGGER.warning(
                "Could not set custom field automatically; it must be added manually",
                extra={
                    "event": "wordpress.meta",
                    "post_id": post_id,
                    "field": self._settings.media_field,
                    "reason": str(exc),
                },
            )
            return False
        return True


__all__ = ["WordPressDraftPublisher"]
