"""WordPress REST API helpers."""

from __future__ import annotations

import re
from typing import Any, Mapping

import requests
from requests.auth import HTTPBasicAuth

from ...security import ServiceCredentials
from ..base import PlatformApiError, upstream_message

_WHITESPACE = re.compile(r"\s")


class WordPressApiError(PlatformApiError):
    """Raised when the WordPress REST API rejects a call or cannot be reached."""


def basic_auth(config: ServiceCredentials) -> HTTPBasicAuth:
    """Application passwords are shown with spaces but only accepted without them."""
    return HTTPBasicAuth(config.username, _WHITESPACE.sub("", config.password))


class WordPressApiClient:
    """Client for the handful of ``wp/v2`` endpoints the publisher needs."""

    def __init__(
        self,
        config: ServiceCredentials,
        *,
        session: requests.Session | None = None,
        timeout: float | None = 60.0,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._session.auth = basic_auth(config)
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._config.url.rstrip("/")

    def edit_link(self, post_id: int) -> str:
        return f"{self.base_url}/wp-admin/post.php?post={post_id}&action=edit"

    def search_categories(self, name: str) -> list[dict[str, Any]]:
        data = self._request("GET", "categories", params={"search": name}, action="Category search")
        return data if isinstance(data, list) else []

    def create_post(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        data = self._request("POST", "posts", json=dict(payload), action="Post creation")
        if not isinstance(data, dict) or "id" not in data:
            raise WordPressApiError("Post creation returned no id", details={"response": str(data)[:200]})
        try:
            post_id = int(data["id"])
        except (TypeError, ValueError) as exc:
            raise WordPressApiError(
                "Post creation returned an invalid id", details={"id": str(data["id"])[:200]}
            ) from exc
        return {**data, "id": post_id}

    def update_post_meta(self, post_id: int, meta: Mapping[str, Any]) -> dict[str, Any]:
        data = self._request(
            "POST", f"posts/{post_id}", json={"meta": dict(meta)}, action="Meta update"
        )
        return data if isinstance(data, dict) else {}

    def get_current_user(self) -> dict[str, Any]:
        data = self._request("GET", "users/me", action="Current user lookup")
        return data if isinstance(data, dict) else {}

    def _request(self, method: str, endpoint: str, *, action: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/wp-json/wp/v2/{endpoint}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise WordPressApiError(f"{action} failed", upstream=upstream_message(exc)) from exc
        try:
            return response.json()
        except ValueError as exc:
            raise WordPressApiError(
                f"{action} returned invalid JSON", details={"response": response.text[:200]}
            ) from exc


__all__ = ["WordPressApiClient", "WordPressApiError", "basic_auth"]
