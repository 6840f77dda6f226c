"""FileBrowser REST API helpers."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

import requests

from ...security import ServiceCredentials
from ..base import PlatformApiError, upstream_message


class FileBrowserApiError(PlatformApiError):
    """Raised when FileBrowser rejects a call or cannot be reached."""


class FileBrowserApiClient:
    """Minimal client for the FileBrowser login and resources endpoints."""

    def __init__(
        self,
        config: ServiceCredentials,
        *,
        session: requests.Session | None = None,
        timeout: float | None = 60.0,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._config.url.rstrip("/")

    def login(self) -> str:
        """Exchange username/password for a session token."""
        url = f"{self.base_url}/api/login"
        payload = {
            "username": self._config.username,
            "password": self._config.password,
            "recaptcha": "",
        }
        try:
            response = self._session.post(url, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FileBrowserApiError(
                "FileBrowser login failed", upstream=upstream_message(exc)
            ) from exc

        token = response.text.strip()
        if not token:
            raise FileBrowserApiError("FileBrowser login returned an empty token")
        return token

    def create_folder(self, token: str, folder: str) -> None:
        url = f"{self.base_url}/api/resources/{quote(folder)}/"
        try:
            response = self._session.post(url, headers={"X-Auth": token}, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FileBrowserApiError(
                "Folder creation failed", upstream=upstream_message(exc), details={"folder": folder}
            ) from exc

    def upload_file(self, token: str, file_path: Path, remote_path: str) -> None:
        """Stream ``file_path`` as the raw request body, replacing any existing file."""
        url = f"{self.base_url}/api/resources/{quote(remote_path)}"
        headers = {"X-Auth": token, "Content-Type": "application/octet-stream"}
        with file_path.open("rb") as stream:
            try:
                response = self._session.post(
                    url,
                    data=stream,
                    headers=headers,
                    params={"override": "true"},
                    timeout=self._timeout,
                )
                response.raise_for_status()
            except requests.RequestException as exc:
                raise FileBrowserApiError(
                    "Upload failed", upstream=upstream_message(exc), details={"path": remote_path}
                ) from exc

    def public_download_url(self, remote_path: str) -> str:
        return f"{self.base_url}/api/public/dl/{remote_path}"


__all__ = ["FileBrowserApiClient", "FileBrowserApiError"]
