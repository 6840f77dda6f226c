"""Upload of the processed episode into FileBrowser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import requests

from ...errors import UploadError
from ...security import ServiceCredentials
from ..base import ProbeResult, ProgressCallback, StorageUploader
from .api import FileBrowserApiClient, FileBrowserApiError

LOGGER = logging.getLogger(__name__)


class FileBrowserUploader(StorageUploader):
    """Login, ensure the folder exists, stream the file, return its public URL."""

    def __init__(
        self,
        *,
        timeout: float | None = 60.0,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._timeout = timeout
        self._session_factory = session_factory

    def _client(self, config: ServiceCredentials, session: requests.Session) -> FileBrowserApiClient:
        return FileBrowserApiClient(config, session=session, timeout=self._timeout)

    def upload(
        self,
        file_path: Path,
        filename: str,
        container: str,
        config: ServiceCredentials,
        on_progress: ProgressCallback,
    ) -> str:
        with self._session_factory() as session:
            return self._upload(self._client(config, session), file_path, filename, container, on_progress)

    def _upload(
        self,
        client: FileBrowserApiClient,
        file_path: Path,
        filename: str,
        container: str,
        on_progress: ProgressCallback,
    ) -> str:
        remote_path = f"{container}/{filename}"
        try:
            on_progress("Logging into FileBrowser...")
            token = client.login()

            try:
                client.create_folder(token, container)
            except FileBrowserApiError as exc:
                # Already-exists and real failures look alike here; a real one
                # will surface on the upload below.
                LOGGER.debug(
                    "Folder creation skipped",
                    extra={"event": "filebrowser.folder", "folder": container, "reason": str(exc)},
                )

            on_progress("Uploading to FileBrowser...")
            client.upload_file(token, file_path, remote_path)
        except FileBrowserApiError as exc:
            LOGGER.error(
                "FileBrowser upload error",
                extra={"event": "filebrowser.error", "path": remote_path, "reason": exc.upstream},
            )
            raise UploadError(
                "Failed to upload to FileBrowser", details=exc.upstream or str(exc)
            ) from exc

        url = client.public_download_url(remote_path)
        LOGGER.info("Uploaded to FileBrowser", extra={"event": "filebrowser.uploaded", "url": url})
        return url

    def probe(self, config: ServiceCredentials) -> ProbeResult:
        try:
            with self._session_factory() as session:
                self._client(config, session).login()
        except FileBrowserApiError as exc:
            return ProbeResult(success=False, message=exc.upstream or str(exc))
        return ProbeResult(success=True, message="Connected successfully")


__all__ = ["FileBrowserUploader"]
