"""Encrypted on-disk storage for the credentials bundle."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from ..utils.file_helper import write_private_text
from .cipher import InvalidToken, SecretCipher
from .models import (
    CMS_SECTION,
    PODCAST_SECTION,
    STORAGE_SECTION,
    CredentialsBundle,
    ServiceCredentials,
)

LOGGER = logging.getLogger(__name__)


class CredentialStore:
    """Persists the bundle as JSON with both passwords encrypted.

    Writers and readers are not serialised against each other; saving while a
    job is loading is expected not to happen in normal operation.
    """

    def __init__(self, path: Path, cipher: SecretCipher) -> None:
        self._path = path
        self._cipher = cipher

    @property
    def path(self) -> Path:
        return self._path

    def is_configured(self) -> bool:
        return self._path.exists()

    def save(self, bundle: CredentialsBundle) -> None:
        payload = {
            STORAGE_SECTION: self._encrypt_section(bundle.remote_storage),
            CMS_SECTION: self._encrypt_section(bundle.cms),
            PODCAST_SECTION: {"baseUrl": bundle.public_base_url},
        }
        write_private_text(self._path, json.dumps(payload, indent=2))
        LOGGER.info(
            "Credentials saved",
            extra={"event": "credentials.saved", "path": str(self._path)},
        )

    def load(self) -> Optional[CredentialsBundle]:
        """Return the decrypted bundle, or ``None`` when missing or unreadable."""
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return CredentialsBundle(
                remote_storage=self._decrypt_section(raw[STORAGE_SECTION]),
                cms=self._decrypt_section(raw[CMS_SECTION]),
                public_base_url=str(raw[PODCAST_SECTION]["baseUrl"]),
            )
        except (OSError, ValueError, KeyError, TypeError, InvalidToken):
            # JSONDecodeError and UnicodeDecodeError are ValueErrors.
            LOGGER.error(
                "Stored credentials are unreadable; treating as not configured",
                extra={"event": "credentials.corrupt", "path": str(self._path)},
                exc_info=True,
            )
            return None

    def _encrypt_section(self, credentials: ServiceCredentials) -> dict[str, str]:
        return {
            "url": credentials.url,
            "username": credentials.username,
            "password": self._cipher.encrypt(credentials.password),
        }

    def _decrypt_section(self, data: dict[str, Any]) -> ServiceCredentials:
        return ServiceCredentials(
            url=str(data["url"]),
            username=str(data["username"]),
            password=self._cipher.decrypt(str(data["password"])),
        )


__all__ = ["CredentialStore"]
