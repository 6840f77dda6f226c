"""Symmetric encryption for stored passwords."""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken


class SecretCipher:
    """Fernet cipher keyed by a SHA-256 digest of the process secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("secret must not be empty")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def encrypt(self, text: str) -> str:
        return self._fernet.encrypt(text.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")


__all__ = ["InvalidToken", "SecretCipher"]
