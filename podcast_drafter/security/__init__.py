"""Security utilities package."""

from __future__ import annotations

from .cipher import SecretCipher
from .credential_provider import ChainedSecretProvider, SecretProvider, resolve_secret_key
from .credential_store import CredentialStore
from .models import CredentialsBundle, ServiceCredentials

__all__ = [
    "ChainedSecretProvider",
    "CredentialStore",
    "CredentialsBundle",
    "SecretCipher",
    "SecretProvider",
    "ServiceCredentials",
    "resolve_secret_key",
]
