"""Resolution of the process-wide encryption secret."""

from __future__ import annotations

import logging
import secrets
from abc import ABC, abstractmethod
from os import environ
from typing import Iterable, Mapping

from ..errors import ConfigError
from ..settings import SecuritySettings

LOGGER = logging.getLogger(__name__)


class SecretNotFoundError(KeyError):
    """No source holds a non-empty value for the requested name."""


class SecretProvider(ABC):
    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the value stored under ``key`` or raise :class:`SecretNotFoundError`."""


class EnvSecretProvider(SecretProvider):
    """Looks ``key`` up verbatim in the environment; empty values count as unset."""

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = environ if env is None else env

    def get_secret(self, key: str) -> str:
        value = self._env.get(key, "").strip()
        if not value:
            raise SecretNotFoundError(key)
        return value


class SettingsSecretProvider(SecretProvider):
    """Serves ``[security] secret_key`` under the name of its environment variable."""

    def __init__(self, settings: SecuritySettings) -> None:
        self._settings = settings

    def get_secret(self, key: str) -> str:
        value = (self._settings.secret_key or "").strip()
        if key != self._settings.secret_key_env or not value:
            raise SecretNotFoundError(key)
        return value


class ChainedSecretProvider(SecretProvider):
    """First provider with a value wins."""

    def __init__(self, providers: Iterable[SecretProvider]) -> None:
        self._providers = list(providers)

    def get_secret(self, key: str) -> str:
        for provider in self._providers:
            try:
                return provider.get_secret(key)
            except SecretNotFoundError:
                pass
        raise SecretNotFoundError(key)


def resolve_secret_key(
    settings: SecuritySettings,
    *,
    env: Mapping[str, str] | None = None,
) -> str:
    """Return the encryption secret, generating an ephemeral one only if allowed.

    The environment variable named by ``settings.secret_key_env`` wins over
    ``settings.secret_key``. A generated key lives in memory only, so anything
    saved with it is unreadable after a restart.
    """
    env_name = settings.secret_key_env
    provider = ChainedSecretProvider((EnvSecretProvider(env), SettingsSecretProvider(settings)))
    try:
        return provider.get_secret(env_name)
    except SecretNotFoundError:
        pass

    if not settings.allow_ephemeral_key:
        raise ConfigError(
            "Encryption key not configured",
            details=f"set {env_name} or [security] secret_key",
        )

    LOGGER.warning(
        "No encryption key configured; generated an ephemeral key. "
        "Saved credentials will not be readable after a restart.",
        extra={"event": "security.ephemeral_key", "env_var": env_name},
    )
    return secrets.token_hex(32)


__all__ = [
    "ChainedSecretProvider",
    "EnvSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
    "SettingsSecretProvider",
    "resolve_secret_key",
]
