from __future__ import annotations

import logging

import pytest

from podcast_drafter.errors import ConfigError
from podcast_drafter.security import SecretCipher, resolve_secret_key
from podcast_drafter.security.credential_provider import (
    ChainedSecretProvider,
    EnvSecretProvider,
    SecretNotFoundError,
    SettingsSecretProvider,
)
from podcast_drafter.settings import SecuritySettings


def test_environment_wins_over_config() -> None:
    settings = SecuritySettings(secret_key="from-config", secret_key_env="MY_KEY")

    assert resolve_secret_key(settings, env={"MY_KEY": "from-env"}) == "from-env"


def test_config_key_used_when_environment_empty() -> None:
    settings = SecuritySettings(secret_key="from-config", secret_key_env="MY_KEY")

    assert resolve_secret_key(settings, env={"MY_KEY": ""}) == "from-config"


def test_ephemeral_key_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    settings = SecuritySettings(secret_key=None, secret_key_env="MY_KEY")

    with caplog.at_level(logging.WARNING):
        first = resolve_secret_key(settings, env={})
        second = resolve_secret_key(settings, env={})

    assert len(first) == 64
    assert first != second
    assert any("ephemeral" in record.getMessage() for record in caplog.records)


def test_missing_key_is_fatal_when_ephemeral_disallowed() -> None:
    settings = SecuritySettings(secret_key=None, secret_key_env="MY_KEY", allow_ephemeral_key=False)

    with pytest.raises(ConfigError):
        resolve_secret_key(settings, env={})


def test_chained_provider_falls_through() -> None:
    settings = SecuritySettings(secret_key=" from-config ", secret_key_env="TOKEN")
    provider = ChainedSecretProvider(
        (EnvSecretProvider({"TOKEN": "  "}), SettingsSecretProvider(settings))
    )

    assert provider.get_secret("TOKEN") == "from-config"
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("OTHER")


def test_cipher_round_trips_unicode() -> None:
    cipher = SecretCipher("k")
    token = cipher.encrypt("pässwörd")

    assert token != "pässwörd"
    assert cipher.decrypt(token) == "pässwörd"
