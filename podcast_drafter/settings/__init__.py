"""Settings package exports."""

from .loader import (
    AppConfig,
    AudioSettings,
    HttpSettings,
    PathSettings,
    PublishingSettings,
    SecuritySettings,
    ServerSettings,
    build_paths,
    load_config,
)

__all__ = [
    "AppConfig",
    "AudioSettings",
    "HttpSettings",
    "PathSettings",
    "PublishingSettings",
    "SecuritySettings",
    "ServerSettings",
    "build_paths",
    "load_config",
]
