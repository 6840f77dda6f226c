"""Helpers for loading service configuration."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "PODCAST_DRAFTER_CONFIG"

_DEFAULT_EXTENSIONS = (".wav", ".mp3", ".m4a", ".flac", ".aac", ".ogg")


@dataclass(slots=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: tuple[str, ...] = ("*",)
    allowed_extensions: tuple[str, ...] = _DEFAULT_EXTENSIONS


@dataclass(slots=True)
class PathSettings:
    data_dir: Path
    uploads_dir: Path
    outputs_dir: Path
    log_dir: Path
    credentials_file: Path


@dataclass(slots=True)
class HttpSettings:
    timeout: float = 60.0


@dataclass(slots=True)
class AudioSettings:
    """Parameters passed to ffmpeg for compression and loudness normalisation."""

    ffmpeg_binary: str = "ffmpeg"
    timeout: float | None = 1800.0
    compressor_threshold_db: float = -20.0
    compressor_ratio: float = 4.0
    compressor_attack_ms: float = 5.0
    compressor_release_ms: float = 50.0
    target_lufs: float = -14.0
    true_peak_db: float = -1.5
    loudness_range: float = 11.0
    codec: str = "libmp3lame"
    bitrate: str = "128k"
    channels: int = 2

    def filter_chain(self) -> str:
        compressor = (
            f"acompressor=threshold={_num(self.compressor_threshold_db)}dB"
            f":ratio={_num(self.compressor_ratio)}"
            f":attack={_num(self.compressor_attack_ms)}"
            f":release={_num(self.compressor_release_ms)}"
        )
        loudnorm = (
            f"loudnorm=I={_num(self.target_lufs)}"
            f":TP={_num(self.true_peak_db)}"
            f":LRA={_num(self.loudness_range)}"
        )
        return f"{compressor},{loudnorm}"


@dataclass(slots=True)
class PublishingSettings:
    category_name: str = "Podcasts"
    title_suffix: str = "SUNDAY SERVICE"
    media_field: str = "Media-Input-Podcast"


@dataclass(slots=True)
class SecuritySettings:
    secret_key: str | None = None
    secret_key_env: str = "PODCAST_DRAFTER_SECRET_KEY"
    allow_ephemeral_key: bool = True


@dataclass(slots=True)
class AppConfig:
    paths: PathSettings
    server: ServerSettings = field(default_factory=ServerSettings)
    http: HttpSettings = field(default_factory=HttpSettings)
    audio: AudioSettings = field(default_factory=AudioSettings)
    publishing: PublishingSettings = field(default_factory=PublishingSettings)
    security: SecuritySettings = field(default_factory=SecuritySettings)


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _to_path(value: str | None, *, fallback: Path, root: Path = PROJECT_ROOT) -> Path:
    if not value:
        return fallback
    candidate = Path(value)
    return candidate if candidate.is_absolute() else root / candidate


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    if explicit:
        candidate = Path(explicit)
        required = True
    else:
        env_value = os.environ.get(CONFIG_ENV_VAR)
        candidate = Path(env_value) if env_value else PROJECT_ROOT / DEFAULT_CONFIG_NAME
        required = bool(env_value)
    if not candidate.is_absolute():
        candidate = PROJECT_ROOT / candidate
    return candidate, required


def _load_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _ensure_directories(paths: Iterable[Path]) -> None:
    for directory in paths:
        directory.mkdir(parents=True, exist_ok=True)


def _extensions(values: Iterable[str] | None) -> tuple[str, ...]:
    if not values:
        return _DEFAULT_EXTENSIONS
    normalised = []
    for value in values:
        item = str(value).strip().lower()
        if not item:
            continue
        normalised.append(item if item.startswith(".") else f".{item}")
    return tuple(normalised) or _DEFAULT_EXTENSIONS


def _optional_float(value: Any, default: float | None) -> float | None:
    if value is None:
        return default
    number = float(value)
    return number if number > 0 else None


def build_paths(data_dir: Path, section: dict[str, Any] | None = None, *, root: Path = PROJECT_ROOT) -> PathSettings:
    section = section or {}
    return PathSettings(
        data_dir=data_dir,
        uploads_dir=_to_path(section.get("uploads_dir"), fallback=data_dir / "uploads", root=root),
        outputs_dir=_to_path(section.get("outputs_dir"), fallback=data_dir / "downloads", root=root),
        log_dir=_to_path(section.get("log_dir"), fallback=data_dir / "logs", root=root),
        credentials_file=_to_path(
            section.get("credentials_file"), fallback=data_dir / "credentials.json", root=root
        ),
    )


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    path, required = _config_path(config_path)
    data = _load_toml(path, required=required)

    server_section = data.get("server", {})
    paths_section = data.get("paths", {})
    http_section = data.get("http", {})
    audio_section = data.get("audio", {})
    publishing_section = data.get("publishing", {})
    security_section = data.get("security", {})

    data_dir = _to_path(paths_section.get("data_dir"), fallback=PROJECT_ROOT / "data")
    paths = build_paths(data_dir, paths_section)
    _ensure_directories(
        (
            paths.data_dir,
            paths.uploads_dir,
            paths.outputs_dir,
            paths.log_dir,
            paths.credentials_file.parent,
        )
    )

    defaults = AudioSettings()
    audio = AudioSettings(
        ffmpeg_binary=str(audio_section.get("ffmpeg_binary", defaults.ffmpeg_binary)),
        timeout=_optional_float(audio_section.get("timeout"), defaults.timeout),
        compressor_threshold_db=float(
            audio_section.get("compressor_threshold_db", defaults.compressor_threshold_db)
        ),
        compressor_ratio=float(audio_section.get("compressor_ratio", defaults.compressor_ratio)),
        compressor_attack_ms=float(
            audio_section.get("compressor_attack_ms", defaults.compressor_attack_ms)
        ),
        compressor_release_ms=float(
            audio_section.get("compressor_release_ms", defaults.compressor_release_ms)
        ),
        target_lufs=float(audio_section.get("target_lufs", defaults.target_lufs)),
        true_peak_db=float(audio_section.get("true_peak_db", defaults.true_peak_db)),
        loudness_range=float(audio_section.get("loudness_range", defaults.loudness_range)),
        codec=str(audio_section.get("codec", defaults.codec)),
        bitrate=str(audio_section.get("bitrate", defaults.bitrate)),
        channels=int(audio_section.get("channels", defaults.channels)),
    )

    server = ServerSettings(
        host=str(server_section.get("host", "0.0.0.0")),
        port=int(os.environ.get("PORT") or server_section.get("port", 3001)),
        cors_origins=tuple(server_section.get("cors_origins", ["*"])),
        allowed_extensions=_extensions(server_section.get("allowed_extensions")),
    )

    publishing_defaults = PublishingSettings()
    publishing = PublishingSettings(
        category_name=str(
            publishing_section.get("category_name", publishing_defaults.category_name)
        ),
        title_suffix=str(publishing_section.get("title_suffix", publishing_defaults.title_suffix)),
        media_field=str(publishing_section.get("media_field", publishing_defaults.media_field)),
    )

    security = SecuritySettings(
        secret_key=security_section.get("secret_key") or None,
        secret_key_env=str(security_section.get("secret_key_env", "PODCAST_DRAFTER_SECRET_KEY")),
        allow_ephemeral_key=bool(security_section.get("allow_ephemeral_key", True)),
    )

    return AppConfig(
        paths=paths,
        server=server,
        http=HttpSettings(timeout=float(http_section.get("timeout", 60))),
        audio=audio,
        publishing=publishing,
        security=security,
    )
