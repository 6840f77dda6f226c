"""Loudness normalisation through an external ffmpeg process."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from ..errors import TransformError
from ..settings import AudioSettings
from ..utils.file_helper import ensure_parent

LOGGER = logging.getLogger(__name__)

_STDERR_TAIL = 500


class AudioNormalizer(Protocol):
    """Turns an input recording into a normalised output file."""

    def normalize(self, input_path: Path, output_path: Path) -> bool:
        """Write ``output_path`` or raise :class:`TransformError`."""


class FfmpegNormalizer:
    """Compressor followed by EBU R128 loudnorm, re-encoded to MP3."""

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()

    @property
    def settings(self) -> AudioSettings:
        return self._settings

    def build_command(self, input_path: Path, output_path: Path) -> list[str]:
        s = self._settings
        return [
            s.ffmpeg_binary,
            "-hide_banner",
            "-nostdin",
            "-y",
            "-loglevel",
            "error",
            "-i",
            str(input_path),
            "-af",
            s.filter_chain(),
            "-codec:a",
            s.codec,
            "-b:a",
            s.bitrate,
            "-ac",
            str(s.channels),
            str(output_path),
        ]

    def normalize(self, input_path: Path, output_path: Path) -> bool:
        if not input_path.is_file():
            raise TransformError("Audio processing failed", details=f"input not found: {input_path}")

        ensure_parent(output_path)
        cmd = self.build_command(input_path, output_path)
        LOGGER.info(
            "Running ffmpeg",
            extra={"event": "audio.normalize", "input": str(input_path), "output": str(output_path)},
        )
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self._settings.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise TransformError(
                "Audio processing failed",
                details=f"{self._settings.ffmpeg_binary} not found in PATH",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise TransformError(
                "Audio processing failed",
                details=f"ffmpeg timed out after {self._settings.timeout:g} seconds",
            ) from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            LOGGER.error(
                "ffmpeg exited with an error",
                extra={"event": "audio.error", "returncode": result.returncode, "stderr": stderr[-_STDERR_TAIL:]},
            )
            raise TransformError(
                "Audio processing failed",
                details=stderr[-_STDERR_TAIL:] or f"ffmpeg exited with code {result.returncode}",
            )
        return True


__all__ = ["AudioNormalizer", "FfmpegNormalizer"]
