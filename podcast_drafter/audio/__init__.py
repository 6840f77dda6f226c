"""Audio processing adapters."""

from __future__ import annotations

from .normalizer import AudioNormalizer, FfmpegNormalizer

__all__ = ["AudioNormalizer", "FfmpegNormalizer"]
