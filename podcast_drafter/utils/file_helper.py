"""Filesystem helpers."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

LOGGER = logging.getLogger(__name__)


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def write_private_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Atomically replace ``path`` with ``data``, readable by the owner only."""
    ensure_parent(path)
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=str(path.parent), encoding=encoding
    ) as tmp:
        tmp.write(data)
        tmp_path = Path(tmp.name)
    tmp_path.replace(path)
    if os.name != "nt":
        os.chmod(path, 0o600)


def remove_quietly(path: Path | None) -> bool:
    """Delete ``path`` if present; errors are logged and never raised."""
    if path is None:
        return False
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError:
        LOGGER.warning(
            "Failed to remove temporary file",
            extra={"event": "cleanup.error", "path": str(path)},
            exc_info=True,
        )
        return False
    return True


def safe_upload_name(original: str | None, *, stamp: int) -> str:
    """Namespace an uploaded filename by submission time, dropping any directories."""
    base = Path((original or "").replace("\\", "/")).name or "upload"
    return f"{stamp}-{base}"
