"""Utility exports."""

from .file_helper import ensure_parent, remove_quietly, safe_upload_name, write_private_text
from .logging import configure_logging, get_logger

__all__ = [
    "ensure_parent",
    "remove_quietly",
    "safe_upload_name",
    "write_private_text",
    "configure_logging",
    "get_logger",
]
