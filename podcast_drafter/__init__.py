"""Podcast drafter: normalise a recording, host it on FileBrowser, draft it on WordPress."""

__version__ = "0.1.0"
