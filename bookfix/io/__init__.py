"""Filesystem discovery and document storage helpers."""

from .discovery import find_markdown_files
from .storage import DocumentStore

__all__ = ["DocumentStore", "find_markdown_files"]
