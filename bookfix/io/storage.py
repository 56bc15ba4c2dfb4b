"""Document storage helpers.

Responsibilities:
- Read and overwrite whole UTF-8 documents.
- Keep a one-time backup copy before patching third-party files.
"""

from __future__ import annotations

import shutil
from pathlib import Path


class DocumentStore:
    """Filesystem-backed text document access."""

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the store with the text encoding used for every document."""

        self.encoding = encoding

    def read_text(self, path: Path) -> str:
        """Load full document text."""

        return path.read_text(encoding=self.encoding)

    def write_text(self, path: Path, content: str) -> Path:
        """Overwrite a document with `content` and return its path."""

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=self.encoding)
        return path

    def write_if_changed(self, path: Path, content: str) -> bool:
        """Write `content` only when it differs from the current file; return whether it wrote."""

        if path.exists() and self.read_text(path) == content:
            return False
        self.write_text(path, content)
        return True

    def backup(self, path: Path, suffix: str = ".backup") -> Path:
        """Copy `path` next to itself with `suffix` unless a backup already exists."""

        backup_path = path.with_name(f"{path.name}{suffix}")
        if not backup_path.exists():
            shutil.copyfile(path, backup_path)
        return backup_path
