"""Markdown document discovery.

Responsibilities:
- Enumerate book documents under a root directory in deterministic order.
- Skip build-output and dependency directories.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..errors import FixStageError


DEFAULT_EXCLUDE_DIRS = ("_book", "node_modules")


def find_markdown_files(
    root: Path,
    extension: str = ".md",
    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS,
) -> list[Path]:
    """Return sorted absolute paths of documents with `extension` under `root`.

    Any path with a directory segment listed in `exclude_dirs` is skipped.

    Raises:
        FixStageError: If `root` does not exist or is not a directory.
    """

    resolved_root = root.expanduser().resolve()
    if not resolved_root.is_dir():
        raise FixStageError(
            stage="discover",
            detail=f"Documentation root `{root}` is not a directory.",
            hint="Pass an existing book directory or set `root_dir` in the config file.",
        )

    excluded = frozenset(exclude_dirs)
    found: list[Path] = []
    try:
        for dirpath, dirnames, filenames in os.walk(resolved_root, onerror=_raise_walk_error):
            dirnames[:] = sorted(name for name in dirnames if name not in excluded)
            for filename in filenames:
                if filename.endswith(extension):
                    found.append(Path(dirpath) / filename)
    except OSError as exc:
        raise FixStageError(
            stage="discover",
            detail=f"Failed to scan `{resolved_root}`: {exc}",
            hint="Verify directory permissions and rerun.",
        ) from exc
    return sorted(found)


def _raise_walk_error(error: OSError) -> None:
    """Propagate directory scan errors instead of silently skipping subtrees."""

    raise error
