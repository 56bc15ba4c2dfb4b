"""Batch code-block fixing over a HonKit book.

Responsibilities:
- Discover markdown documents and run `CodeBlockNormalizer` on each.
- Write back only documents whose markup changed.
- Isolate per-document I/O failures so one bad file does not abort the batch.

Key public types:
- `CodeBlockFixer`: orchestration entry point.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from .config import BookfixConfig
from .errors import FixStageError
from .io.discovery import find_markdown_files
from .io.storage import DocumentStore
from .models.datatypes import (
    FILE_STATUS_FAILED,
    FILE_STATUS_FIXED,
    FILE_STATUS_UNCHANGED,
    FileOutcome,
    FixRunSummary,
)
from .telemetry.logger import RunLogger
from .text.normalizer import CodeBlockNormalizer


DocumentProgressCallback = Callable[[Path, FileOutcome], None]


class CodeBlockFixer:
    """Normalize code-block markup across every document of a book."""

    def __init__(
        self,
        normalizer: CodeBlockNormalizer | None = None,
        store: DocumentStore | None = None,
        run_logger: RunLogger | None = None,
        document_start_callback: Callable[[Path], None] | None = None,
        discovery_callback: Callable[[list[Path]], None] | None = None,
        document_progress_callback: DocumentProgressCallback | None = None,
    ) -> None:
        """Initialize collaborators and optional discovery and per-document progress hooks."""

        self._normalizer = normalizer or CodeBlockNormalizer()
        self._store = store or DocumentStore()
        self._run_logger = run_logger
        self._discovery_callback = discovery_callback
        self._document_start_callback = document_start_callback
        self._document_progress_callback = document_progress_callback

    def run(self, config: BookfixConfig) -> FixRunSummary:
        """Fix every discovered document and return the run summary.

        Raises:
            FixStageError: If the config is invalid or discovery fails.
        """

        try:
            config.validate()
        except ValueError as exc:
            raise FixStageError(
                stage="config",
                detail=str(exc),
                hint="Fix config values and rerun.",
            ) from exc

        paths = self._discover(config)
        if self._discovery_callback is not None:
            self._discovery_callback(paths)

        self._log_start("normalize", dry_run=config.dry_run)
        outcomes = [self.fix_document(path, dry_run=config.dry_run) for path in paths]
        summary = FixRunSummary(
            root_dir=config.root_dir,
            discovered_count=len(paths),
            outcomes=tuple(outcomes),
            dry_run=config.dry_run,
        )
        self._log_complete(
            "normalize",
            fixed=summary.fixed_count,
            failed=summary.failed_count,
        )
        return summary

    def fix_document(self, path: Path, dry_run: bool = False) -> FileOutcome:
        """Normalize one document, writing it back when changed unless `dry_run`."""

        if self._document_start_callback is not None:
            self._document_start_callback(path)

        try:
            content = self._store.read_text(path)
            report = self._normalizer.normalize_with_report(content)
            if report.changed and not dry_run:
                self._store.write_text(path, report.text)
        except (OSError, UnicodeDecodeError) as exc:
            outcome = FileOutcome(
                path=path,
                status=FILE_STATUS_FAILED,
                error_type=type(exc).__name__,
            )
            if self._run_logger is not None:
                self._run_logger.log_document_failure(path, type(exc).__name__)
        else:
            outcome = FileOutcome(
                path=path,
                status=FILE_STATUS_FIXED if report.changed else FILE_STATUS_UNCHANGED,
                applied_rules=report.applied_rules,
            )
            if report.changed and self._run_logger is not None:
                self._run_logger.log_document_fixed(path, report.applied_rules)

        if self._document_progress_callback is not None:
            self._document_progress_callback(path, outcome)
        return outcome

    def _discover(self, config: BookfixConfig) -> list[Path]:
        """Run the discovery stage with stage logging."""

        self._log_start("discover", root=config.root_dir)
        try:
            paths = find_markdown_files(
                config.root_dir,
                extension=config.extension,
                exclude_dirs=config.exclude_dirs,
            )
        except FixStageError:
            if self._run_logger is not None:
                self._run_logger.log_stage_failure("discover", "FixStageError")
            raise
        self._log_complete("discover", found=len(paths))
        return paths

    def _log_start(self, stage: str, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage, **context)

    def _log_complete(self, stage: str, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage, **context)
