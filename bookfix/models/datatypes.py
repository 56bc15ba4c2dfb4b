"""Core datatypes shared across bookfix modules.

Responsibilities:
- Represent immutable records exchanged between normalizer, fixer and CLI.
- Provide explicit typing for deterministic reporting.

Key types:
- `NormalizationReport`, `FileOutcome`, `FixRunSummary`,
  `HighlightLanguage`, and `RegistrationReport`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


FILE_STATUS_FIXED = "fixed"
FILE_STATUS_UNCHANGED = "unchanged"
FILE_STATUS_FAILED = "failed"

PLUGIN_STATUS_PATCHED = "patched"
PLUGIN_STATUS_ALREADY_REGISTERED = "already-registered"
PLUGIN_STATUS_MISSING = "missing"


@dataclass(frozen=True, slots=True)
class NormalizationReport:
    """Result of running every code-block rewrite rule over one document.

    Attributes:
        text: Normalized document text.
        changed: Whether at least one rule matched.
        applied_rules: Names of rules that matched, in rule order.
    """

    text: str
    changed: bool
    applied_rules: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """Processing outcome for one markdown document.

    Attributes:
        path: Absolute document path.
        status: One of `fixed`, `unchanged` or `failed`.
        applied_rules: Names of rules that matched the document.
        error_type: Exception class name for failed documents.
    """

    path: Path
    status: str
    applied_rules: tuple[str, ...] = ()
    error_type: str | None = None


@dataclass(frozen=True, slots=True)
class FixRunSummary:
    """Aggregate result of one code-block fixing run."""

    root_dir: Path
    discovered_count: int
    outcomes: tuple[FileOutcome, ...] = ()
    dry_run: bool = False

    @property
    def fixed_count(self) -> int:
        """Return number of documents rewritten (or that would be, in dry-run mode)."""

        return sum(1 for outcome in self.outcomes if outcome.status == FILE_STATUS_FIXED)

    @property
    def failed_count(self) -> int:
        """Return number of documents that could not be processed."""

        return sum(1 for outcome in self.outcomes if outcome.status == FILE_STATUS_FAILED)

    @property
    def fixed_paths(self) -> tuple[Path, ...]:
        """Return paths of fixed documents in processing order."""

        return tuple(
            outcome.path for outcome in self.outcomes if outcome.status == FILE_STATUS_FIXED
        )


@dataclass(frozen=True, slots=True)
class HighlightLanguage:
    """A custom highlight.js language definition.

    Attributes:
        name: Registered language name and module file stem.
        source: JavaScript module exporting the highlight.js language factory.
        aliases: Extra names resolving to this language.
    """

    name: str
    source: str
    aliases: tuple[str, ...] = ()

    @property
    def module_filename(self) -> str:
        """Return the filename used inside the custom languages directory."""

        return f"{self.name}.js"


@dataclass(frozen=True, slots=True)
class RegistrationReport:
    """Outcome of ensuring custom highlight.js languages are registered.

    Attributes:
        languages: Names of the custom language modules installed.
        aliases: `(alias, language)` pairs registered alongside them.
    """

    highlight_js_path: Path
    languages_dir: Path
    written_files: tuple[Path, ...]
    plugin_path: Path
    plugin_status: str
    backup_path: Path | None = None
    languages: tuple[str, ...] = field(default_factory=tuple)
    aliases: tuple[tuple[str, str], ...] = field(default_factory=tuple)
