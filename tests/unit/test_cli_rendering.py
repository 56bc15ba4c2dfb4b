"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
import typer

from bookfix.cli_rendering import (
    echo_discovered,
    echo_fix_summary,
    echo_registration_report,
    exit_with_command_error,
)
from bookfix.errors import FixStageError
from bookfix.models.datatypes import FileOutcome, FixRunSummary, RegistrationReport


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = FixStageError(
        stage="discover",
        detail="Documentation root `docs` is not a directory.",
        hint="Pass an existing book directory.",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("fix-code-blocks", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "fix-code-blocks failed at stage `discover`" in captured.err
    assert "Hint: Pass an existing book directory." in captured.err


def test_exit_with_command_error_renders_non_stage_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for non-stage failures."""

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("register-languages", RuntimeError("disk full"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "register-languages failed: disk full" in captured.err


def test_echo_fix_summary_reports_dry_run_totals(capsys: pytest.CaptureFixture[str]) -> None:
    """Dry-run summaries should say what would be fixed without a rebuild hint."""

    summary = FixRunSummary(
        root_dir=Path("docs"),
        discovered_count=3,
        outcomes=(
            FileOutcome(path=Path("docs/a.md"), status="fixed"),
            FileOutcome(path=Path("docs/b.md"), status="unchanged"),
            FileOutcome(path=Path("docs/c.md"), status="failed", error_type="OSError"),
        ),
        dry_run=True,
    )

    echo_fix_summary(summary)

    output = capsys.readouterr().out
    assert "markdown files" not in output
    assert "Would fix code blocks in 1 files" in output
    assert "Failed to process 1 files" in output
    assert "try building" not in output


def test_echo_discovered_prints_document_count(capsys: pytest.CaptureFixture[str]) -> None:
    echo_discovered([Path("a.md"), Path("b.md")])

    assert capsys.readouterr().out == "Found 2 markdown files\n"


def test_echo_registration_report_lists_languages_and_aliases(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Alias registrations should be reported next to the custom languages."""

    report = RegistrationReport(
        highlight_js_path=Path("hljs"),
        languages_dir=Path("custom-languages"),
        written_files=(),
        plugin_path=Path("index.js"),
        plugin_status="already-registered",
        languages=("hcl", "bicep"),
        aliases=(("markup", "xml"), ("terraform", "hcl")),
    )

    echo_registration_report(report)

    output = capsys.readouterr().out
    assert "Custom languages: hcl, bicep" in output
    assert "Language aliases: markup -> xml, terraform -> hcl" in output
