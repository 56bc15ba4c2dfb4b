"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
per-document progress, and run summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .errors import FixStageError
from .models.datatypes import (
    FILE_STATUS_FAILED,
    FILE_STATUS_FIXED,
    PLUGIN_STATUS_ALREADY_REGISTERED,
    PLUGIN_STATUS_MISSING,
    FileOutcome,
    FixRunSummary,
    RegistrationReport,
)


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, FixStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_discovered(paths: list[Path]) -> None:
    """Print how many documents discovery found."""

    typer.echo(f"Found {len(paths)} markdown files")


def echo_document_start(path: Path) -> None:
    """Print the per-document processing line."""

    typer.echo(f"Processing {path}...")


def echo_document_outcome(path: Path, outcome: FileOutcome) -> None:
    """Print the per-document result line for fixed or failed documents."""

    if outcome.status == FILE_STATUS_FIXED:
        typer.echo(f"Fixed code blocks in {path}")
    elif outcome.status == FILE_STATUS_FAILED:
        typer.secho(
            f"Failed to process {path} ({outcome.error_type})",
            fg=typer.colors.RED,
            err=True,
        )


def echo_fix_summary(summary: FixRunSummary) -> None:
    """Print run totals and the follow-up hint."""

    verb = "Would fix" if summary.dry_run else "Fixed"
    typer.echo(f"\n{verb} code blocks in {summary.fixed_count} files")
    if summary.failed_count:
        typer.echo(f"Failed to process {summary.failed_count} files")
    if summary.fixed_count > 0 and not summary.dry_run:
        typer.echo("\nYou should now try building or previewing the book again.")
    elif summary.fixed_count == 0:
        typer.echo("\nNo code block issues were found.")


def echo_registration_report(report: RegistrationReport) -> None:
    """Print highlight.js registration results."""

    typer.echo(f"Found highlight.js at: {report.highlight_js_path}")
    typer.echo(f"Custom languages: {', '.join(report.languages)}")
    if report.aliases:
        aliases = ", ".join(f"{alias} -> {target}" for alias, target in report.aliases)
        typer.echo(f"Language aliases: {aliases}")
    typer.echo(f"Language bundle: {report.languages_dir}")
    for path in report.written_files:
        typer.echo(f"Wrote {path}")
    if report.plugin_status == PLUGIN_STATUS_MISSING:
        typer.echo(
            f"Could not find HonKit plugin highlight at {report.plugin_path}. "
            "Manual installation required."
        )
        return
    if report.plugin_status == PLUGIN_STATUS_ALREADY_REGISTERED:
        typer.echo(f"HonKit plugin highlight already loads custom languages: {report.plugin_path}")
        return
    if report.backup_path is not None:
        typer.echo(f"Backup of original plugin: {report.backup_path}")
    typer.echo(f"HonKit plugin highlight successfully patched: {report.plugin_path}")
    typer.echo("\nCustom language support has been added to HonKit.")
