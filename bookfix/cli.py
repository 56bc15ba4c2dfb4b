"""Command-line interface for bookfix.

Responsibilities:
- Expose user-facing commands for book maintenance operations.
- Convert CLI arguments into `BookfixConfig` and run the matching service.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_discovered,
    echo_document_outcome,
    echo_document_start,
    echo_fix_summary,
    echo_registration_report,
    exit_with_command_error,
)
from .config import BookfixConfig, ConfigLoader
from .errors import FixStageError
from .fixer import CodeBlockFixer
from .highlight.registrar import HighlightLanguageRegistrar
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="bookfix",
    no_args_is_help=True,
    help="HonKit book maintenance CLI.",
)


def _load_yaml_config(config_path: Path | None) -> BookfixConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise FixStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise FixStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise FixStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_config(
    config_file: Path | None,
    root_dir: Path | None,
    dry_run: bool | None = None,
    project_dir: Path | None = None,
) -> BookfixConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    loaded_config = _load_yaml_config(config_file)
    if loaded_config is None:
        loaded_config = BookfixConfig(root_dir=Path("."))

    overrides: dict[str, object] = {}
    if root_dir is not None:
        overrides["root_dir"] = root_dir
    if dry_run is not None:
        overrides["dry_run"] = dry_run
    if project_dir is not None:
        overrides["project_dir"] = project_dir
    return replace(loaded_config, **overrides)


@app.command("fix-code-blocks")
def fix_code_blocks_command(
    root_dir: Annotated[
        Path | None,
        typer.Argument(
            help="Book root to scan for markdown files. Defaults to the current directory.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option(
            "--dry-run/--write",
            help="Report documents that need fixing without writing them.",
        ),
    ] = None,
) -> None:
    """Rewrite code-block markup in markdown files for HonKit templating."""

    try:
        config = _resolve_command_config(config_file, root_dir, dry_run=dry_run)
        typer.echo(f"Searching for markdown files in {config.root_dir}...")
        fixer = CodeBlockFixer(
            run_logger=RunLogger(),
            discovery_callback=echo_discovered,
            document_start_callback=echo_document_start,
            document_progress_callback=echo_document_outcome,
        )
        summary = fixer.run(config)
    except Exception as exc:
        exit_with_command_error("fix-code-blocks", exc)

    echo_fix_summary(summary)
    if summary.failed_count:
        raise typer.Exit(code=1)


@app.command("register-languages")
def register_languages_command(
    project_dir: Annotated[
        Path | None,
        typer.Option(
            "--project-dir",
            help="Project directory holding `node_modules`. Defaults to the current directory.",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
) -> None:
    """Ensure HCL, Bicep and markup highlighting is registered with HonKit."""

    try:
        config = _resolve_command_config(config_file, None, project_dir=project_dir)
        registrar = HighlightLanguageRegistrar(run_logger=RunLogger())
        report = registrar.ensure_registered(config)
    except Exception as exc:
        exit_with_command_error("register-languages", exc)

    echo_registration_report(report)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
