"""Configuration model and loaders for bookfix.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `BookfixConfig`: normalized runtime settings for one command run.
- `ConfigLoader`: static construction helpers for `BookfixConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .io.discovery import DEFAULT_EXCLUDE_DIRS
from .parsing import (
    normalize_optional_string,
    parse_name_list,
    parse_permissive_boolean,
    parse_required_boolean,
)


_DEFAULT_EXTENSION = ".md"


@dataclass(slots=True)
class BookfixConfig:
    """Runtime configuration for one maintenance run.

    Attributes:
        root_dir: Book root scanned for markdown documents.
        extension: Document filename extension, including the leading dot.
        exclude_dirs: Directory names never descended into.
        dry_run: Normalize documents without writing them back.
        project_dir: Project directory holding `node_modules`.
        custom_languages_dir: Optional override for the custom highlight.js language bundle.
        highlight_search_paths: Extra highlight.js install locations tried first.
        extra: Additional metadata for future extensions.
    """

    root_dir: Path
    extension: str = _DEFAULT_EXTENSION
    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    dry_run: bool = False
    project_dir: Path = field(default_factory=Path.cwd)
    custom_languages_dir: Path | None = None
    highlight_search_paths: tuple[Path, ...] = ()
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate configuration values before running a command."""

        if not self.extension.startswith(".") or len(self.extension) < 2:
            raise ValueError("`extension` must start with `.` and name a suffix, e.g. `.md`.")
        for name in self.exclude_dirs:
            if not name.strip():
                raise ValueError("`exclude_dirs` entries must be non-empty directory names.")

    def resolved_languages_dir(self) -> Path:
        """Return the directory that receives custom highlight.js language modules."""

        if self.custom_languages_dir is not None:
            return self.custom_languages_dir
        return self.project_dir / "node_modules" / "custom-languages"


class ConfigLoader:
    """Factory methods for creating `BookfixConfig` from external sources."""

    _REQUIRED_YAML_KEYS = frozenset({"root_dir"})
    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "root_dir",
            "extension",
            "exclude_dirs",
            "dry_run",
            "project_dir",
            "custom_languages_dir",
            "highlight_search_paths",
            "extra",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> BookfixConfig:
        """Create a validated config from a YAML file.

        Relative paths inside the file are kept as written; they resolve
        against the working directory of the command.
        """

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> BookfixConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        root_dir = ConfigLoader._optional_env_path(env_map, "BOOKFIX_ROOT_DIR") or Path(".")
        extension = (
            normalize_optional_string(env_map.get("BOOKFIX_EXTENSION")) or _DEFAULT_EXTENSION
        )
        exclude_raw = normalize_optional_string(env_map.get("BOOKFIX_EXCLUDE_DIRS"))
        exclude_dirs = parse_name_list(exclude_raw) if exclude_raw else DEFAULT_EXCLUDE_DIRS
        dry_run = ConfigLoader._optional_env_boolean(env_map, "BOOKFIX_DRY_RUN") or False
        project_dir = ConfigLoader._optional_env_path(env_map, "BOOKFIX_PROJECT_DIR") or Path.cwd()
        languages_dir = ConfigLoader._optional_env_path(env_map, "BOOKFIX_CUSTOM_LANGUAGES_DIR")

        config = BookfixConfig(
            root_dir=root_dir,
            extension=extension,
            exclude_dirs=exclude_dirs,
            dry_run=dry_run,
            project_dir=project_dir,
            custom_languages_dir=languages_dir,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> BookfixConfig:
        """Build a validated config from a normalized mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)

        root_dir = ConfigLoader._required_path(payload, "root_dir", source_label)
        extension = (
            ConfigLoader._optional_non_empty_string(payload, "extension", source_label)
            or _DEFAULT_EXTENSION
        )
        exclude_dirs = ConfigLoader._optional_name_list(payload, "exclude_dirs", source_label)
        dry_run = ConfigLoader._optional_boolean(payload, "dry_run", source_label, default=False)
        project_dir = ConfigLoader._optional_path(payload, "project_dir", source_label)
        languages_dir = ConfigLoader._optional_path(payload, "custom_languages_dir", source_label)
        search_paths = ConfigLoader._optional_name_list(
            payload, "highlight_search_paths", source_label
        )
        extra = ConfigLoader._optional_string_map(payload, "extra", source_label)

        config = BookfixConfig(
            root_dir=root_dir,
            extension=extension,
            exclude_dirs=exclude_dirs if exclude_dirs is not None else DEFAULT_EXCLUDE_DIRS,
            dry_run=dry_run,
            project_dir=project_dir if project_dir is not None else Path.cwd(),
            custom_languages_dir=languages_dir,
            highlight_search_paths=tuple(Path(item) for item in search_paths or ()),
            extra=extra,
        )
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject unknown keys and report missing required keys."""

        keys = {str(key) for key in payload.keys()}
        missing = sorted(ConfigLoader._REQUIRED_YAML_KEYS - keys)
        if missing:
            raise ValueError(f"{source_label} is missing required key(s): {', '.join(missing)}.")
        unknown = sorted(keys - ConfigLoader._SUPPORTED_YAML_KEYS)
        if unknown:
            raise ValueError(f"{source_label} contains unsupported key(s): {', '.join(unknown)}.")

    @staticmethod
    def _required_path(payload: Mapping[str, Any], key: str, source_label: str) -> Path:
        """Return a required path value."""

        value = normalize_optional_string(payload.get(key))
        if value is None:
            raise ValueError(f"{source_label}: `{key}` must be a non-empty path.")
        return Path(value)

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str, source_label: str) -> Path | None:
        """Return an optional path value, treating blanks as missing."""

        value = ConfigLoader._optional_non_empty_string(payload, key, source_label)
        return Path(value) if value is not None else None

    @staticmethod
    def _optional_non_empty_string(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> str | None:
        """Return an optional scalar string value, treating blanks as missing."""

        value = payload.get(key)
        if value is None:
            return None
        if isinstance(value, (Mapping, list)):
            raise ValueError(f"{source_label}: `{key}` must be a scalar string.")
        return normalize_optional_string(value)

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, *, default: bool
    ) -> bool:
        """Return an optional permissive boolean value."""

        if key not in payload or payload.get(key) is None:
            return default
        parsed = parse_permissive_boolean(payload.get(key))
        if parsed is None:
            raise ValueError(
                f"{source_label}: `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_name_list(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> tuple[str, ...] | None:
        """Return an optional list of names given as a YAML list or comma-separated string."""

        value = payload.get(key)
        if value is None:
            return None
        if isinstance(value, str):
            return parse_name_list(value)
        if not isinstance(value, list):
            raise ValueError(f"{source_label}: `{key}` must be a list or comma-separated string.")
        names: list[str] = []
        for item in value:
            normalized = normalize_optional_string(item)
            if normalized is None:
                raise ValueError(f"{source_label}: `{key}` entries must be non-empty strings.")
            names.append(normalized)
        return tuple(names)

    @staticmethod
    def _optional_string_map(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> dict[str, str]:
        """Return an optional string-to-string mapping with stripped values."""

        value = payload.get(key)
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError(f"{source_label}: `{key}` must be a mapping.")
        normalized: dict[str, str] = {}
        for raw_key, raw_value in value.items():
            item_key = normalize_optional_string(raw_key)
            if item_key is None:
                raise ValueError(f"{source_label}: `{key}` contains an empty key.")
            normalized[item_key] = normalize_optional_string(raw_value) or ""
        return normalized

    @staticmethod
    def _optional_env_path(env: Mapping[str, str], key: str) -> Path | None:
        """Return an optional path from the environment."""

        value = normalize_optional_string(env.get(key))
        return Path(value) if value is not None else None

    @staticmethod
    def _optional_env_boolean(env: Mapping[str, str], key: str) -> bool | None:
        """Return an optional boolean from the environment."""

        value = env.get(key)
        if normalize_optional_string(value) is None:
            return None
        return parse_required_boolean(value, key)
