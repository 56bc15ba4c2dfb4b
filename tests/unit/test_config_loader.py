"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from bookfix.config import BookfixConfig, ConfigLoader


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed/blank values."""

    config_path = tmp_path / "bookfix.yml"
    config_path.write_text(
        """
root_dir: " docs "
extension: " .md "
exclude_dirs:
  - _book
  - node_modules
  - vendor
dry_run: " yes "
project_dir: " site "
custom_languages_dir: " site/hljs-languages "
highlight_search_paths: "/opt/npm/highlight.js, ./node_modules/highlight.js"
extra:
  profile: " nightly "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.root_dir == Path("docs")
    assert config.extension == ".md"
    assert config.exclude_dirs == ("_book", "node_modules", "vendor")
    assert config.dry_run is True
    assert config.project_dir == Path("site")
    assert config.resolved_languages_dir() == Path("site/hljs-languages")
    assert config.highlight_search_paths == (
        Path("/opt/npm/highlight.js"),
        Path("./node_modules/highlight.js"),
    )
    assert config.extra == {"profile": "nightly"}


def test_config_loader_from_yaml_applies_defaults(tmp_path: Path) -> None:
    """Only `root_dir` is required; every other key has a default."""

    config_path = tmp_path / "bookfix.yml"
    config_path.write_text("root_dir: docs\n", encoding="utf-8")

    config = ConfigLoader.from_yaml(config_path)

    assert config.extension == ".md"
    assert config.exclude_dirs == ("_book", "node_modules")
    assert config.dry_run is False
    assert config.resolved_languages_dir() == (
        config.project_dir / "node_modules" / "custom-languages"
    )


def test_config_loader_from_yaml_rejects_missing_and_unknown_keys(tmp_path: Path) -> None:
    """YAML loader should fail clearly on missing required or unknown fields."""

    missing_path = tmp_path / "missing.yml"
    missing_path.write_text("dry_run: true\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"missing required key\(s\): root_dir"):
        ConfigLoader.from_yaml(missing_path)

    unknown_path = tmp_path / "unknown.yml"
    unknown_path.write_text("root_dir: docs\nunknown_field: x\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"unsupported key\(s\): unknown_field"):
        ConfigLoader.from_yaml(unknown_path)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ("- docs\n", "top-level mapping"),
        ("root_dir: docs\ndry_run: maybe\n", "`dry_run` must be a boolean"),
        ("root_dir: docs\nextension: md\n", "`extension` must start with `.`"),
        ("root_dir: docs\nexclude_dirs: 3\n", "`exclude_dirs` must be a list"),
        ("root_dir: [unclosed\n", "not valid YAML"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_values(
    tmp_path: Path, payload: str, message: str
) -> None:
    """Invalid YAML payloads should raise `ValueError` with an actionable message."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(payload, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_config_loader_from_env_reads_bookfix_variables(tmp_path: Path) -> None:
    """Environment loader should map `BOOKFIX_*` variables onto config fields."""

    config = ConfigLoader.from_env(
        {
            "BOOKFIX_ROOT_DIR": str(tmp_path / "docs"),
            "BOOKFIX_EXTENSION": ".markdown",
            "BOOKFIX_EXCLUDE_DIRS": "_book, vendor",
            "BOOKFIX_DRY_RUN": "on",
            "BOOKFIX_PROJECT_DIR": str(tmp_path),
            "BOOKFIX_CUSTOM_LANGUAGES_DIR": " ",
        }
    )

    assert config.root_dir == tmp_path / "docs"
    assert config.extension == ".markdown"
    assert config.exclude_dirs == ("_book", "vendor")
    assert config.dry_run is True
    assert config.project_dir == tmp_path
    assert config.custom_languages_dir is None


def test_config_loader_from_env_rejects_invalid_boolean() -> None:
    """Invalid boolean tokens in the environment should fail fast."""

    with pytest.raises(ValueError, match="`BOOKFIX_DRY_RUN` must be a boolean value"):
        ConfigLoader.from_env({"BOOKFIX_DRY_RUN": "sometimes"})


def test_config_validate_rejects_blank_exclude_entry() -> None:
    """Exclude names must be non-empty."""

    config = BookfixConfig(root_dir=Path("docs"), exclude_dirs=("_book", " "))

    with pytest.raises(ValueError, match="`exclude_dirs` entries must be non-empty"):
        config.validate()
