"""Ensure custom highlight.js languages are registered for HonKit.

Responsibilities:
- Locate the highlight.js install used by HonKit.
- Write the custom language bundle only when its files are missing or stale.
- Preload the bundle from the HonKit highlight plugin exactly once, keeping a
  single backup of the original plugin file.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Mapping

from ..config import BookfixConfig
from ..errors import FixStageError
from ..io.storage import DocumentStore
from ..models.datatypes import (
    PLUGIN_STATUS_ALREADY_REGISTERED,
    PLUGIN_STATUS_MISSING,
    PLUGIN_STATUS_PATCHED,
    HighlightLanguage,
    RegistrationReport,
)
from ..telemetry.logger import RunLogger
from .languages import (
    DEFAULT_LANGUAGES,
    LOADER_FILENAME,
    registered_aliases,
    render_loader_module,
    render_package_json,
)


_PLUGIN_EXPORT_ANCHOR = "module.exports = {"
_PRELOAD_MARKER = "// bookfix: load custom languages"
# Any earlier preload of a custom language loader, marked or not.
_LOADER_REQUIRE_RE = re.compile(
    r"(?:" + re.escape(_PRELOAD_MARKER) + r"\n)?"
    r"require\((['\"])(?P<path>[^'\"\n]*" + re.escape(LOADER_FILENAME) + r")\1\);?"
)
_HONKIT_HIGHLIGHT_SUBPATH = Path("honkit", "node_modules", "highlight.js")


def default_highlight_search_paths(
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> tuple[Path, ...]:
    """Return highlight.js install candidates in lookup order."""

    env_map: Mapping[str, str] = os.environ if env is None else env
    working_dir = cwd if cwd is not None else Path.cwd()
    candidates: list[Path] = []
    npm_prefix = (env_map.get("NPM_CONFIG_PREFIX") or "").strip()
    if npm_prefix:
        candidates.append(Path(npm_prefix) / "lib" / "node_modules" / _HONKIT_HIGHLIGHT_SUBPATH)
    candidates.append(Path("/usr/local/lib/node_modules") / _HONKIT_HIGHLIGHT_SUBPATH)
    candidates.append(working_dir / "node_modules" / "highlight.js")
    return tuple(candidates)


def plugin_path_for(highlight_js_path: Path) -> Path:
    """Return the HonKit highlight plugin entry module next to a highlight.js install."""

    return highlight_js_path.parent / "@honkit" / "honkit-plugin-highlight" / "index.js"


class HighlightLanguageRegistrar:
    """Install custom highlight.js languages and hook them into HonKit."""

    def __init__(
        self,
        store: DocumentStore | None = None,
        run_logger: RunLogger | None = None,
        languages: tuple[HighlightLanguage, ...] = DEFAULT_LANGUAGES,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize registrar collaborators and the language set to install."""

        self._store = store or DocumentStore()
        self._run_logger = run_logger
        self._languages = languages
        self._env = env

    def find_highlight_js(self, config: BookfixConfig) -> Path:
        """Return the first existing highlight.js directory from configured and default paths.

        Raises:
            FixStageError: If no candidate exists.
        """

        candidates = config.highlight_search_paths + default_highlight_search_paths(
            env=self._env, cwd=config.project_dir
        )
        for candidate in candidates:
            if candidate.exists():
                return candidate
        raise FixStageError(
            stage="locate-highlight",
            detail="Could not find the highlight.js module used by HonKit.",
            hint=(
                "Install HonKit (`npm install honkit`) or list the highlight.js directory "
                "under `highlight_search_paths` in the config file."
            ),
        )

    def ensure_registered(self, config: BookfixConfig) -> RegistrationReport:
        """Write the custom language bundle and make the HonKit plugin preload it."""

        self._log_start("locate-highlight")
        highlight_js_path = self.find_highlight_js(config)
        self._log_complete("locate-highlight", path=highlight_js_path)

        self._log_start("write-languages")
        languages_dir = config.resolved_languages_dir()
        written = self._write_bundle(languages_dir, highlight_js_path)
        self._log_complete("write-languages", written=len(written))

        self._log_start("patch-plugin")
        plugin_path = plugin_path_for(highlight_js_path)
        plugin_status, backup_path = self._patch_plugin(plugin_path, languages_dir)
        self._log_complete("patch-plugin", status=plugin_status)

        return RegistrationReport(
            highlight_js_path=highlight_js_path,
            languages_dir=languages_dir,
            written_files=tuple(written),
            plugin_path=plugin_path,
            plugin_status=plugin_status,
            backup_path=backup_path,
            languages=tuple(language.name for language in self._languages),
            aliases=registered_aliases(self._languages),
        )

    def _write_bundle(self, languages_dir: Path, highlight_js_path: Path) -> list[Path]:
        """Write bundle files whose content changed and return their paths."""

        files: dict[str, str] = {
            language.module_filename: language.source for language in self._languages
        }
        files[LOADER_FILENAME] = render_loader_module(highlight_js_path, self._languages)
        files["package.json"] = render_package_json()

        written: list[Path] = []
        for filename, content in files.items():
            path = languages_dir / filename
            if self._store.write_if_changed(path, content):
                written.append(path)
        return written

    def _patch_plugin(self, plugin_path: Path, languages_dir: Path) -> tuple[str, Path | None]:
        """Make the plugin preload the bundle loader, replacing a preload of another path."""

        if not plugin_path.exists():
            return PLUGIN_STATUS_MISSING, None

        content = self._store.read_text(plugin_path)
        loader_path = (languages_dir / LOADER_FILENAME).resolve()
        preload = f"{_PRELOAD_MARKER}\nrequire({json.dumps(str(loader_path))});"

        existing = _LOADER_REQUIRE_RE.search(content)
        if existing is not None:
            if existing.group(0) == preload or Path(existing.group("path")) == loader_path:
                return PLUGIN_STATUS_ALREADY_REGISTERED, None
            backup_path = self._store.backup(plugin_path)
            patched = content[: existing.start()] + preload + content[existing.end() :]
            self._store.write_text(plugin_path, patched)
            return PLUGIN_STATUS_PATCHED, backup_path

        if _PLUGIN_EXPORT_ANCHOR not in content:
            raise FixStageError(
                stage="patch-plugin",
                detail=f"`{plugin_path}` has no `{_PLUGIN_EXPORT_ANCHOR}` export to hook into.",
                hint="The HonKit highlight plugin layout changed; load the bundle manually.",
            )

        backup_path = self._store.backup(plugin_path)
        patched = content.replace(
            _PLUGIN_EXPORT_ANCHOR, f"{preload}\n\n{_PLUGIN_EXPORT_ANCHOR}", 1
        )
        self._store.write_text(plugin_path, patched)
        return PLUGIN_STATUS_PATCHED, backup_path

    def _log_start(self, stage: str) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage)

    def _log_complete(self, stage: str, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage, **context)

