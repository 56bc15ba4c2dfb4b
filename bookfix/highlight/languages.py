"""Custom highlight.js language definitions shipped with bookfix.

Responsibilities:
- Provide HCL and Bicep highlight.js language modules as JavaScript sources.
- Render the loader module and `package.json` for the custom language bundle.
"""

from __future__ import annotations

import json
from pathlib import Path

from ..models.datatypes import HighlightLanguage


BUNDLE_PACKAGE_NAME = "custom-languages"
LOADER_FILENAME = "register-languages.js"

# Existing highlight.js languages re-registered under another name.
LANGUAGE_ALIASES_FROM_BUILTINS = {"markup": "xml"}


_HCL_SOURCE = r"""module.exports = function(hljs) {
  return {
    name: 'hcl',
    case_insensitive: true,
    keywords: {
      keyword: 'resource provider variable data terraform module output locals',
      literal: 'true false null'
    },
    contains: [
      hljs.COMMENT('//', '$'),
      hljs.COMMENT('#', '$'),
      hljs.COMMENT('/\\*', '\\*/'),
      {
        beginKeywords: 'resource',
        end: '\\{',
        contains: [hljs.QUOTE_STRING_MODE]
      },
      {
        className: 'string',
        begin: '"',
        end: '"',
        contains: [{
          className: 'variable',
          begin: '\\$\\{',
          end: '\\}',
          contains: [hljs.BACKSLASH_ESCAPE]
        }],
        illegal: '\\n'
      },
      {
        className: 'number',
        begin: '\\b\\d+(\\.\\d+)?',
        relevance: 0
      }
    ]
  };
};
"""

_BICEP_SOURCE = r"""module.exports = function(hljs) {
  return {
    name: 'bicep',
    keywords: {
      keyword: 'param var resource module output targetScope import as existing for if',
      built_in: 'string int bool array object',
      literal: 'true false null'
    },
    contains: [
      hljs.QUOTE_STRING_MODE,
      hljs.NUMBER_MODE,
      hljs.COMMENT('//', '$'),
      hljs.COMMENT('/\\*', '\\*/'),
      {
        className: 'function',
        beginKeywords: 'resource module',
        end: '\\{',
        excludeEnd: true,
        contains: [
          hljs.TITLE_MODE,
          {
            className: 'string',
            begin: "'",
            end: "'"
          },
          {
            className: 'string',
            begin: '@',
            end: '\\('
          }
        ]
      }
    ]
  };
};
"""


DEFAULT_LANGUAGES: tuple[HighlightLanguage, ...] = (
    HighlightLanguage(name="hcl", source=_HCL_SOURCE, aliases=("terraform",)),
    HighlightLanguage(name="bicep", source=_BICEP_SOURCE),
)


def render_loader_module(
    highlight_js_path: Path,
    languages: tuple[HighlightLanguage, ...] = DEFAULT_LANGUAGES,
) -> str:
    """Return the JavaScript module registering `languages` with highlight.js."""

    lines = [
        "// Registers bookfix custom languages with highlight.js.",
        f"const hljs = require({json.dumps(str(highlight_js_path))});",
        "",
    ]
    for language in languages:
        lines.append(
            f"hljs.registerLanguage({json.dumps(language.name)}, "
            f"require('./{language.name}'));"
        )
    for alias, builtin in sorted(LANGUAGE_ALIASES_FROM_BUILTINS.items()):
        lines.append(
            f"hljs.registerLanguage({json.dumps(alias)}, "
            f"() => hljs.getLanguage({json.dumps(builtin)}));"
        )
    for language in languages:
        if language.aliases:
            lines.append(
                f"hljs.registerAliases({json.dumps(list(language.aliases))}, "
                f"{{ languageName: {json.dumps(language.name)} }});"
            )
    lines.append("")
    return "\n".join(lines)


def registered_aliases(
    languages: tuple[HighlightLanguage, ...] = DEFAULT_LANGUAGES,
) -> tuple[tuple[str, str], ...]:
    """Return `(alias, language)` pairs the loader module registers."""

    pairs = sorted(LANGUAGE_ALIASES_FROM_BUILTINS.items())
    for language in languages:
        pairs.extend((alias, language.name) for alias in language.aliases)
    return tuple(pairs)


def render_package_json() -> str:
    """Return the `package.json` payload for the custom language bundle."""

    payload = {
        "name": BUNDLE_PACKAGE_NAME,
        "version": "1.0.0",
        "description": "Custom language definitions for HonKit syntax highlighting",
        "main": LOADER_FILENAME,
        "license": "MIT",
    }
    return json.dumps(payload, indent=2) + "\n"
