"""Ordered code-block rewrite rules for HonKit markdown.

Responsibilities:
- Keep each rewrite behind a named pure function returning `(text, matches)`.
- Reproduce plain substring matching for the raw/default-language rules; only
  the tabs rule pairs fences line by line.

Key names:
- `RewriteRule`: named rule record used by `CodeBlockNormalizer`.
- `DEFAULT_RULES`: the four rules in application order.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable


DEFAULT_LANGUAGE = "plaintext"

_RAW_AROUND_FENCE_RE = re.compile(
    r"\{%\s*raw\s*%\}(```[\s\S]*?```)\{%\s*endraw\s*%\}"
)
_RAW_INSIDE_FENCE_RE = re.compile(
    r"```([a-zA-Z0-9]+)\n\{%\s*raw\s*%\}([\s\S]*?)\{%\s*endraw\s*%\}\n```"
)
# A closing fence directly followed by `{% endcode %}` is the canonical wrapper form.
_BARE_FENCE_RE = re.compile(r"```\n(?![ \t]*\{%\s*endcode\s*%\})")
_TABS_SPAN_RE = re.compile(
    r"(\{%\s*tabs\s*%\})([\s\S]*?)(\{%\s*endtabs\s*%\})"
)

_LANGUAGE_RE = re.compile(r"[a-zA-Z0-9]+")
_FENCE_LINE_RE = re.compile(r"^([ \t]*)```(.*)$")
# Closing fences carry no info string, apart from the tag `default_fence_language` adds.
_FENCE_CLOSE_LINE_RE = re.compile(r"^[ \t]*```(?:plaintext)?[ \t]*$")
_TAB_BOUNDARY_LINE_RE = re.compile(r"^[ \t]*\{%\s*(?:end)?tab\b[^%]*%\}[ \t]*$")
_CODE_OPEN_LINE_RE = re.compile(r"^[ \t]*\{%\s*code\b[^%]*%\}[ \t]*$")
_CODE_CLOSE_LINE_RE = re.compile(r"^[ \t]*\{%\s*endcode\s*%\}[ \t]*$")


RuleFunction = Callable[[str], tuple[str, int]]


@dataclass(frozen=True, slots=True)
class RewriteRule:
    """A named, pure text rewrite applied by the normalizer.

    Attributes:
        name: Stable rule identifier used in reports and logs.
        apply: Function returning rewritten text and its match count.
    """

    name: str
    apply: RuleFunction


def code_block(fence: str, language: str | None = None) -> str:
    """Wrap fence text in HonKit `{% code %}` markup."""

    opening = "{% code %}" if language is None else f'{{% code lang="{language}" %}}'
    return f"{opening}\n{fence}\n{{% endcode %}}"


def unwrap_raw_around_fence(text: str) -> tuple[str, int]:
    """Replace `{% raw %}` wrappers around a whole fence with `{% code %}`."""

    return _RAW_AROUND_FENCE_RE.subn(lambda match: code_block(match.group(1)), text)


def unwrap_raw_inside_fence(text: str) -> tuple[str, int]:
    """Move `{% raw %}` markers inside a tagged fence out to a `{% code lang %}` wrapper."""

    def _replace(match: re.Match[str]) -> str:
        language, body = match.group(1), match.group(2)
        return code_block(f"```{language}\n{body}\n```", language)

    return _RAW_INSIDE_FENCE_RE.subn(_replace, text)


def default_fence_language(text: str) -> tuple[str, int]:
    """Insert `plaintext` after every triple backtick directly followed by a newline.

    Matching is substring based, so a closing fence followed by a newline is
    tagged as well.
    """

    return _BARE_FENCE_RE.subn(f"```{DEFAULT_LANGUAGE}\n", text)


def normalize_tabs_fences(text: str) -> tuple[str, int]:
    """Rewrite fences inside `{% tabs %}` spans into canonical `{% code lang %}` blocks."""

    rewritten_total = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal rewritten_total
        opening, body, closing = match.groups()
        new_body, rewritten = _rewrite_fence_lines(body)
        rewritten_total += rewritten
        return f"{opening}{new_body}{closing}"

    result = _TABS_SPAN_RE.sub(_replace, text)
    return result, rewritten_total


def _rewrite_fence_lines(body: str) -> tuple[str, int]:
    """Return tabs-span body with unwrapped fences canonicalized and the rewrite count."""

    lines = body.split("\n")
    output: list[str] = []
    rewritten = 0
    index = 0

    while index < len(lines):
        line = lines[index]

        if _CODE_OPEN_LINE_RE.match(line):
            close_index = _find_line(lines, index + 1, _CODE_CLOSE_LINE_RE)
            if close_index is None:
                output.extend(lines[index:])
                break
            output.extend(lines[index : close_index + 1])
            index = close_index + 1
            continue

        opening = _FENCE_LINE_RE.match(line)
        if opening is None:
            output.append(line)
            index += 1
            continue

        close_index = _find_fence_close(lines, index + 1)
        if close_index is None:
            # An unterminated fence runs to the end of its tab and is left as is.
            boundary = _find_line(lines, index + 1, _TAB_BOUNDARY_LINE_RE)
            if boundary is None:
                output.extend(lines[index:])
                break
            output.extend(lines[index:boundary])
            index = boundary
            continue

        indent, tag = opening.group(1), opening.group(2).strip()
        if tag and not _LANGUAGE_RE.fullmatch(tag):
            output.extend(lines[index : close_index + 1])
            index = close_index + 1
            continue

        language = tag or DEFAULT_LANGUAGE
        output.append(f'{indent}{{% code lang="{language}" %}}')
        output.append(f"{indent}```{language}")
        output.extend(lines[index + 1 : close_index])
        output.append(f"{indent}```")
        output.append(f"{indent}{{% endcode %}}")
        rewritten += 1
        index = close_index + 1

    return "\n".join(output), rewritten


def _find_fence_close(lines: list[str], start: int) -> int | None:
    """Return the closing fence index, or `None` when a tab boundary comes first."""

    for index in range(start, len(lines)):
        if _TAB_BOUNDARY_LINE_RE.match(lines[index]):
            return None
        if _FENCE_CLOSE_LINE_RE.match(lines[index]):
            return index
    return None


def _find_line(lines: list[str], start: int, pattern: re.Pattern[str]) -> int | None:
    """Return the first line index at or after `start` matching `pattern`."""

    for index in range(start, len(lines)):
        if pattern.match(lines[index]):
            return index
    return None


DEFAULT_RULES: tuple[RewriteRule, ...] = (
    RewriteRule("unwrap-raw-around-fence", unwrap_raw_around_fence),
    RewriteRule("unwrap-raw-inside-fence", unwrap_raw_inside_fence),
    RewriteRule("default-fence-language", default_fence_language),
    RewriteRule("tabs-fence-normalization", normalize_tabs_fences),
)
