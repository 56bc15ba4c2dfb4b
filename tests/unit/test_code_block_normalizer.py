"""Unit tests for ordered code-block normalization."""

from __future__ import annotations

import pytest

from bookfix.text.normalizer import CodeBlockNormalizer
from bookfix.text.rules import RewriteRule


FIXED_POINT_CORPUS = [
    "no markup here",
    "{% raw %}```js\nconsole.log(1)\n```{% endraw %}",
    "```\nplain text\n```",
    "# Title\n\n```python\n{% raw %}print('{{ x }}')\n{% endraw %}\n```\n\nMore text.\n",
    "Intro\n\n```\nbare\n```\n\nOutro\n",
    "{% tabs %}\n```bash\nls\n```\n{% endtabs %}",
    "{% tabs %}\n{% raw %}```js\nx\n```{% endraw %}\n{% endtabs %}",
    (
        '{% tabs %}\n{% tab title="JS" %}\n```js\na\n```\n{% endtab %}\n'
        '{% tab title="Py" %}\n```py\nb\n```\n{% endtab %}\n{% endtabs %}\n'
    ),
    (
        '{% tabs %}\n{% tab title="A" %}\n```js title=x\nconsole.log(1)\n```\n{% endtab %}\n'
        '{% tab title="B" %}\n```py\nprint(2)\n```\n{% endtab %}\n{% endtabs %}'
    ),
]


def test_normalize_wraps_raw_escaped_fence_in_code_block() -> None:
    """Raw escape around a fence should become a code block and report a change."""

    result, changed = CodeBlockNormalizer().normalize(
        "{% raw %}```js\nconsole.log(1)\n```{% endraw %}"
    )

    assert result == "{% code %}\n```js\nconsole.log(1)\n```\n{% endcode %}"
    assert changed is True


def test_normalize_adds_plaintext_to_bare_fence() -> None:
    """Bare fences should receive the `plaintext` language tag."""

    result, changed = CodeBlockNormalizer().normalize("```\nplain text\n```")

    assert result == "```plaintext\nplain text\n```"
    assert changed is True


@pytest.mark.parametrize(
    "text",
    [
        "no markup here",
        "",
        "Inline `code` and ``double`` spans.",
        "```js\nconsole.log(1)\n```",
        "{% raw %}```js\nunterminated\n```",
        "{% tabs %}\n```js\nx\n",
    ],
)
def test_normalize_passes_through_documents_without_matches(text: str) -> None:
    """Documents with no matching markup should be returned unchanged."""

    assert CodeBlockNormalizer().normalize(text) == (text, False)


def test_normalize_with_report_lists_matched_rules_in_order() -> None:
    """Report should name every matching rule in application order."""

    report = CodeBlockNormalizer().normalize_with_report(
        "{% tabs %}\n```bash\nls\n```\n{% endtabs %}"
    )

    assert report.changed is True
    assert report.applied_rules == ("default-fence-language", "tabs-fence-normalization")
    assert report.text == (
        '{% tabs %}\n{% code lang="bash" %}\n```bash\nls\n```\n{% endcode %}\n{% endtabs %}'
    )


def test_normalize_does_not_rewrap_fence_already_wrapped_in_tabs() -> None:
    """A fence wrapped by the raw rule inside tabs should keep a single wrapper."""

    report = CodeBlockNormalizer().normalize_with_report(
        "{% tabs %}\n{% raw %}```js\nx\n```{% endraw %}\n{% endtabs %}"
    )

    assert report.text == "{% tabs %}\n{% code %}\n```js\nx\n```\n{% endcode %}\n{% endtabs %}"
    assert report.applied_rules == ("unwrap-raw-around-fence",)


def test_changed_is_reported_even_when_later_rule_undoes_earlier_rule() -> None:
    """`changed` is an OR across rules rather than a diff of the final text."""

    def _append_marker(text: str) -> tuple[str, int]:
        return text + "!", 1

    def _strip_marker(text: str) -> tuple[str, int]:
        return text.removesuffix("!"), 1

    normalizer = CodeBlockNormalizer(
        rules=[RewriteRule("append", _append_marker), RewriteRule("strip", _strip_marker)]
    )

    assert normalizer.normalize("same") == ("same", True)


@pytest.mark.parametrize("document", FIXED_POINT_CORPUS)
def test_second_pass_over_normalized_output_is_a_fixed_point(document: str) -> None:
    """Normalizing already-normalized output should report no further change."""

    normalizer = CodeBlockNormalizer()
    first, _ = normalizer.normalize(document)

    second_report = normalizer.normalize_with_report(first)

    assert second_report.changed is False, second_report.applied_rules
    assert second_report.text == first


def test_normalize_keeps_each_code_wrapper_inside_its_own_tab() -> None:
    """Fences with an info string must not pair with the next tab's fence."""

    source = (
        '{% tabs %}\n{% tab title="A" %}\n```js title=x\nconsole.log(1)\n```\n{% endtab %}\n'
        '{% tab title="B" %}\n```py\nprint(2)\n```\n{% endtab %}\n{% endtabs %}'
    )

    text, changed = CodeBlockNormalizer().normalize(source)

    assert changed is True
    tab_a, tab_b = text.split('{% tab title="B" %}')
    assert "{% code" not in tab_a
    assert tab_b.count('{% code lang="py" %}') == 1
    assert tab_b.count("{% endcode %}") == 1
    assert "```py\nprint(2)\n```\n{% endcode %}" in tab_b
