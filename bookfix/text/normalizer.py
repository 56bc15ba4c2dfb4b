"""Code-block normalization stage.

Responsibilities:
- Apply the ordered code-block rewrite rules to one markdown document.
- Report whether any rule matched, even if a later rule undoes an earlier one.
"""

from __future__ import annotations

from ..models.datatypes import NormalizationReport
from .rules import DEFAULT_RULES, RewriteRule


class CodeBlockNormalizer:
    """Rewrite HonKit code-block markup into its canonical templating form."""

    def __init__(self, rules: list[RewriteRule] | None = None) -> None:
        """Initialize with custom rules or the default rule sequence."""

        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def normalize_with_report(self, text: str) -> NormalizationReport:
        """Apply every rule in order and return normalized text with matched rule names."""

        current = text
        applied: list[str] = []
        for rule in self.rules:
            current, matches = rule.apply(current)
            if matches:
                applied.append(rule.name)
        return NormalizationReport(
            text=current,
            changed=bool(applied),
            applied_rules=tuple(applied),
        )

    def normalize(self, text: str) -> tuple[str, bool]:
        """Return normalized text and whether any rule matched."""

        report = self.normalize_with_report(text)
        return report.text, report.changed
