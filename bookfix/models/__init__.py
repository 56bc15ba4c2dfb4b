"""Typed records shared across bookfix modules."""

from .datatypes import (
    FileOutcome,
    FixRunSummary,
    HighlightLanguage,
    NormalizationReport,
    RegistrationReport,
)

__all__ = [
    "FileOutcome",
    "FixRunSummary",
    "HighlightLanguage",
    "NormalizationReport",
    "RegistrationReport",
]
