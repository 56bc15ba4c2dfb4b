"""Custom highlight.js language registration for HonKit books."""

from .languages import DEFAULT_LANGUAGES
from .registrar import HighlightLanguageRegistrar

__all__ = ["DEFAULT_LANGUAGES", "HighlightLanguageRegistrar"]
