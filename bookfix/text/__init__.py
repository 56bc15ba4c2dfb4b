"""Markdown code-block rewriting components."""

from .normalizer import CodeBlockNormalizer
from .rules import (
    DEFAULT_LANGUAGE,
    DEFAULT_RULES,
    RewriteRule,
    default_fence_language,
    normalize_tabs_fences,
    unwrap_raw_around_fence,
    unwrap_raw_inside_fence,
)

__all__ = [
    "CodeBlockNormalizer",
    "DEFAULT_LANGUAGE",
    "DEFAULT_RULES",
    "RewriteRule",
    "unwrap_raw_around_fence",
    "unwrap_raw_inside_fence",
    "default_fence_language",
    "normalize_tabs_fences",
]
