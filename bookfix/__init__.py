"""Top-level package for bookfix.

This package keeps a HonKit documentation book buildable: it rewrites code-block
markup that clashes with HonKit templating and registers extra highlight.js
languages. The main entry points are `CodeBlockNormalizer` and `CodeBlockFixer`.
"""

from .fixer import CodeBlockFixer
from .text.normalizer import CodeBlockNormalizer

__all__ = ["CodeBlockFixer", "CodeBlockNormalizer", "__version__"]

__version__ = "0.1.0"
