"""
Replacer package for nbtoken placeholder substitution.

Flattens token trees into placeholder maps and substitutes them into strings
and nested data structures.
"""

from .base import ReplacementMap, TokenReplacer
from .formatters import value_stringify, value_translate

__all__ = ["ReplacementMap", "TokenReplacer", "value_stringify", "value_translate"]
