"""
Normalizer - rule-driven canonicalization of JSON Schema trees.
"""

from __future__ import annotations

from .normalizer import build_rules, normalize
from .registry import RuleRegistry
from .rules import DEFAULT_RULES
from .shapes import Shape, classify, has_type
from .traverse import traverse

__all__ = [
    "normalize",
    "build_rules",
    "RuleRegistry",
    "DEFAULT_RULES",
    "Shape",
    "classify",
    "has_type",
    "traverse",
]
