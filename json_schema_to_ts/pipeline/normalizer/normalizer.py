"""
Schema normalizer.

Applies every registered rule, one full traversal per rule, to a deep copy
of the input schema. The caller's schema is never mutated.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable

from loguru import logger

from ..config import CompilerOptions, Rule
from .registry import RuleRegistry
from .rules import DEFAULT_RULES
from .traverse import traverse


def build_rules(options: CompilerOptions, rules: Iterable[tuple[str, Rule]] = ()) -> RuleRegistry:
    """Return a private registry: built-in rules, then option rules, then `rules`."""
    registry = DEFAULT_RULES.with_rules(options.normalizer_rules)
    registry.extend(rules)
    return registry


def normalize(
    schema: dict[str, Any],
    file_name: str = "",
    options: CompilerOptions | None = None,
    rules: Iterable[tuple[str, Rule]] = (),
) -> dict[str, Any]:
    """
    Normalize a schema into its canonical form.

    Args:
        schema: The (dereferenced, linked) JSON Schema
        file_name: Name of the source file, used to default the root `id`
        options: Compiler options
        rules: Additional (name, rule) pairs for this call only

    Returns:
        A normalized deep copy of `schema`
    """
    options = options or CompilerOptions()
    normalized = copy.deepcopy(schema)
    if not isinstance(normalized, dict):
        return normalized

    for name, rule in build_rules(options, rules):
        traverse(
            normalized,
            lambda node, is_root, rule=rule: rule(node, normalized, file_name, options, is_root),
        )
        logger.debug(f'Applied rule: "{name}"')

    return normalized
