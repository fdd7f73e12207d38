"""
Structural checks run on a raw schema before normalization.

Only catches schemas the rest of the pipeline cannot give a meaning to;
full metaschema validation is left to dedicated tools.
"""

from __future__ import annotations

from typing import Any, Callable

from .normalizer.traverse import traverse

# (message, predicate) pairs; a predicate returns True when the node is valid
SchemaCheck = tuple[str, Callable[[dict[str, Any]], bool]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _enum_names_match(schema: dict[str, Any]) -> bool:
    if "tsEnumNames" not in schema:
        return True
    names = schema["tsEnumNames"]
    if not isinstance(names, list):
        return True
    return isinstance(schema.get("enum"), list) and len(schema["enum"]) == len(names)


def _enum_names_are_strings(schema: dict[str, Any]) -> bool:
    names = schema.get("tsEnumNames")
    if names is None:
        return True
    return isinstance(names, list) and all(isinstance(n, str) for n in names)


def _max_items_at_least_min_items(schema: dict[str, Any]) -> bool:
    max_items, min_items = schema.get("maxItems"), schema.get("minItems")
    if _is_number(max_items) and _is_number(min_items):
        return max_items >= min_items
    return True


def _non_negative(keyword: str) -> Callable[[dict[str, Any]], bool]:
    def check(schema: dict[str, Any]) -> bool:
        value = schema.get(keyword)
        return not _is_number(value) or value >= 0

    return check


def _deprecated_is_boolean(schema: dict[str, Any]) -> bool:
    return "deprecated" not in schema or isinstance(schema["deprecated"], bool)


CHECKS: list[SchemaCheck] = [
    ("tsEnumNames must have the same length as enum", _enum_names_match),
    ("tsEnumNames must be a list of strings", _enum_names_are_strings),
    ("maxItems must be greater than or equal to minItems", _max_items_at_least_min_items),
    ("maxItems must be non-negative", _non_negative("maxItems")),
    ("minItems must be non-negative", _non_negative("minItems")),
    ("deprecated must be a boolean", _deprecated_is_boolean),
]


def validate(schema: Any, name: str) -> list[str]:
    """
    Collect every structural violation in a schema.

    Args:
        schema: The raw JSON Schema
        name: Schema name, used as a prefix in messages

    Returns:
        List of error messages (empty when the schema is usable)
    """
    if not isinstance(schema, dict):
        return [f"Error at key {name!r}: schema must be an object"]

    errors: list[str] = []

    def check_node(node: dict[str, Any], _is_root: bool) -> None:
        label = node.get("title") or node.get("id") or node.get("$id") or name
        for message, predicate in CHECKS:
            if not predicate(node):
                errors.append(f"Error at key {label!r} in {name!r}: {message}")

    traverse(schema, check_node)
    return errors
