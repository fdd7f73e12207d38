"""
Shape classification of schema nodes.

Both the normalizer rules and the type parser decide what a node "looks
like" through `classify`, so the sniffing of untyped fields lives here.
"""

from __future__ import annotations

from enum import Flag
from typing import Any


class Shape(Flag):
    """Structural category of a schema node."""

    NEITHER = 0
    OBJECT_LIKE = 1
    ARRAY_LIKE = 2


def has_type(schema: Any, type_name: str) -> bool:
    """Check whether `type` is `type_name` or a list containing it."""
    if not isinstance(schema, dict):
        return False
    type_value = schema.get("type")
    if isinstance(type_value, list):
        return type_value.count(type_name) > 0
    return type_value == type_name


def classify(schema: Any, include_any: bool = True) -> Shape:
    """
    Classify a schema node.

    Args:
        schema: The schema node
        include_any: Whether `type: "any"` counts as both object- and array-like

    Returns:
        OBJECT_LIKE, ARRAY_LIKE, both, or NEITHER
    """
    if not isinstance(schema, dict):
        return Shape.NEITHER

    is_any = include_any and has_type(schema, "any")
    shape = Shape.NEITHER
    if "properties" in schema or has_type(schema, "object") or is_any:
        shape |= Shape.OBJECT_LIKE
    if "items" in schema or has_type(schema, "array") or is_any:
        shape |= Shape.ARRAY_LIKE
    return shape


def is_object_like(schema: Any) -> bool:
    return Shape.OBJECT_LIKE in classify(schema)


def is_array_like(schema: Any) -> bool:
    return Shape.ARRAY_LIKE in classify(schema)
