"""
Pre-order walker over every sub-schema of a schema tree.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

# Keywords whose value is a mapping of name -> sub-schema
MAPPING_KEYWORDS = ("properties", "patternProperties", "definitions", "$defs")

# Keywords whose value is a list of sub-schemas
LIST_KEYWORDS = ("allOf", "anyOf", "oneOf")

# Keywords whose value may be a single sub-schema
SINGLE_KEYWORDS = ("additionalItems", "additionalProperties", "not")


def iter_children(schema: dict[str, Any]) -> Iterator[dict[str, Any]]:
    """Yield the direct sub-schemas of a node, in keyword order."""
    for keyword in MAPPING_KEYWORDS:
        value = schema.get(keyword)
        if isinstance(value, dict):
            for child in value.values():
                if isinstance(child, dict):
                    yield child

    items = schema.get("items")
    if isinstance(items, list):
        for child in items:
            if isinstance(child, dict):
                yield child
    elif isinstance(items, dict):
        yield items

    for keyword in SINGLE_KEYWORDS:
        value = schema.get(keyword)
        if isinstance(value, dict):
            yield value

    for keyword in LIST_KEYWORDS:
        value = schema.get(keyword)
        if isinstance(value, list):
            for child in value:
                if isinstance(child, dict):
                    yield child


def traverse(
    schema: dict[str, Any],
    callback: Callable[[dict[str, Any], bool], None],
    is_root: bool = True,
) -> None:
    """
    Invoke `callback(node, is_root)` on every node reachable from `schema`.

    The callback runs before the node's children are looked up, so children
    it adds are visited in the same pass. Shared and cyclic sub-schemas are
    visited once.

    Args:
        schema: Entry node of the traversal
        callback: Function called once per node
        is_root: Value passed for the entry node (children always get False)
    """
    seen: set[int] = set()
    stack: list[tuple[dict[str, Any], bool]] = [(schema, is_root)]
    while stack:
        node, node_is_root = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        callback(node, node_is_root)
        # Reversed so children pop off the stack in keyword order
        stack.extend((child, False) for child in reversed(list(iter_children(node))))
