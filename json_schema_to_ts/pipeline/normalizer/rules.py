"""
Built-in normalizer rules.

Each rule takes (schema, root_schema, file_name, options, is_root), mutates
`schema` in place when it applies, and leaves anything it cannot interpret
untouched. Order matters: later rules rely on the canonical forms produced
by earlier ones (e.g. unary types are destructured before items are
materialized into tuples).
"""

from __future__ import annotations

from typing import Any

from ...utils import escape_block_comment, just_name, to_safe_string
from ..config import CompilerOptions
from .registry import RuleRegistry
from .shapes import is_array_like, is_object_like


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def remove_null_type_if_enum_has_null(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    enum = schema.get("enum")
    type_value = schema.get("type")
    enum_has_null = isinstance(enum, list) and any(e is None for e in enum)
    if enum_has_null and isinstance(type_value, list) and "null" in type_value:
        schema["type"] = [t for t in type_value if t != "null"]


def destructure_unary_types(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    type_value = schema.get("type")
    if isinstance(type_value, list) and len(type_value) == 1:
        schema["type"] = type_value[0]


def add_empty_required(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    if is_object_like(schema) and "required" not in schema:
        schema["required"] = []


def required_false_to_empty(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    if schema.get("required") is False:
        schema["required"] = []


def default_additional_properties(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    # Open-world default, replaceable by registering a rule under the same name
    if (
        is_object_like(schema)
        and "additionalProperties" not in schema
        and schema.get("patternProperties") is None
    ):
        schema["additionalProperties"] = True


def default_root_id(
    schema: dict,
    _root: dict,
    file_name: str,
    _options: CompilerOptions,
    is_root: bool,
) -> None:
    if is_root and not schema.get("id") and not schema.get("$id"):
        schema["id"] = to_safe_string(just_name(file_name))


def escape_closing_comment(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    escape_block_comment(schema)


def remove_min_max_items(
    schema: dict,
    _root: dict,
    _file_name: str,
    options: CompilerOptions,
    _is_root: bool,
) -> None:
    if options.ignore_min_and_max_items:
        schema.pop("maxItems", None)
        schema.pop("minItems", None)


def default_min_items(
    schema: dict,
    _root: dict,
    _file_name: str,
    options: CompilerOptions,
    _is_root: bool,
) -> None:
    if options.ignore_min_and_max_items:
        return
    # maxItems is left alone: maxItems = 0 is meaningful
    if is_array_like(schema):
        min_items = schema.get("minItems")
        schema["minItems"] = min_items if _is_number(min_items) else 0


def materialize_tuple_items(
    schema: dict,
    _root: dict,
    _file_name: str,
    options: CompilerOptions,
    _is_root: bool,
) -> None:
    if options.ignore_min_and_max_items:
        return
    max_items = schema.get("maxItems")
    min_items = schema.get("minItems")
    has_max_items = _is_number(max_items) and max_items >= 0
    has_min_items = _is_number(min_items) and min_items > 0

    items = schema.get("items")
    # `items: true` is a single schema too
    if (isinstance(items, dict) or items is True) and (has_max_items or has_min_items):
        length = int((max_items if has_max_items else 0) or (min_items if has_min_items else 0))
        if not has_max_items:
            # Open-ended tail collects the remaining items
            schema["additionalItems"] = items
        schema["items"] = [items] * length

    items = schema.get("items")
    if isinstance(items, list) and has_max_items and max_items < len(items):
        schema["items"] = items[: int(max_items)]


def defs_to_definitions(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    defs = schema.get("$defs")
    if not isinstance(defs, dict):
        return
    definitions = schema.get("definitions")
    if isinstance(definitions, dict):
        # $defs wins on key collisions
        schema["definitions"] = {**definitions, **defs}
    else:
        schema["definitions"] = defs
    del schema["$defs"]


def const_to_singleton_enum(
    schema: dict,
    _root: dict,
    _file_name: str,
    _options: CompilerOptions,
    _is_root: bool,
) -> None:
    if "const" in schema:
        schema["enum"] = [schema.pop("const")]


DEFAULT_RULES = RuleRegistry(
    [
        ('Remove `type=["null"]` if `enum=[null]`', remove_null_type_if_enum_has_null),
        ("Destructure unary types", destructure_unary_types),
        ("Add empty `required` property if none is defined", add_empty_required),
        ("Transform `required`=false to `required`=[]", required_false_to_empty),
        ("Default additionalProperties to true", default_additional_properties),
        ("Default top level `id`", default_root_id),
        ("Escape closing JSDoc comment", escape_closing_comment),
        ("Optionally remove maxItems and minItems", remove_min_max_items),
        ("Normalize schema.minItems", default_min_items),
        ("Normalize schema.items", materialize_tuple_items),
        ("Transform $defs to definitions", defs_to_definitions),
        ("Transform const to singleton enum", const_to_singleton_enum),
    ]
).freeze()
