"""
Type-AST node definitions.

These nodes describe the declarations a renderer emits for a normalized
JSON Schema. Nodes with a `name` are named declarations: they are stored
once in `TypeAST.named` and may be shared by several parents. Links to a
declaration that is still being built are expressed with
`NamedReferenceNode`, so the node graph itself never contains cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class TypeKind(Enum):
    """Kind of a type-AST node."""

    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    PRIMITIVE = "primitive"  # string, number, boolean, null, undefined
    LITERAL = "literal"
    ARRAY = "array"
    TUPLE = "tuple"
    INTERFACE = "interface"
    ENUM = "enum"
    UNION = "union"
    INTERSECTION = "intersection"
    NAMED_REFERENCE = "named_reference"
    CUSTOM_TYPE = "custom_type"


def _ref_or_dict(node: TypeNode | None) -> dict[str, Any] | None:
    """Dump a child node, replacing named declarations by a reference."""
    if node is None:
        return None
    if node.is_named and node.kind is not TypeKind.NAMED_REFERENCE:
        return {"kind": TypeKind.NAMED_REFERENCE.value, "target": node.name}
    return node.to_dict()


@dataclass
class TypeNode:
    """Base class for all type-AST nodes."""

    kind: ClassVar[TypeKind] = TypeKind.ANY

    # Identifier of a named declaration (None for inline types)
    name: str | None = None

    # Schema description, rendered as a doc comment
    comment: str | None = None
    deprecated: bool = False

    # JSON pointer of the schema node this was parsed from
    source_path: str = ""

    @property
    def is_named(self) -> bool:
        return self.name is not None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"kind": self.kind.value}
        if self.name is not None:
            d["name"] = self.name
        if self.comment is not None:
            d["comment"] = self.comment
        if self.deprecated:
            d["deprecated"] = True
        d.update(self._body())
        return d

    def _body(self) -> dict[str, Any]:
        return {}


@dataclass
class AnyNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.ANY


@dataclass
class UnknownNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.UNKNOWN


@dataclass
class NeverNode(TypeNode):
    """The type of the `false` schema, which no value matches."""

    kind: ClassVar[TypeKind] = TypeKind.NEVER


@dataclass
class PrimitiveNode(TypeNode):
    """A primitive type: "string", "number", "boolean", "null" or "undefined"."""

    kind: ClassVar[TypeKind] = TypeKind.PRIMITIVE

    type_name: str = ""

    def _body(self) -> dict[str, Any]:
        return {"type": self.type_name}


@dataclass
class LiteralNode(TypeNode):
    """A single JSON value used as a type."""

    kind: ClassVar[TypeKind] = TypeKind.LITERAL

    value: Any = None

    def _body(self) -> dict[str, Any]:
        return {"value": self.value}


@dataclass
class CustomTypeNode(TypeNode):
    """A verbatim type expression supplied by the schema (`tsType`)."""

    kind: ClassVar[TypeKind] = TypeKind.CUSTOM_TYPE

    expression: str = ""

    def _body(self) -> dict[str, Any]:
        return {"expression": self.expression}


@dataclass
class NamedReferenceNode(TypeNode):
    """A non-owning link to a named declaration, looked up by identifier."""

    kind: ClassVar[TypeKind] = TypeKind.NAMED_REFERENCE

    target: str = ""

    def _body(self) -> dict[str, Any]:
        return {"target": self.target}


@dataclass
class ArrayNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.ARRAY

    element: TypeNode | None = None

    def _body(self) -> dict[str, Any]:
        return {"element": _ref_or_dict(self.element)}


@dataclass
class TupleNode(TypeNode):
    """A fixed sequence of element types with an optional rest type."""

    kind: ClassVar[TypeKind] = TypeKind.TUPLE

    elements: list[TypeNode] = field(default_factory=list)

    # Elements past min_items are optional; min_items may exceed len(elements)
    # when the rest type supplies the remaining required items
    min_items: int = 0
    max_items: int | None = None
    rest: TypeNode | None = None

    def _body(self) -> dict[str, Any]:
        return {
            "elements": [_ref_or_dict(e) for e in self.elements],
            "min_items": self.min_items,
            "max_items": self.max_items,
            "rest": _ref_or_dict(self.rest),
        }


@dataclass
class MemberDef:
    """A property of an interface."""

    name: str = ""
    type_node: TypeNode | None = None
    optional: bool = True
    comment: str | None = None
    deprecated: bool = False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "type": _ref_or_dict(self.type_node),
            "optional": self.optional,
        }
        if self.comment is not None:
            d["comment"] = self.comment
        if self.deprecated:
            d["deprecated"] = True
        return d


@dataclass
class IndexSignature:
    """Allowed extra keys of an interface; `pattern` is None for any string key."""

    type_node: TypeNode | None = None
    pattern: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"pattern": self.pattern, "type": _ref_or_dict(self.type_node)}


@dataclass
class InterfaceNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.INTERFACE

    members: list[MemberDef] = field(default_factory=list)

    # Empty when additionalProperties is false
    index_signatures: list[IndexSignature] = field(default_factory=list)

    def member(self, name: str) -> MemberDef | None:
        return next((m for m in self.members if m.name == name), None)

    def _body(self) -> dict[str, Any]:
        return {
            "members": [m.to_dict() for m in self.members],
            "index_signatures": [s.to_dict() for s in self.index_signatures],
        }


@dataclass
class EnumMember:
    name: str = ""
    value: LiteralNode | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value.value if self.value else None}


@dataclass
class EnumNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.ENUM

    members: list[EnumMember] = field(default_factory=list)

    # Rendering hint: eligible for `const enum`
    is_const: bool = False

    @property
    def values(self) -> list[Any]:
        return [m.value.value for m in self.members if m.value is not None]

    def _body(self) -> dict[str, Any]:
        return {"members": [m.to_dict() for m in self.members], "const": self.is_const}


@dataclass
class UnionNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.UNION

    variants: list[TypeNode] = field(default_factory=list)

    def _body(self) -> dict[str, Any]:
        return {"variants": [_ref_or_dict(v) for v in self.variants]}


@dataclass
class IntersectionNode(TypeNode):
    kind: ClassVar[TypeKind] = TypeKind.INTERSECTION

    parts: list[TypeNode] = field(default_factory=list)

    def _body(self) -> dict[str, Any]:
        return {"parts": [_ref_or_dict(p) for p in self.parts]}


@dataclass
class TypeAST:
    """Result of parsing: the root type plus every named declaration."""

    root: TypeNode | None = None

    # Identifier -> declaration, in registration order
    named: dict[str, TypeNode] = field(default_factory=dict)

    def get(self, name: str) -> TypeNode | None:
        return self.named.get(name)

    def resolve(self, node: TypeNode) -> TypeNode:
        """Follow a NamedReferenceNode to its declaration."""
        if isinstance(node, NamedReferenceNode):
            return self.named[node.target]
        return node

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": _ref_or_dict(self.root),
            "declarations": [node.to_dict() for node in self.named.values()],
        }
