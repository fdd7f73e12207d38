"""
Type AST module.

Contains the type-AST node definitions and the parser that builds them
from a normalized JSON Schema.
"""

from __future__ import annotations

from .nodes import (
    AnyNode,
    ArrayNode,
    CustomTypeNode,
    EnumMember,
    EnumNode,
    IndexSignature,
    InterfaceNode,
    IntersectionNode,
    LiteralNode,
    MemberDef,
    NamedReferenceNode,
    NeverNode,
    PrimitiveNode,
    TupleNode,
    TypeAST,
    TypeKind,
    TypeNode,
    UnionNode,
    UnknownNode,
)
from .parser import SchemaParser, parse

__all__ = [
    "TypeKind",
    "TypeNode",
    "AnyNode",
    "UnknownNode",
    "NeverNode",
    "PrimitiveNode",
    "LiteralNode",
    "CustomTypeNode",
    "NamedReferenceNode",
    "ArrayNode",
    "TupleNode",
    "MemberDef",
    "IndexSignature",
    "InterfaceNode",
    "EnumMember",
    "EnumNode",
    "UnionNode",
    "IntersectionNode",
    "TypeAST",
    "SchemaParser",
    "parse",
]
