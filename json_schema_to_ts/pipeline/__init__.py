"""
Pipeline - JSON Schema to type-AST compiler.

The pipeline runs in three phases:

1. Phase 1 (Validator): Reject schemas with structural contradictions
2. Phase 2 (Normalizer): Apply the ordered rule registry to a copy of the schema
3. Phase 3 (Parser): Map the normalized schema to a type-AST of named declarations

Dereferencing, linking, optimization and rendering happen outside this package.
"""

from __future__ import annotations

from .compiler import compile_from_file, compile_schema, read_schema
from .config import CompilerOptions, Rule
from .normalizer import DEFAULT_RULES, RuleRegistry, normalize
from .type_ast import SchemaParser, TypeAST, parse
from .validator import validate

__all__ = [
    "compile_schema",
    "compile_from_file",
    "read_schema",
    "CompilerOptions",
    "Rule",
    "RuleRegistry",
    "DEFAULT_RULES",
    "normalize",
    "SchemaParser",
    "TypeAST",
    "parse",
    "validate",
]
