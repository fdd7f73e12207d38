"""JSON Schema to TypeScript type-AST compiler

A Python package that normalizes JSON Schema documents with an ordered set
of rewrite rules and parses them into a type-AST of interfaces, enums,
tuples and unions, ready for a TypeScript declaration renderer.
"""

__version__ = "1.0.0"

from .errors import (
    InputReadError,
    JsonSchemaToTsError,
    RuleRegistryError,
    SchemaValidationError,
    UnrecognizedShapeError,
)
from .pipeline import (
    DEFAULT_RULES,
    CompilerOptions,
    RuleRegistry,
    TypeAST,
    compile_from_file,
    compile_schema,
    normalize,
    parse,
)

__all__ = [
    "compile_schema",
    "compile_from_file",
    "normalize",
    "parse",
    "CompilerOptions",
    "RuleRegistry",
    "DEFAULT_RULES",
    "TypeAST",
    "JsonSchemaToTsError",
    "InputReadError",
    "SchemaValidationError",
    "UnrecognizedShapeError",
    "RuleRegistryError",
]
