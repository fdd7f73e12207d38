"""
Compilation entry points: validate, normalize and parse a schema.

References are expected to be dereferenced and linked before a schema is
handed to `compile_schema`; local `$ref`s that remain are kept as named
references by the parser.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from loguru import logger

from ..errors import InputReadError, SchemaValidationError
from .config import CompilerOptions
from .normalizer import build_rules, normalize
from .type_ast import TypeAST, parse
from .validator import validate


class _Timer:
    def __init__(self):
        self.start = time.perf_counter()

    def __str__(self) -> str:
        return f"({(time.perf_counter() - self.start) * 1000:.0f}ms)"


def compile_schema(schema: dict[str, Any], name: str, options: CompilerOptions | None = None) -> TypeAST:
    """
    Compile a schema into a TypeAST.

    Args:
        schema: The JSON Schema (already dereferenced)
        name: Schema name, used as the default root identifier
        options: Compiler options

    Returns:
        The parsed TypeAST

    Raises:
        SchemaValidationError: If the schema fails the structural checks
        UnrecognizedShapeError: If a node cannot be mapped to a type
    """
    options = options or CompilerOptions()
    timer = _Timer()

    errors = validate(schema, name)
    if errors:
        for error in errors:
            logger.error(error)
        raise SchemaValidationError(errors)
    logger.info(f"validator {timer} No errors")

    normalized = normalize(schema, name, options)
    logger.info(f"normalizer {timer} Applied {len(build_rules(options))} rule(s)")

    ast = parse(normalized, options)
    logger.info(f"parser {timer} Parsed {len(ast.named)} named type(s)")
    return ast


def read_schema(path: str | Path) -> dict[str, Any]:
    """Read a JSON Schema file, raising InputReadError on failure."""
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputReadError(f'Unable to read file "{path}"') from e
    try:
        return json.loads(contents)
    except json.JSONDecodeError as e:
        raise InputReadError(f'Error parsing JSON in file "{path}": {e}') from e


def compile_from_file(path: str | Path, options: CompilerOptions | None = None) -> TypeAST:
    """Compile a schema file; the file name (without extension) names the root type."""
    path = Path(path)
    return compile_schema(read_schema(path), path.stem, options)
