"""
Exceptions raised by the schema compilation pipeline.
"""

from __future__ import annotations


class JsonSchemaToTsError(Exception):
    """Base class for all errors raised by json_schema_to_ts."""

    pass


class InputReadError(JsonSchemaToTsError):
    """Raised when a schema file cannot be read or is not valid JSON."""

    pass


class SchemaValidationError(JsonSchemaToTsError):
    """Raised when a schema fails the structural checks run before normalization.

    Attributes:
        errors: Every violation found, in traversal order
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid schema:\n" + "\n".join(f"  - {e}" for e in self.errors))


class UnrecognizedShapeError(JsonSchemaToTsError):
    """Raised by the parser when a node matches no inference rule.

    Attributes:
        source_path: JSON pointer of the offending node
    """

    def __init__(self, message: str, source_path: str = "#"):
        self.source_path = source_path
        super().__init__(f"{message} (at {source_path})")


class RuleRegistryError(JsonSchemaToTsError):
    """Raised when a frozen rule registry is modified."""

    pass
