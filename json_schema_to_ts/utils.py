"""
Utility functions for JSON Schema to TypeScript compilation.
"""

import re
import unicodedata
from pathlib import PurePath
from typing import Any

# Characters that cannot appear in an identifier (a leading digit included)
_UNSAFE_PATTERN = re.compile(r"(^\s*[^a-zA-Z_$])|([^a-zA-Z_$\d])")
_LEADING_UNDERSCORE_PATTERN = re.compile(r"^_[a-z]")
_SNAKE_PATTERN = re.compile(r"_[a-z]")
_AFTER_DIGIT_PATTERN = re.compile(r"([\d$]+[a-zA-Z])")
_AFTER_SPACE_PATTERN = re.compile(r"\s+([a-zA-Z])")
_WHITESPACE_PATTERN = re.compile(r"\s")

# Fields holding free text that ends up inside /** ... */ comments
DESCRIPTIVE_FIELDS = ("description", "$comment")


def _deburr(text: str) -> str:
    """Replace accented letters by their basic latin counterparts."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def to_safe_string(text: str) -> str:
    """Convert arbitrary text into a PascalCase identifier.

    Examples:
        "my-schema" -> "MySchema"
        "first_name" -> "FirstName"
        "Café au lait" -> "CafeAuLait"
        "123abc" -> "23Abc"

    Args:
        text: Title, file name or definition key

    Returns:
        A string safe to use as a type identifier
    """
    s = _deburr(text)
    s = _UNSAFE_PATTERN.sub(" ", s)
    s = _LEADING_UNDERSCORE_PATTERN.sub(lambda m: m.group(0).upper(), s)
    s = _SNAKE_PATTERN.sub(lambda m: m.group(0)[1:].upper(), s)
    s = _AFTER_DIGIT_PATTERN.sub(lambda m: m.group(0).upper(), s)
    s = _AFTER_SPACE_PATTERN.sub(lambda m: m.group(0).upper().strip(), s)
    s = _WHITESPACE_PATTERN.sub("", s)
    return s[:1].upper() + s[1:]


def just_name(filename: str) -> str:
    """Return the base name of a path without its last extension."""
    if not filename:
        return ""
    return PurePath(filename).stem


def escape_block_comment(schema: Any) -> None:
    """Escape `*/` in descriptive fields so it cannot close a block comment."""
    if not isinstance(schema, dict):
        return
    for key in DESCRIPTIVE_FIELDS:
        value = schema.get(key)
        if isinstance(value, str) and "*/" in value:
            schema[key] = value.replace("*/", "* /")
