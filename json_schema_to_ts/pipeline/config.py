"""
Configuration for the schema compilation pipeline.

Options may be given with Python names or with the camelCase names used
in JSON configuration files (e.g. "ignoreMinAndMaxItems").
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

# Rule signature: (schema, root_schema, file_name, options, is_root) -> None
Rule = Callable[[dict[str, Any], dict[str, Any], str, "CompilerOptions", bool], None]

_CAMEL_CASE_ALIASES = {
    "ignoreMinAndMaxItems": "ignore_min_and_max_items",
    "strictIndexSignatures": "strict_index_signatures",
    "unknownAny": "unknown_any",
    "enableConstEnums": "enable_const_enums",
    "unreachableDefinitions": "unreachable_definitions",
    "allowUntypedFallback": "allow_untyped_fallback",
    "normalizerRules": "normalizer_rules",
}


@dataclass
class CompilerOptions:
    """Options consumed by the normalizer and the type parser."""

    # Drop minItems/maxItems entirely, which disables tuple inference
    ignore_min_and_max_items: bool = False

    # Union index signature values with `undefined`
    strict_index_signatures: bool = False

    # Emit `unknown` instead of `any` for untyped schemas
    unknown_any: bool = True

    # Mark enums as eligible for `const enum` rendering
    enable_const_enums: bool = True

    # Parse definitions that nothing references
    unreachable_definitions: bool = False

    # Degrade untyped nodes to unknown/any instead of raising
    allow_untyped_fallback: bool = True

    # Extra (name, rule) pairs run after the built-in normalizer rules
    normalizer_rules: list[tuple[str, Rule]] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict) -> CompilerOptions:
        """Create options from a dictionary, ignoring unknown keys."""
        options = CompilerOptions()
        for k, v in d.items():
            k = _CAMEL_CASE_ALIASES.get(k, k)
            if k == "normalizer_rules":
                options.normalizer_rules = list(v.items()) if isinstance(v, dict) else list(v)
            elif hasattr(options, k):
                setattr(options, k, v)
        return options

    def to_dict(self) -> dict:
        """Convert options to a dictionary (custom rules are listed by name)."""
        return {
            "ignore_min_and_max_items": self.ignore_min_and_max_items,
            "strict_index_signatures": self.strict_index_signatures,
            "unknown_any": self.unknown_any,
            "enable_const_enums": self.enable_const_enums,
            "unreachable_definitions": self.unreachable_definitions,
            "allow_untyped_fallback": self.allow_untyped_fallback,
            "normalizer_rules": [name for name, _ in self.normalizer_rules],
        }
