"""
Ordered registry of named normalizer rules.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ...errors import RuleRegistryError
from ..config import Rule


class RuleRegistry:
    """Ordered (name, rule) pairs.

    Iteration order is registration order. Registering a name that is
    already present replaces the rule at its original position.
    """

    def __init__(self, rules: Iterable[tuple[str, Rule]] = ()):
        self._rules: dict[str, Rule] = {}
        self._frozen = False
        self.extend(rules)

    def register(self, name: str, rule: Rule) -> None:
        """Add a rule, or replace the rule already registered under `name`."""
        if self._frozen:
            raise RuleRegistryError(f"Cannot register rule {name!r}: registry is read-only")
        if not callable(rule):
            raise TypeError(f"Rule {name!r} is not callable")
        self._rules[name] = rule

    def extend(self, rules: Iterable[tuple[str, Rule]]) -> None:
        for name, rule in rules:
            self.register(name, rule)

    def freeze(self) -> RuleRegistry:
        """Make the registry read-only and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> RuleRegistry:
        """Return a mutable copy."""
        return RuleRegistry(self._rules.items())

    def with_rules(self, rules: Iterable[tuple[str, Rule]]) -> RuleRegistry:
        """Return a new registry with `rules` registered after the current ones."""
        registry = self.copy()
        registry.extend(rules)
        return registry

    def names(self) -> list[str]:
        return list(self._rules)

    def __iter__(self) -> Iterator[tuple[str, Rule]]:
        return iter(list(self._rules.items()))

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "mutable"
        return f"RuleRegistry({self.names()!r}, {state})"
