#!/usr/bin/env python3
"""Name-to-rule registry.

The registry maps condition keys to Rule instances. Registering a name
that is already bound replaces the previous rule. Lookups never fail:

    >>> registry = create_default_registry()
    >>> registry.resolve("include")
    <IncludeRule name=include enabled>
    >>> registry.resolve("unknown") is None
    True
"""

import threading
from typing import Any, Dict, List, Optional

from recordflow.core.constants import ErrorCode, RecordflowError
from recordflow.core.logging import get_logger
from recordflow.rules.base import Rule
from recordflow.rules.builtin import builtin_rules


class TypeConstraintViolation(RecordflowError, TypeError):
    """Raised when a registration does not satisfy the Rule contract."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_INPUT)


class RuleRegistry:
    """Thread-safe mapping of rule names to rules.

    Writers take the lock; readers that need a consistent view across
    several lookups should work from snapshot().
    """

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}
        self._lock = threading.RLock()
        self._logger = get_logger()

    def register(self, name: str, rule: Rule) -> None:
        """Bind a rule to a name, replacing any existing binding.

        Args:
            name: Condition key the rule answers to
            rule: Rule instance

        Raises:
            TypeConstraintViolation: If name is not a non-empty string or
                rule is not a Rule
        """
        if not isinstance(name, str) or not name:
            raise TypeConstraintViolation(f"Rule name must be a non-empty string, got {name!r}")
        if not isinstance(rule, Rule):
            raise TypeConstraintViolation(
                f"Rule {name!r} must be an instance of Rule, got {type(rule).__name__}"
            )

        with self._lock:
            replaced = name in self._rules
            self._rules[name] = rule

        self._logger.debug("Registered rule", rule=name, replaced=replaced)

    def unregister(self, name: str) -> bool:
        """Remove a binding.

        Returns:
            True if the name was bound
        """
        with self._lock:
            return self._rules.pop(name, None) is not None

    def resolve(self, name: Any) -> Optional[Rule]:
        """Look up a rule by name; None when unbound."""
        try:
            return self._rules.get(name)
        except TypeError:
            return None

    def snapshot(self) -> Dict[str, Rule]:
        """Copy of the current bindings."""
        with self._lock:
            return dict(self._rules)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._rules)

    def __contains__(self, name: Any) -> bool:
        return self.resolve(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    def __repr__(self) -> str:
        return f"<RuleRegistry rules={self.names()}>"


def create_default_registry() -> RuleRegistry:
    """Registry holding include, exclude and sort_by."""
    registry = RuleRegistry()
    for rule in builtin_rules():
        registry.register(rule.name, rule)
    return registry
