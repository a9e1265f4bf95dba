#!/usr/bin/env python3
"""Base classes for record transformation rules.

This module provides the foundation for all rules:
- Rule abstract base class
- RuleResult for returning transformed collections
- RuleExecutionError for halting pipelines
- is_sequence() parameter check shared by the built-ins

Example:
    >>> class TakeFirstRule(Rule):
    ...     def execute(self, collection, params):
    ...         if not isinstance(params, int):
    ...             return collection
    ...         return list(collection[:params])
    ...
    >>> rule = TakeFirstRule()
    >>> result = rule.apply([{"id": 1}, {"id": 2}], 1)
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from recordflow.core.constants import Collection, ErrorCode, Record, RecordflowError


def is_sequence(value: Any) -> bool:
    """Return True for ordered sequences usable as rule parameters or collections.

    Lists and tuples qualify; strings, bytes and mappings do not.
    """
    return isinstance(value, (list, tuple))


@dataclass
class RuleResult:
    """Result of applying a rule to a collection."""

    records: List[Record]
    success: bool = True
    skipped: bool = False
    error: Optional[str] = None
    rule_name: Optional[str] = None
    duration_ms: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


class RuleExecutionError(RecordflowError):
    """Raised when a rule fails and the pipeline is set to halt on error."""

    def __init__(self, message: str, rule_name: Optional[str] = None):
        self.rule_name = rule_name
        super().__init__(message, ErrorCode.INTERNAL_ERROR)


class Rule(ABC):
    """Abstract base class for transformation rules.

    Subclasses implement execute(). It must not mutate the collection it is
    given, and should return the collection unchanged when the parameters
    are malformed.
    """

    def __init__(self, name: Optional[str] = None, enabled: bool = True):
        """Initialize rule.

        Args:
            name: Optional name for this rule (defaults to the class name)
            enabled: Whether the rule runs when applied
        """
        self.name = name or self.__class__.__name__
        self.enabled = enabled
        self.reset_stats()

    @abstractmethod
    def execute(self, collection: Collection, params: Any) -> Collection:
        """Transform a collection.

        Args:
            collection: Input records
            params: Rule-specific parameter value from the condition

        Returns:
            Transformed records
        """

    def apply(self, collection: Collection, params: Any) -> RuleResult:
        """Execute the rule with timing and error capture.

        A failing execute() leaves the input collection untouched in the
        result, with success=False and the error message set.

        Args:
            collection: Input records
            params: Rule-specific parameter value

        Returns:
            RuleResult with the transformed records
        """
        if not self.enabled:
            return RuleResult(
                records=list(collection),
                skipped=True,
                rule_name=self.name,
                metadata={"reason": "Rule disabled"},
            )

        start_time = time.perf_counter()

        try:
            output = self.execute(collection, params)
            if not is_sequence(output):
                raise TypeError(f"execute() returned {type(output).__name__}, expected a list of records")
            records = list(output)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._record(False, duration_ms)
            return RuleResult(
                records=list(collection),
                success=False,
                error=f"{self.name}: {e}",
                rule_name=self.name,
                duration_ms=duration_ms,
            )

        duration_ms = (time.perf_counter() - start_time) * 1000
        self._record(True, duration_ms)

        return RuleResult(
            records=records,
            rule_name=self.name,
            duration_ms=duration_ms,
        )

    def _record(self, success: bool, duration_ms: float) -> None:
        self._stats["total_executions"] += 1
        if success:
            self._stats["successful_executions"] += 1
        else:
            self._stats["failed_executions"] += 1
        self._stats["total_duration_ms"] += duration_ms

    def get_stats(self) -> Dict[str, Any]:
        """Get rule statistics.

        Returns:
            Statistics dictionary including average duration and success rate
        """
        stats = self._stats.copy()
        total = stats["total_executions"]
        if total > 0:
            stats["avg_duration_ms"] = stats["total_duration_ms"] / total
            stats["success_rate"] = stats["successful_executions"] / total
        else:
            stats["avg_duration_ms"] = 0.0
            stats["success_rate"] = 0.0
        return stats

    def reset_stats(self) -> None:
        self._stats: Dict[str, Any] = {
            "total_executions": 0,
            "successful_executions": 0,
            "failed_executions": 0,
            "total_duration_ms": 0.0,
        }

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def __call__(self, collection: Collection, params: Any) -> Collection:
        return self.execute(collection, params)

    def __repr__(self) -> str:
        status = "enabled" if self.enabled else "disabled"
        return f"<{self.__class__.__name__} name={self.name} {status}>"
