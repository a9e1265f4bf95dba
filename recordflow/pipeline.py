#!/usr/bin/env python3
"""Rule pipeline for filtering and ordering record collections.

This module provides the dispatcher that applies the rules named in a
condition, in declaration order, to a collection of records:
- Declaration-order rule application
- Unknown rule names skipped without error
- Graceful degradation when a rule fails (or halt, if configured)
- Per-step trace and pipeline statistics

Example:
    >>> processor = DataProcessor()
    >>> processor.process({
    ...     "data": [{"name": "John", "email": "b@x"}, {"name": "Jane", "email": "a@x"}],
    ...     "condition": {"include": [{"name": "John"}], "sort_by": ["email"]},
    ... })
    {'result': [{'name': 'John', 'email': 'b@x'}]}
"""

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from recordflow.core.config import ConfigManager
from recordflow.core.constants import ConfigKey, Record, RequestKey, Response
from recordflow.core.logging import get_logger
from recordflow.rules.base import Rule, RuleExecutionError, is_sequence
from recordflow.rules.registry import RuleRegistry, create_default_registry


@dataclass
class StepResult:
    """Outcome of one rule application within a pipeline run."""

    rule: str
    success: bool
    skipped: bool
    input_size: int
    output_size: int
    duration_ms: float = 0.0
    error: Optional[str] = None


@dataclass
class PipelineResult:
    """Final records of a run plus its trace."""

    result: List[Record]
    steps: List[StepResult] = field(default_factory=list)
    unknown_rules: List[Any] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(step.success for step in self.steps)

    def to_response(self) -> Response:
        return {RequestKey.RESULT: self.result}


class DataProcessor:
    """Applies registered rules to record collections.

    The registry is snapshotted at the start of every run, so rules
    registered while a run is in progress only affect later runs.
    """

    def __init__(self, registry: Optional[RuleRegistry] = None, halt_on_error: bool = False):
        """Initialize processor.

        Args:
            registry: Rule registry (defaults to one holding the built-ins)
            halt_on_error: Raise RuleExecutionError when a rule fails
                instead of continuing with the unchanged collection
        """
        self.registry = registry if registry is not None else create_default_registry()
        self._halt_on_error = halt_on_error
        self._logger = get_logger()
        self._stats_lock = threading.Lock()
        self.reset_stats()

    @classmethod
    def from_config(cls, config: ConfigManager, registry: Optional[RuleRegistry] = None) -> "DataProcessor":
        """Build a processor from configuration values."""
        return cls(
            registry=registry,
            halt_on_error=bool(config.get(ConfigKey.HALT_ON_ERROR, False)),
        )

    def register_rule(self, name: str, rule: Rule) -> None:
        """Bind a rule to a condition key.

        Raises:
            TypeConstraintViolation: If rule is not a Rule
        """
        self.registry.register(name, rule)

    def process(self, request: Any) -> Response:
        """Run the pipeline described by a request.

        Args:
            request: Mapping with "data" (list of records) and an optional
                "condition" (mapping of rule name to parameters)

        Returns:
            {"result": [...]}; an empty list when data is not a collection
        """
        if not isinstance(request, Mapping):
            self._logger.warning("Request is not a mapping", type=type(request).__name__)
            return {RequestKey.RESULT: []}

        return self.run(request.get(RequestKey.DATA), request.get(RequestKey.CONDITION)).to_response()

    def run(self, data: Any, condition: Any = None) -> PipelineResult:
        """Apply the rules named in condition to data.

        Args:
            data: Collection of records
            condition: Mapping (or sequence of pairs) of rule name to params

        Returns:
            PipelineResult with the final records and a per-step trace

        Raises:
            RuleExecutionError: If a rule fails and halt_on_error is set
        """
        if not is_sequence(data):
            self._logger.debug("Data is not a collection", type=type(data).__name__)
            return PipelineResult(result=[])

        outcome = PipelineResult(result=list(data))
        if condition is None:
            return outcome

        rules = self.registry.snapshot()

        for name, params in self._iter_condition(condition):
            rule = self._lookup(rules, name)
            if rule is None:
                self._logger.debug("Skipping unknown rule", rule=name)
                outcome.unknown_rules.append(name)
                continue

            with self._logger.add_context(rule=name):
                applied = rule.apply(outcome.result, params)

                outcome.steps.append(
                    StepResult(
                        rule=name,
                        success=applied.success,
                        skipped=applied.skipped,
                        input_size=len(outcome.result),
                        output_size=len(applied.records),
                        duration_ms=applied.duration_ms,
                        error=applied.error,
                    )
                )

                if not applied.success:
                    if self._halt_on_error:
                        self._update_stats(outcome)
                        self._logger.error("Rule failed, halting pipeline", error=applied.error)
                        raise RuleExecutionError(applied.error or f"Rule {name} failed", name)
                    self._logger.warning("Rule failed, keeping previous records", error=applied.error)
                    continue

                self._logger.debug(
                    "Applied rule", input_size=len(outcome.result), output_size=len(applied.records)
                )
                outcome.result = applied.records

        self._update_stats(outcome)
        return outcome

    def _lookup(self, rules: Dict[str, Rule], name: Any) -> Optional[Rule]:
        try:
            return rules.get(name)
        except TypeError:
            return None

    def _iter_condition(self, condition: Any) -> List[Tuple[Any, Any]]:
        """Ordered (name, params) pairs of a condition.

        Mappings yield their items in insertion order. A list of
        two-element pairs is also accepted. Anything else has no rules.
        """
        if isinstance(condition, Mapping):
            return list(condition.items())

        if is_sequence(condition):
            pairs = []
            for entry in condition:
                if is_sequence(entry) and len(entry) == 2:
                    pairs.append((entry[0], entry[1]))
                else:
                    self._logger.debug("Ignoring malformed condition entry", entry=repr(entry))
            return pairs

        self._logger.warning("Condition is not a mapping, no rules applied", type=type(condition).__name__)
        return []

    def _update_stats(self, outcome: PipelineResult) -> None:
        with self._stats_lock:
            self._stats["total_runs"] += 1
            if outcome.success:
                self._stats["successful_runs"] += 1
            else:
                self._stats["failed_runs"] += 1
            self._stats["unknown_rules"] += len(outcome.unknown_rules)

    def get_stats(self) -> Dict[str, Any]:
        """Get pipeline statistics, including per-rule stats."""
        with self._stats_lock:
            stats: Dict[str, Any] = self._stats.copy()
        stats["rule_stats"] = {name: rule.get_stats() for name, rule in self.registry.snapshot().items()}
        return stats

    def reset_stats(self) -> None:
        """Reset pipeline statistics and those of every registered rule."""
        with self._stats_lock:
            self._stats = {
                "total_runs": 0,
                "successful_runs": 0,
                "failed_runs": 0,
                "unknown_rules": 0,
            }
        for rule in self.registry.snapshot().values():
            rule.reset_stats()

    def __repr__(self) -> str:
        return f"<DataProcessor rules={self.registry.names()}>"


# Global processor instance
_global_processor: Optional[DataProcessor] = None


def get_processor() -> DataProcessor:
    """Get or create the default processor from configuration."""
    global _global_processor
    if _global_processor is None:
        _global_processor = DataProcessor.from_config(ConfigManager())
    return _global_processor


def set_processor(processor: Optional[DataProcessor]) -> None:
    """Set (or reset, with None) the default processor."""
    global _global_processor
    _global_processor = processor


def process(request: Any) -> Response:
    """Run a request through the default processor."""
    return get_processor().process(request)


def register_rule(name: str, rule: Rule) -> None:
    """Register a rule with the default processor."""
    get_processor().register_rule(name, rule)
