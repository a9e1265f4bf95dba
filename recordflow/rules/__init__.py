"""recordflow Rules.

This module provides the pluggable record rules and their registry:
- Rule: base class every rule derives from
- IncludeRule, ExcludeRule, SortByRule: the built-in rules
- RuleRegistry: name-to-rule mapping used by the pipeline
"""

from .base import Rule, RuleExecutionError, RuleResult, is_sequence
from .builtin import ExcludeRule, IncludeRule, SortByRule, builtin_rules, compare_values
from .collation import collation_key, compare_strings
from .matching import get_field, matches_clause, prepare_clauses, strict_equals
from .registry import RuleRegistry, TypeConstraintViolation, create_default_registry

__all__ = [
    # Base
    "Rule",
    "RuleResult",
    "RuleExecutionError",
    "is_sequence",
    # Built-ins
    "IncludeRule",
    "ExcludeRule",
    "SortByRule",
    "builtin_rules",
    "compare_values",
    # Matching and collation
    "get_field",
    "matches_clause",
    "prepare_clauses",
    "strict_equals",
    "collation_key",
    "compare_strings",
    # Registry
    "RuleRegistry",
    "TypeConstraintViolation",
    "create_default_registry",
]
