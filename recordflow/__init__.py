"""recordflow - rule-based record filtering and ordering.

Apply an ordered set of named rules to a list of records:

    >>> from recordflow import process
    >>> process({"data": records, "condition": {"exclude": [{"disabled": True}], "sort_by": ["rating"]}})

Custom rules subclass Rule and are added with register_rule().
"""

from recordflow.core.constants import MISSING, RECORDFLOW_VERSION, RecordflowError
from recordflow.pipeline import (
    DataProcessor,
    PipelineResult,
    StepResult,
    get_processor,
    process,
    register_rule,
    set_processor,
)
from recordflow.rules import (
    ExcludeRule,
    IncludeRule,
    Rule,
    RuleExecutionError,
    RuleRegistry,
    RuleResult,
    SortByRule,
    TypeConstraintViolation,
    create_default_registry,
)

__version__ = RECORDFLOW_VERSION

__all__ = [
    "process",
    "register_rule",
    "get_processor",
    "set_processor",
    "DataProcessor",
    "PipelineResult",
    "StepResult",
    "Rule",
    "RuleResult",
    "RuleRegistry",
    "IncludeRule",
    "ExcludeRule",
    "SortByRule",
    "create_default_registry",
    "MISSING",
    "RecordflowError",
    "RuleExecutionError",
    "TypeConstraintViolation",
]
