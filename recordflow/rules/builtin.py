#!/usr/bin/env python3
"""Built-in record rules: include, exclude and sort_by.

Include keeps a record only when it satisfies every clause of the group;
exclude drops a record when it satisfies any clause. The two are not
complements of each other for groups with more than one clause.

Example:
    >>> records = [{"name": "John", "age": 40}, {"name": "Jane", "age": 31}]
    >>> IncludeRule().execute(records, [{"name": "John"}])
    [{'name': 'John', 'age': 40}]
    >>> SortByRule().execute(records, ["age"])
    [{'name': 'Jane', 'age': 31}, {'name': 'John', 'age': 40}]
"""

from functools import cmp_to_key
from typing import Any, Callable, List, Sequence

from recordflow.core.constants import BuiltinRule, Collection, Record
from recordflow.rules.base import Rule, is_sequence
from recordflow.rules.collation import compare_strings
from recordflow.rules.matching import (
    get_field,
    is_missing,
    matches_all,
    matches_any,
    prepare_clauses,
    strict_equals,
)


class IncludeRule(Rule):
    """Keep records that satisfy every clause in the condition group."""

    def __init__(self, name: str = BuiltinRule.INCLUDE.value, enabled: bool = True):
        super().__init__(name=name, enabled=enabled)

    def execute(self, collection: Collection, params: Any) -> Collection:
        if not is_sequence(params) or not params:
            return collection

        clauses = prepare_clauses(params)
        return [record for record in collection if matches_all(record, clauses)]


class ExcludeRule(Rule):
    """Drop records that satisfy at least one clause in the condition group."""

    def __init__(self, name: str = BuiltinRule.EXCLUDE.value, enabled: bool = True):
        super().__init__(name=name, enabled=enabled)

    def execute(self, collection: Collection, params: Any) -> Collection:
        if not is_sequence(params) or not params:
            return collection

        clauses = prepare_clauses(params)
        return [record for record in collection if not matches_any(record, clauses)]


def compare_values(left: Any, right: Any) -> int:
    """Three-way compare of two field values for sorting.

    Missing values (absent or None) sort last. Strings use collation.
    Anything else uses natural ordering, and pairs that are neither
    strictly equal nor ordered left-before-right put left after right.

    Returns:
        -1, 0 or 1
    """
    if strict_equals(left, right):
        return 0

    left_missing = is_missing(left)
    right_missing = is_missing(right)
    if left_missing and right_missing:
        return 0
    if left_missing:
        return 1
    if right_missing:
        return -1

    if isinstance(left, str) and isinstance(right, str):
        return compare_strings(left, right)

    try:
        if left < right:
            return -1
    except TypeError:
        pass
    return 1


def make_comparator(keys: Sequence[Any]) -> Callable[[Record, Record], int]:
    """Build a record comparator over keys in priority order."""

    def compare(a: Record, b: Record) -> int:
        for key in keys:
            result = compare_values(get_field(a, key), get_field(b, key))
            if result != 0:
                return result
        return 0

    return compare


class SortByRule(Rule):
    """Stable sort by one or more fields, earliest key first."""

    def __init__(self, name: str = BuiltinRule.SORT_BY.value, enabled: bool = True):
        super().__init__(name=name, enabled=enabled)

    def execute(self, collection: Collection, params: Any) -> Collection:
        records: List[Record] = list(collection)
        if not is_sequence(params) or not params:
            return records

        records.sort(key=cmp_to_key(make_comparator(params)))
        return records


def builtin_rules() -> List[Rule]:
    """Fresh instances of every built-in rule."""
    return [IncludeRule(), ExcludeRule(), SortByRule()]
