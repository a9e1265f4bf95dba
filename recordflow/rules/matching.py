#!/usr/bin/env python3
"""Field access and clause matching for records.

A clause is a mapping of field name to expected value. A record satisfies
a clause when every field strictly equals its expected value:

    >>> clause = prepare_clause({"name": "John", "active": True})
    >>> matches_clause({"name": "John", "active": True, "age": 40}, clause)
    True
    >>> matches_clause({"name": "John", "active": 1}, clause)
    False
"""

from collections.abc import Mapping
from typing import Any, List, Sequence, Tuple

from recordflow.core.constants import MISSING, Record

PreparedClause = Tuple[Tuple[Any, Any], ...]


def get_field(record: Record, name: Any) -> Any:
    """Return a field value, or MISSING when the record lacks it.

    Records that are not mappings have no fields.
    """
    if not isinstance(record, Mapping):
        return MISSING
    try:
        return record.get(name, MISSING)
    except TypeError:
        # Unhashable field name
        return MISSING


def is_missing(value: Any) -> bool:
    """True for absent fields and for fields holding None."""
    return value is MISSING or value is None


def strict_equals(left: Any, right: Any) -> bool:
    """Compare two field values without cross-kind coercion.

    Booleans only equal booleans, MISSING equals nothing, and numbers
    compare by value regardless of int/float.
    """
    if left is MISSING or right is MISSING:
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    try:
        return bool(left == right)
    except Exception:
        return False


def prepare_clause(clause: Mapping) -> PreparedClause:
    """Freeze a clause into an ordered tuple of (field, expected) pairs."""
    return tuple(clause.items())


def prepare_clauses(group: Sequence[Any]) -> List[PreparedClause]:
    """Prepare every mapping clause of a condition group.

    Entries that are not mappings cannot express field constraints and
    are dropped.
    """
    return [prepare_clause(clause) for clause in group if isinstance(clause, Mapping)]


def matches_clause(record: Record, clause: PreparedClause) -> bool:
    """True when every (field, expected) pair holds for the record."""
    return all(strict_equals(get_field(record, key), value) for key, value in clause)


def matches_all(record: Record, clauses: Sequence[PreparedClause]) -> bool:
    return all(matches_clause(record, clause) for clause in clauses)


def matches_any(record: Record, clauses: Sequence[PreparedClause]) -> bool:
    return any(matches_clause(record, clause) for clause in clauses)
