#!/usr/bin/env python3
"""Numeric-aware, case- and accent-insensitive string collation.

Strings are compared character by character at base strength. Each
character falls into a primary class, ordered whitespace < punctuation <
symbol < digit < letter. Consecutive digits collapse into one numeric
element, and letters compare after accent stripping and case folding:

    >>> compare_strings("item2", "item10")
    -1
    >>> compare_strings("john@mail.com", "john1@mail.com")
    -1
    >>> compare_strings("Élan", "elan")
    0
"""

import unicodedata
from functools import lru_cache
from typing import List, Tuple

SPACE = 0
PUNCTUATION = 1
SYMBOL = 2
DIGIT = 3
LETTER = 4

CollationKey = Tuple[Tuple[int, object], ...]


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def _primary_class(ch: str) -> int:
    category = unicodedata.category(ch)
    if category[0] in "ZC":
        return SPACE
    if category[0] == "P":
        return PUNCTUATION
    if category[0] == "S":
        return SYMBOL
    return LETTER


@lru_cache(maxsize=4096)
def collation_key(value: str) -> CollationKey:
    """Build the comparison key for a string.

    Args:
        value: String to collate

    Returns:
        Tuple of (class, weight) pairs; digit runs carry their integer value
    """
    key: List[Tuple[int, object]] = []
    digits = ""

    for ch in _fold(value):
        if ch.isdecimal():
            digits += ch
            continue
        if digits:
            key.append((DIGIT, int(digits)))
            digits = ""
        key.append((_primary_class(ch), ch))

    if digits:
        key.append((DIGIT, int(digits)))

    return tuple(key)


def compare_strings(left: str, right: str) -> int:
    """Three-way collation compare.

    Returns:
        -1, 0 or 1
    """
    left_key = collation_key(left)
    right_key = collation_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0
