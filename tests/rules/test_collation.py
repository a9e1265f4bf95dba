#!/usr/bin/env python3
"""Tests for numeric-aware string collation."""

import pytest

from recordflow.rules.collation import (
    DIGIT,
    LETTER,
    PUNCTUATION,
    SPACE,
    SYMBOL,
    collation_key,
    compare_strings,
)


class TestCollationKey:
    """Tests for collation_key()."""

    def test_collapses_digit_runs(self):
        assert collation_key("it10b") == ((LETTER, "i"), (LETTER, "t"), (DIGIT, 10), (LETTER, "b"))

    def test_leading_digits(self):
        assert collation_key("2nd") == ((DIGIT, 2), (LETTER, "n"), (LETTER, "d"))

    def test_character_classes(self):
        assert collation_key(" @+") == ((SPACE, " "), (PUNCTUATION, "@"), (SYMBOL, "+"))

    def test_empty_string(self):
        assert collation_key("") == ()

    def test_folds_case_and_accents(self):
        assert collation_key("Élan") == collation_key("elan")

    def test_compatibility_digits_fold_to_digits(self):
        assert collation_key("x²") == ((LETTER, "x"), (DIGIT, 2))


class TestCompareStrings:
    """Tests for compare_strings()."""

    @pytest.mark.parametrize(
        "left,right",
        [
            ("john@mail.com", "john1@mail.com"),
            ("a-1", "a1"),
            ("a b", "ab"),
            ("a.b", "a+b"),
            ("a+b", "a1b"),
            ("item2", "item10"),
            ("a@x", "b@x"),
            ("john1@mail.com", "john2@mail.com"),
            ("jane@mail.com", "john1@mail.com"),
            ("apple", "Banana"),
            ("item", "item2"),
            ("file9.txt", "file10.txt"),
        ],
    )
    def test_orders_before(self, left, right):
        assert compare_strings(left, right) == -1
        assert compare_strings(right, left) == 1

    @pytest.mark.parametrize(
        "left,right",
        [("abc", "ABC"), ("résumé", "resume"), ("item007", "item7")],
    )
    def test_equal_at_base_strength(self, left, right):
        assert compare_strings(left, right) == 0

    def test_digits_sort_before_letters(self):
        assert compare_strings("1abc", "abc") == -1
