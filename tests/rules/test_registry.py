#!/usr/bin/env python3
"""Tests for RuleRegistry."""

import threading

import pytest

from recordflow.core.constants import ErrorCode
from recordflow.rules.base import Rule
from recordflow.rules.builtin import ExcludeRule, IncludeRule, SortByRule
from recordflow.rules.registry import (
    RuleRegistry,
    TypeConstraintViolation,
    create_default_registry,
)


class NoopRule(Rule):
    def execute(self, collection, params):
        return collection


class TestRegister:
    """Tests for RuleRegistry.register()."""

    def test_register_and_resolve(self):
        registry = RuleRegistry()
        rule = NoopRule()
        registry.register("noop", rule)

        assert registry.resolve("noop") is rule
        assert "noop" in registry
        assert len(registry) == 1

    def test_reregister_replaces(self):
        registry = RuleRegistry()
        first, second = NoopRule(), NoopRule()
        registry.register("noop", first)
        registry.register("noop", second)

        assert registry.resolve("noop") is second
        assert len(registry) == 1

    @pytest.mark.parametrize(
        "candidate",
        [None, "include", object(), lambda records, params: records, NoopRule],
    )
    def test_rejects_non_rules(self, candidate):
        registry = RuleRegistry()

        with pytest.raises(TypeConstraintViolation):
            registry.register("bad", candidate)
        assert "bad" not in registry

    @pytest.mark.parametrize("name", ["", None, 5, ("a",)])
    def test_rejects_bad_names(self, name):
        with pytest.raises(TypeConstraintViolation):
            RuleRegistry().register(name, NoopRule())

    def test_violation_is_type_error(self):
        with pytest.raises(TypeError) as exc_info:
            RuleRegistry().register("bad", object())

        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT


class TestResolve:
    """Tests for lookups."""

    def test_unknown_name(self):
        assert RuleRegistry().resolve("missing") is None

    def test_unhashable_name(self):
        assert RuleRegistry().resolve(["include"]) is None
        assert ["include"] not in RuleRegistry()

    def test_unregister(self):
        registry = RuleRegistry()
        registry.register("noop", NoopRule())

        assert registry.unregister("noop") is True
        assert registry.unregister("noop") is False
        assert registry.resolve("noop") is None

    def test_names_keep_registration_order(self):
        registry = RuleRegistry()
        registry.register("b", NoopRule())
        registry.register("a", NoopRule())

        assert registry.names() == ["b", "a"]

    def test_snapshot_is_a_copy(self):
        registry = RuleRegistry()
        registry.register("noop", NoopRule())
        snapshot = registry.snapshot()
        registry.register("later", NoopRule())

        assert list(snapshot) == ["noop"]

    def test_concurrent_registration(self):
        registry = RuleRegistry()

        def worker(prefix):
            for i in range(50):
                registry.register(f"{prefix}{i}", NoopRule())

        threads = [threading.Thread(target=worker, args=(p,)) for p in "abcd"]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 200


class TestDefaultRegistry:
    """Tests for create_default_registry()."""

    def test_builtins(self):
        registry = create_default_registry()

        assert registry.names() == ["include", "exclude", "sort_by"]
        assert isinstance(registry.resolve("include"), IncludeRule)
        assert isinstance(registry.resolve("exclude"), ExcludeRule)
        assert isinstance(registry.resolve("sort_by"), SortByRule)

    def test_independent_instances(self):
        assert create_default_registry().resolve("include") is not create_default_registry().resolve(
            "include"
        )

    def test_repr(self):
        assert repr(create_default_registry()) == "<RuleRegistry rules=['include', 'exclude', 'sort_by']>"
