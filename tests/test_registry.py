"""Tests for the hook registry merge policy."""

from __future__ import annotations

import threading

from hookcheck.models import HookKind
from hookcheck.registry import HookRegistry
from hookcheck.types import STRING, named

INT = named("int")
BOOL = named("bool")
POST = named("WP_Post")


def test_register_new_hook_stores_kind_and_types() -> None:
    registry = HookRegistry()
    signature = registry.register("the_title", HookKind.FILTER, [STRING, INT])
    assert registry.get("the_title") == signature
    assert signature.kind is HookKind.FILTER
    assert signature.parameter_types == (STRING, INT)


def test_empty_types_never_clear_existing_signature() -> None:
    registry = HookRegistry()
    registry.register("hook", HookKind.FILTER, [STRING])
    registry.register("hook", HookKind.FILTER, [])
    assert registry.get("hook").parameter_types == (STRING,)


def test_new_types_override_only_supplied_positions() -> None:
    registry = HookRegistry()
    registry.register("hook", HookKind.FILTER, [STRING, INT])
    registry.register("hook", HookKind.FILTER, [BOOL])
    assert registry.get("hook").parameter_types == (BOOL, INT)


def test_longer_new_list_extends_signature() -> None:
    registry = HookRegistry()
    registry.register("hook", HookKind.ACTION, [STRING])
    registry.register("hook", HookKind.ACTION, [BOOL, POST])
    assert registry.get("hook").parameter_types == (BOOL, POST)


def test_shorter_list_keeps_longer_tail() -> None:
    registry = HookRegistry()
    registry.register("hook", HookKind.ACTION, [STRING, INT, POST])
    registry.register("hook", HookKind.ACTION, [BOOL, STRING])
    assert registry.get("hook").parameter_types == (BOOL, STRING, POST)


def test_kind_is_never_changed_by_later_merges() -> None:
    registry = HookRegistry()
    registry.register("hook", HookKind.FILTER, [STRING])
    registry.register("hook", HookKind.ACTION, [INT])
    signature = registry.get("hook")
    assert signature.kind is HookKind.FILTER
    assert signature.parameter_types == (INT,)


def test_none_entries_are_dropped() -> None:
    registry = HookRegistry()
    registry.register("hook", HookKind.ACTION, [None, STRING, None])
    assert registry.get("hook").parameter_types == (STRING,)


def test_new_hook_without_types_is_still_registered() -> None:
    registry = HookRegistry()
    registry.register("init", HookKind.ACTION, [])
    assert "init" in registry
    assert registry.get("init").parameter_types == ()


def test_registry_iteration_and_clear() -> None:
    registry = HookRegistry()
    registry.register("b", HookKind.ACTION, [])
    registry.register("a", HookKind.FILTER, [STRING])
    assert list(registry) == ["b", "a"]
    assert len(registry) == 2
    assert [name for name, _ in registry.items()] == ["b", "a"]
    registry.clear()
    assert len(registry) == 0
    assert registry.get("a") is None


def test_concurrent_registration_keeps_every_hook() -> None:
    registry = HookRegistry()

    def worker(offset: int) -> None:
        for index in range(100):
            registry.register(f"hook_{offset}_{index}", HookKind.ACTION, [INT])
            registry.register("shared", HookKind.FILTER, [STRING])

    threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 401
    assert registry.get("shared").parameter_types == (STRING,)
