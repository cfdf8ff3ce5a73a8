from __future__ import annotations

import gc
import weakref

import pytest

from weaktables import (
    ArgumentError,
    CallableError,
    WeakTable,
    clone,
    configure,
    count,
    filter_table,
    get_weak_mode,
    map_table,
    new_weak,
    new_weak_both,
    new_weak_keys,
    new_weak_values,
    reset_settings,
    safe_for_each,
    to_regular_table,
)
from weaktables.config import Settings


class Token:
    def __init__(self, name: str) -> None:
        self.name = name


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_to_regular_table_returns_last_assigned_entries() -> None:
    table = new_weak_values()
    table["a"] = 1
    table["b"] = 2
    table["a"] = 3
    del table["b"]
    table["c"] = 4

    regular = to_regular_table(table)

    assert regular == {"a": 3, "c": 4}
    assert type(regular) is dict


def test_snapshot_keeps_captured_objects_alive() -> None:
    table = new_weak_keys()
    key = Token("a")
    table[key] = "payload"
    key_ref = weakref.ref(key)

    regular = to_regular_table(table)
    del key
    gc.collect()

    assert key_ref() is not None
    assert list(regular.values()) == ["payload"]
    assert count(table) == 1

    del regular
    gc.collect()
    assert key_ref() is None
    assert count(table) == 0


def test_to_regular_table_accepts_plain_mappings() -> None:
    assert to_regular_table({"a": 1, None: 2, "b": None}) == {"a": 1}


def test_safe_for_each_visits_each_entry_once() -> None:
    table = new_weak_both({f"k{i}": i for i in range(25)})
    seen: list[str] = []

    safe_for_each(table, lambda key, value: seen.append(key))

    assert len(seen) == 25
    assert len(set(seen)) == 25


def test_safe_for_each_allows_callback_to_reenter_the_table() -> None:
    table = new_weak_keys({"a": 1, "b": 2})

    def callback(key: str, value: int) -> None:
        table[f"{key}!"] = value * 10
        assert to_regular_table(table)[key] == value
        safe_for_each(table, lambda _k, _v: None)

    safe_for_each(table, callback)

    assert to_regular_table(table) == {"a": 1, "b": 2, "a!": 10, "b!": 20}


def test_safe_for_each_propagates_callback_errors() -> None:
    table = new_weak_keys({"a": 1})

    def boom(_key: str, _value: int) -> None:
        raise RuntimeError("callback failed")

    with pytest.raises(RuntimeError, match="callback failed"):
        safe_for_each(table, boom)


def test_safe_for_each_validates_before_calling() -> None:
    with pytest.raises(CallableError, match="safe_for_each: callback must be callable, got str") as excinfo:
        safe_for_each(new_weak_keys({"a": 1}), "not callable")
    assert excinfo.value.details == {"argument": "callback"}
    assert isinstance(excinfo.value, ArgumentError)


def test_map_table_builds_new_mapping_without_touching_source() -> None:
    table = new_weak_values({"a": 1, "b": 2})
    before = to_regular_table(table)

    mapped = map_table(table, lambda key, value: f"{key}={value * 2}")

    assert mapped == {"a": "a=2", "b": "b=4"}
    assert to_regular_table(table) == before


def test_map_table_drops_none_results() -> None:
    table = new_weak_values({"a": 1, "b": 2})
    assert map_table(table, lambda _key, value: value if value > 1 else None) == {"b": 2}


def test_filter_table_keeps_matching_entries_without_touching_source() -> None:
    table = new_weak_keys({"a": 1, "b": 2, "c": 3})
    before = to_regular_table(table)

    odd = filter_table(table, lambda _key, value: value % 2)

    assert odd == {"a": 1, "c": 3}
    assert to_regular_table(table) == before


@pytest.mark.parametrize(
    ("fn", "operation", "argument"),
    [
        (map_table, "map_table", "mapper"),
        (filter_table, "filter_table", "predicate"),
    ],
)
def test_transforms_reject_non_callables(fn, operation: str, argument: str) -> None:
    with pytest.raises(CallableError, match=f"{operation}: {argument} must be callable, got NoneType"):
        fn(new_weak_keys(), None)


@pytest.mark.parametrize(
    "fn",
    [
        to_regular_table,
        count,
        clone,
        lambda t: safe_for_each(t, print),
        lambda t: map_table(t, print),
        lambda t: filter_table(t, print),
    ],
)
def test_validating_operations_reject_missing_tables(fn) -> None:
    with pytest.raises(ArgumentError, match="table cannot be None"):
        fn(None)
    with pytest.raises(ArgumentError, match="expected table, got int"):
        fn(42)


def test_count_matches_live_entries_and_accepts_plain_mappings() -> None:
    table = new_weak_keys()
    keys = [Token(str(i)) for i in range(3)]
    for key in keys:
        table[key] = key.name
    assert count(table) == 3

    keys.pop(0)
    gc.collect()
    assert count(table) == 2
    assert count({"a": 1}) == 1


@pytest.mark.parametrize("mode", ["k", "v", "kv"])
def test_clone_preserves_mode_and_contents(mode: str) -> None:
    table = new_weak(mode, {"a": 1, "b": 2})
    table.metadata["owner"] = "source"

    cloned = clone(table)

    assert cloned is not table
    assert get_weak_mode(cloned) == mode
    assert to_regular_table(cloned) == to_regular_table(table)
    assert cloned.metadata == {}


def test_clone_defaults_to_weak_both_for_tables_without_mode() -> None:
    assert get_weak_mode(clone(WeakTable(None, {"a": 1}))) == "kv"
    assert get_weak_mode(clone({"a": 1})) == "kv"


def test_clone_default_mode_follows_settings() -> None:
    configure(Settings(clone_default_mode="v"))
    assert get_weak_mode(clone({"a": 1})) == "v"


def test_clone_has_independent_storage() -> None:
    table = new_weak_keys({"a": 1})
    cloned = clone(table)

    table["b"] = 2
    del table["a"]
    cloned["c"] = 3

    assert to_regular_table(cloned) == {"a": 1, "c": 3}
    assert to_regular_table(table) == {"b": 2}


def test_clone_shares_referents_but_not_entries() -> None:
    table = new_weak_keys()
    key = Token("shared")
    table[key] = "payload"
    cloned = clone(table)

    del table[key]
    assert cloned[key] == "payload"

    del key
    gc.collect()
    assert count(cloned) == 0
