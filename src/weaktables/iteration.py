"""Read and transform helpers built on a single primitive: snapshot, then iterate.

A live walk over a weak table can skip or repeat entries while the collector
removes others, so every helper here except :func:`count` first takes a
strong copy of the table and works on that copy. User callbacks run after the
copy is complete and outside the table lock; they may read or write the same
table.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from weaktables.config import get_settings
from weaktables.constructors import new_weak
from weaktables.modes import get_weak_mode
from weaktables.table import WeakTable
from weaktables.validation import ensure_callable, ensure_table

K = TypeVar("K")
V = TypeVar("V")
R = TypeVar("R")


def take_snapshot(table: Mapping[K, V]) -> dict[K, V]:
    if isinstance(table, WeakTable):
        return table.snapshot()
    captured: dict[K, V] = {}
    for key, value in list(table.items()):
        if key is None or value is None:
            continue
        captured[key] = value
    return captured


def to_regular_table(table: Mapping[K, V]) -> dict[K, V]:
    ensure_table(table, "to_regular_table")
    return take_snapshot(table)


def count(table: Mapping[Any, Any]) -> int:
    """Approximate number of live entries.

    Walks the table directly rather than a snapshot. The result is a lower
    bound that may shrink between two calls without any write by the caller,
    and it need not match what a following :func:`safe_for_each` visits.
    """
    ensure_table(table, "count")
    if isinstance(table, WeakTable):
        return table.count_live()
    return len(table)


def safe_for_each(table: Mapping[K, V], callback: Callable[[K, V], Any]) -> None:
    ensure_table(table, "safe_for_each")
    ensure_callable(callback, "safe_for_each", "callback")
    for key, value in take_snapshot(table).items():
        callback(key, value)


def map_table(table: Mapping[K, V], mapper: Callable[[K, V], R]) -> dict[K, R]:
    """Apply ``mapper(key, value)`` to every entry; ``None`` results drop the key."""
    ensure_table(table, "map_table")
    ensure_callable(mapper, "map_table", "mapper")
    result: dict[K, R] = {}
    for key, value in take_snapshot(table).items():
        mapped = mapper(key, value)
        if mapped is not None:
            result[key] = mapped
    return result


def filter_table(table: Mapping[K, V], predicate: Callable[[K, V], Any]) -> dict[K, V]:
    ensure_table(table, "filter_table")
    ensure_callable(predicate, "filter_table", "predicate")
    return {key: value for key, value in take_snapshot(table).items() if predicate(key, value)}


def clone(table: Mapping[K, V]) -> WeakTable[K, V]:
    ensure_table(table, "clone")
    mode = get_weak_mode(table) or get_settings().clone_default_mode
    return new_weak(mode, take_snapshot(table))


__all__ = [
    "clone",
    "count",
    "filter_table",
    "map_table",
    "safe_for_each",
    "take_snapshot",
    "to_regular_table",
]
