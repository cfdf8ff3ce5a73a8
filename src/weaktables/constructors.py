"""Constructors for weak tables.

``initial`` is copied entry by entry; when two of its keys compare equal the
later one wins, and "later" follows the iteration order of ``initial`` itself.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from weaktables.constants import MODE_WEAK_BOTH, MODE_WEAK_KEYS, MODE_WEAK_VALUES, WeakMode
from weaktables.table import WeakBothTable, WeakKeysTable, WeakTable, WeakValuesTable
from weaktables.validation import ensure_initial, ensure_mode


def _build(mode: WeakMode, initial: Any, operation: str) -> WeakTable[Any, Any]:
    return WeakTable(mode, ensure_initial(initial, operation))


def new_weak_keys(initial: Mapping[Any, Any] | None = None) -> WeakKeysTable[Any, Any]:
    return _build(MODE_WEAK_KEYS, initial, "new_weak_keys")


def new_weak_values(initial: Mapping[Any, Any] | None = None) -> WeakValuesTable[Any, Any]:
    return _build(MODE_WEAK_VALUES, initial, "new_weak_values")


def new_weak_both(initial: Mapping[Any, Any] | None = None) -> WeakBothTable[Any, Any]:
    return _build(MODE_WEAK_BOTH, initial, "new_weak_both")


def new_weak(mode: Any, initial: Mapping[Any, Any] | None = None) -> WeakTable[Any, Any]:
    resolved = ensure_mode(mode, "new_weak")
    return _build(resolved, initial, "new_weak")


__all__ = [
    "new_weak",
    "new_weak_both",
    "new_weak_keys",
    "new_weak_values",
]
