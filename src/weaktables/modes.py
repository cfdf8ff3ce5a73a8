from __future__ import annotations

import logging
import weakref
from typing import Any

from weaktables.constants import MODE_WEAK_KEYS, MODE_WEAK_VALUES, WeakMode
from weaktables.errors import ArgumentError
from weaktables.table import WeakTable
from weaktables.validation import ensure_mode, ensure_table

logger = logging.getLogger(__name__)

_STDLIB_WEAK_MODES: tuple[tuple[type, WeakMode], ...] = (
    (weakref.WeakKeyDictionary, MODE_WEAK_KEYS),
    (weakref.WeakValueDictionary, MODE_WEAK_VALUES),
)


def make_weak(table: Any, mode: Any) -> WeakTable[Any, Any]:
    """Switch an existing table to ``mode`` in place and return the same object.

    Live entries are re-filed under the new mode; ``table.metadata`` is left
    untouched. Plain mappings cannot change identity into a weak table, so
    they are rejected instead of silently copied.
    """
    ensure_table(table, "make_weak")
    resolved = ensure_mode(mode, "make_weak")
    if not isinstance(table, WeakTable):
        raise ArgumentError(
            "make_weak",
            f"cannot convert {type(table).__name__} in place; use new_weak(mode, initial) to copy it",
        )
    previous = table.mode
    table._apply_mode(resolved)
    logger.debug("make_weak: mode %r -> %r", previous, resolved)
    return table


def get_weak_mode(obj: Any) -> WeakMode | None:
    if isinstance(obj, WeakTable):
        return obj.mode
    for weak_type, mode in _STDLIB_WEAK_MODES:
        if isinstance(obj, weak_type):
            return mode
    return None


def is_weak_table(obj: Any) -> bool:
    return get_weak_mode(obj) is not None


__all__ = [
    "get_weak_mode",
    "is_weak_table",
    "make_weak",
]
