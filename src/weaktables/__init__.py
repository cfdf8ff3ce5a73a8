"""weaktables: mappings whose keys and/or values the garbage collector may reclaim.

Quick start::

    from weaktables import new_weak_keys, count

    cache = new_weak_keys()
    cache[some_object] = "data"      # dropped once some_object is unreachable
    count(cache)                     # approximate; entries can vanish at any time

Iterate with :func:`safe_for_each`, :func:`map_table`, :func:`filter_table`
or :func:`to_regular_table`; they all work on a strong snapshot.
"""
from __future__ import annotations

from weaktables.config import Settings, configure, get_settings, reset_settings
from weaktables.constants import (
    MODE_WEAK_BOTH,
    MODE_WEAK_KEYS,
    MODE_WEAK_VALUES,
    VALID_MODES,
    WeakMode,
)
from weaktables.constructors import new_weak, new_weak_both, new_weak_keys, new_weak_values
from weaktables.debug import DebugReport, build_debug_report, clean, debug_print, render_debug_report
from weaktables.errors import ArgumentError, CallableError, ModeError, WeakTablesError
from weaktables.iteration import (
    clone,
    count,
    filter_table,
    map_table,
    safe_for_each,
    take_snapshot,
    to_regular_table,
)
from weaktables.modes import get_weak_mode, is_weak_table, make_weak
from weaktables.table import WeakBothTable, WeakKeysTable, WeakTable, WeakValuesTable

__version__ = "1.0.0"


def __getattr__(name: str) -> object:
    raise AttributeError(
        f"weaktables.{name} is not a valid function. Check the documentation for available functions."
    )


__all__ = [
    "MODE_WEAK_BOTH",
    "MODE_WEAK_KEYS",
    "MODE_WEAK_VALUES",
    "VALID_MODES",
    "ArgumentError",
    "CallableError",
    "DebugReport",
    "ModeError",
    "Settings",
    "WeakBothTable",
    "WeakKeysTable",
    "WeakMode",
    "WeakTable",
    "WeakTablesError",
    "WeakValuesTable",
    "build_debug_report",
    "clean",
    "clone",
    "configure",
    "count",
    "debug_print",
    "filter_table",
    "get_settings",
    "get_weak_mode",
    "is_weak_table",
    "make_weak",
    "map_table",
    "new_weak",
    "new_weak_both",
    "new_weak_keys",
    "new_weak_values",
    "render_debug_report",
    "reset_settings",
    "safe_for_each",
    "take_snapshot",
    "to_regular_table",
]
