from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from weaktables.constants import VALID_MODES, WeakMode
from weaktables.errors import ArgumentError, CallableError, ModeError


def _type_name(value: Any) -> str:
    return type(value).__name__


def ensure_table(table: Any, operation: str) -> Mapping[Any, Any]:
    if table is None:
        raise ArgumentError(operation, "table cannot be None")
    if not isinstance(table, Mapping):
        raise ArgumentError(operation, f"expected table, got {_type_name(table)}")
    return table


def ensure_initial(initial: Any, operation: str) -> Mapping[Any, Any] | None:
    """Optional bulk-load source: ``None`` means "start empty"."""
    if initial is None:
        return None
    if not isinstance(initial, Mapping):
        raise ArgumentError(operation, f"expected table, got {_type_name(initial)}")
    return initial


def ensure_mode(mode: Any, operation: str) -> WeakMode:
    if mode is None:
        raise ModeError(operation, "mode cannot be None", {"mode": repr(mode)})
    if not isinstance(mode, str):
        raise ModeError(
            operation,
            f"mode must be a string, got {_type_name(mode)}",
            {"mode": repr(mode)},
        )
    if mode not in VALID_MODES:
        raise ModeError(
            operation,
            f"invalid mode '{mode}'. Use 'k', 'v', or 'kv'",
            {"mode": repr(mode)},
        )
    return mode  # type: ignore[return-value]


def ensure_callable(fn: Any, operation: str, argument: str) -> Callable[..., Any]:
    if not callable(fn):
        raise CallableError(
            operation,
            f"{argument} must be callable, got {_type_name(fn)}",
            {"argument": argument},
        )
    return fn


__all__ = [
    "ensure_callable",
    "ensure_initial",
    "ensure_mode",
    "ensure_table",
]
