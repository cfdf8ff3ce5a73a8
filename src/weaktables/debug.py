from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from weaktables.config import get_settings
from weaktables.constants import (
    CLEAN_DEPRECATION_MESSAGE,
    DEFAULT_DEBUG_NAME,
    EMPTY_REPORT_LINE,
    NOT_WEAK_LABEL,
)
from weaktables.iteration import count, safe_for_each
from weaktables.modes import get_weak_mode
from weaktables.validation import ensure_callable, ensure_table

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Mapping[Any, Any])


@dataclass(slots=True, frozen=True)
class DebugReport:
    name: str
    mode: str | None
    count: int
    entries: tuple[tuple[str, str], ...]

    def lines(self) -> list[str]:
        lines = [
            f"=== Debug: {self.name} ===",
            f"Mode: {self.mode or NOT_WEAK_LABEL}",
            f"Entry count: {self.count}",
            "Entries:",
        ]
        if not self.entries:
            lines.append(f"  {EMPTY_REPORT_LINE}")
        for key_text, value_text in self.entries:
            lines.append(f"  [{key_text}] = {value_text}")
        lines.append("=== End Debug ===")
        return lines


def build_debug_report(table: Mapping[Any, Any], name: str | None = None) -> DebugReport:
    ensure_table(table, "build_debug_report")
    mode = get_weak_mode(table)
    approximate = count(table)
    rendered: list[tuple[str, str]] = []
    safe_for_each(table, lambda key, value: rendered.append((str(key), str(value))))
    return DebugReport(
        name=name or DEFAULT_DEBUG_NAME,
        mode=mode,
        count=approximate,
        entries=tuple(sorted(rendered)),
    )


def render_debug_report(report: DebugReport) -> str:
    return "\n".join(report.lines()) + "\n"


def debug_print(
    table: Mapping[Any, Any],
    name: str | None = None,
    *,
    emit: Callable[[str], Any] | None = None,
) -> None:
    """Write a readable report of ``table`` to ``emit`` or, by default, the module logger.

    The entry count comes from :func:`count` and the entry lines from a
    snapshot, so on a table that is being collected the two may differ.
    """
    ensure_table(table, "debug_print")
    if emit is not None:
        ensure_callable(emit, "debug_print", "emit")
    report = build_debug_report(table, name)
    if emit is None:
        level = get_settings().debug_log_level
        for line in report.lines():
            logger.log(level, line)
        return
    for line in report.lines():
        emit(line)


def clean(table: T) -> T:
    ensure_table(table, "clean")
    logger.warning(CLEAN_DEPRECATION_MESSAGE)
    if get_settings().warn_deprecated:
        warnings.warn(CLEAN_DEPRECATION_MESSAGE, DeprecationWarning, stacklevel=2)
    return table


__all__ = [
    "DebugReport",
    "build_debug_report",
    "clean",
    "debug_print",
    "render_debug_report",
]
