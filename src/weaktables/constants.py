from __future__ import annotations

from typing import Literal

WeakMode = Literal["k", "v", "kv"]

MODE_WEAK_KEYS: WeakMode = "k"
MODE_WEAK_VALUES: WeakMode = "v"
MODE_WEAK_BOTH: WeakMode = "kv"
VALID_MODES: tuple[WeakMode, ...] = (MODE_WEAK_KEYS, MODE_WEAK_VALUES, MODE_WEAK_BOTH)

# Tables without a mode record clone into this mode unless settings override it.
DEFAULT_CLONE_MODE: WeakMode = MODE_WEAK_BOTH

NOT_WEAK_LABEL = "not weak"
DEFAULT_DEBUG_NAME = "weak table"
EMPTY_REPORT_LINE = "(no entries or all collected by GC)"
CLEAN_DEPRECATION_MESSAGE = (
    "weaktables.clean() is deprecated and does nothing. "
    "Weak tables clean themselves automatically."
)

ENV_CLONE_MODE = "WEAKTABLES_CLONE_MODE"
ENV_DEBUG_LEVEL = "WEAKTABLES_DEBUG_LEVEL"
ENV_WARN_DEPRECATED = "WEAKTABLES_WARN_DEPRECATED"

EXIT_SUCCESS = 0
EXIT_NOT_COLLECTED = 1
EXIT_INTERNAL_ERROR = 2
