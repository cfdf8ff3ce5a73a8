from __future__ import annotations

from typing import Any

ERROR_CODE_INVALID_ARGUMENT = "INVALID_ARGUMENT"
ERROR_CODE_INVALID_MODE = "INVALID_MODE"
ERROR_CODE_NOT_CALLABLE = "NOT_CALLABLE"


class WeakTablesError(Exception):
    """Base class for errors raised by validating weaktables operations.

    ``operation`` is the public function that rejected its input; ``str(exc)``
    always starts with it so a failing call site can be found from the message.
    """

    code = ERROR_CODE_INVALID_ARGUMENT

    def __init__(self, operation: str, message: str, details: dict[str, Any] | None = None) -> None:
        self.operation = operation
        self.message = message
        self.details: dict[str, Any] = dict(details or {})
        super().__init__(f"{operation}: {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "operation": self.operation,
            "message": self.message,
            "details": self.details,
        }


class ArgumentError(WeakTablesError, TypeError):
    code = ERROR_CODE_INVALID_ARGUMENT


class ModeError(WeakTablesError, ValueError):
    code = ERROR_CODE_INVALID_MODE


class CallableError(ArgumentError):
    code = ERROR_CODE_NOT_CALLABLE


__all__ = [
    "ERROR_CODE_INVALID_ARGUMENT",
    "ERROR_CODE_INVALID_MODE",
    "ERROR_CODE_NOT_CALLABLE",
    "ArgumentError",
    "CallableError",
    "ModeError",
    "WeakTablesError",
]
