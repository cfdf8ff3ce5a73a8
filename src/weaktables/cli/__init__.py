"""Shell entry point for weaktables.

``weaktables demo`` prints the debug report of a table built from KEY=VALUE
pairs, ``weaktables gc-demo`` shows an entry vanishing after a collection.
The Typer app is only imported when ``app`` is first looked up, so importing
the library does not pull in the CLI stack.
"""
from __future__ import annotations


def __getattr__(name: str) -> object:
    if name == "app":
        from weaktables.cli.commands import app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app"]
