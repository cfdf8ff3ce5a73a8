from __future__ import annotations

import gc
from pathlib import Path
from typing import Any

import typer
import yaml

from weaktables.config import Settings, configure
from weaktables.constants import (
    EXIT_INTERNAL_ERROR,
    EXIT_NOT_COLLECTED,
    EXIT_SUCCESS,
    MODE_WEAK_KEYS,
)
from weaktables.constructors import new_weak
from weaktables.debug import debug_print
from weaktables.errors import WeakTablesError
from weaktables.iteration import clone, count
from weaktables.table import WeakTable


def _version_callback(value: bool) -> None:
    if value:
        from weaktables import __version__

        typer.echo(f"weaktables {__version__}")
        raise typer.Exit()


app = typer.Typer(add_completion=False, help="Tables whose entries the garbage collector may reclaim")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
    config: Path | None = typer.Option(
        None, "--config", exists=True, file_okay=True, dir_okay=False, help="YAML settings file."
    ),
) -> None:
    if config is not None:
        try:
            configure(Settings.from_file(config))
        except (ValueError, WeakTablesError) as exc:
            typer.echo(f"ERROR: {exc}", err=True)
            raise typer.Exit(EXIT_INTERNAL_ERROR) from exc


def _parse_entries(raw_entries: list[str]) -> dict[str, Any]:
    parsed: dict[str, Any] = {}
    for raw in raw_entries:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Entry must look like KEY=VALUE: {raw!r}")
        parsed[key.strip()] = yaml.safe_load(value) if value.strip() else value
    return parsed


@app.command()
def demo(
    entries: list[str] | None = typer.Argument(None, help="Entries as KEY=VALUE; values are read as YAML scalars"),
    mode: str | None = typer.Option(
        None, "--mode", "-m", help="Weak mode: k | v | kv. Omit to start from a plain table."
    ),
    name: str | None = typer.Option(None, "--name", help="Name shown in the report header"),
) -> None:
    """Build a table from ENTRIES, clone it and print the clone's debug report."""
    try:
        parsed = _parse_entries(list(entries or []))
        table = WeakTable(None, parsed) if mode is None else new_weak(mode, parsed)
        debug_print(clone(table), name, emit=typer.echo)
    except (ValueError, WeakTablesError) as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR) from exc
    raise typer.Exit(EXIT_SUCCESS)


class _Probe:
    def __init__(self, label: str) -> None:
        self.label = label

    def __repr__(self) -> str:
        return f"<probe {self.label}>"


@app.command("gc-demo")
def gc_demo(
    mode: str = typer.Option(MODE_WEAK_KEYS, "--mode", "-m", help="Weak mode: k | v | kv"),
) -> None:
    """Drop the only strong reference to a weak-side object and watch its entry go."""
    try:
        table = new_weak(mode)
    except WeakTablesError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(EXIT_INTERNAL_ERROR) from exc

    probe = _Probe("payload")
    if table.weak_keys:
        table[probe] = "payload"
    else:
        table["payload"] = probe
    typer.echo(f"Mode: {table.mode}")
    typer.echo(f"Entry count before collection: {count(table)}")

    del probe
    gc.collect()

    remaining = count(table)
    typer.echo(f"Entry count after collection: {remaining}")
    raise typer.Exit(EXIT_SUCCESS if remaining == 0 else EXIT_NOT_COLLECTED)
