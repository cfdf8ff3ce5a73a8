"""CLI smoke tests: demo report, collection demo, config and version."""
from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from weaktables.cli import app
from weaktables.config import reset_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()


class TestCliSmoke:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "weaktables 1.0.0" in result.output

    def test_demo_prints_clone_report(self) -> None:
        result = runner.invoke(app, ["demo", "a=1", "b=2", "--name", "sample"])
        assert result.exit_code == 0
        assert "=== Debug: sample ===" in result.output
        assert "Mode: kv" in result.output
        assert "Entry count: 2" in result.output
        assert "  [a] = 1" in result.output
        assert "  [b] = 2" in result.output

    def test_demo_without_entries_reports_empty_table(self) -> None:
        result = runner.invoke(app, ["demo", "--mode", "k"])
        assert result.exit_code == 0
        assert "Mode: k" in result.output
        assert "(no entries or all collected by GC)" in result.output

    def test_demo_rejects_bad_mode(self) -> None:
        result = runner.invoke(app, ["demo", "--mode", "x", "a=1"])
        assert result.exit_code == 2
        assert "new_weak: invalid mode 'x'" in result.output

    def test_demo_rejects_malformed_entry(self) -> None:
        result = runner.invoke(app, ["demo", "novalue"])
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    @pytest.mark.parametrize("mode", ["k", "v", "kv"])
    def test_gc_demo_reclaims_entry(self, mode: str) -> None:
        result = runner.invoke(app, ["gc-demo", "--mode", mode])
        assert result.exit_code == 0
        assert "Entry count before collection: 1" in result.output
        assert "Entry count after collection: 0" in result.output

    def test_config_file_changes_clone_mode(self, tmp_path: Path) -> None:
        config = tmp_path / "weaktables.yaml"
        config.write_text("clone_default_mode: v\n", encoding="utf-8")
        result = runner.invoke(app, ["--config", str(config), "demo", "a=1"])
        assert result.exit_code == 0
        assert "Mode: v" in result.output

    def test_invalid_config_file_fails(self, tmp_path: Path) -> None:
        config = tmp_path / "weaktables.yaml"
        config.write_text("clone_default_mode: z\n", encoding="utf-8")
        result = runner.invoke(app, ["--config", str(config), "demo"])
        assert result.exit_code == 2
        assert "settings: invalid mode 'z'" in result.output
