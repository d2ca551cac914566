"""
Tests for the ``tinyhatchet`` CLI entry point.

Covers:
  - startup failures (bad config) exit 1 with a message and never start the UI
  - the config file is written back on exit, with what the session learned
    but without environment overrides
  - a missing config file is created with defaults
  - --version
"""

from __future__ import annotations

import stat
from pathlib import Path
from typing import TextIO
from unittest.mock import MagicMock, patch

import pytest
import structlog
from click.testing import CliRunner

from tinyhatchet import __version__
from tinyhatchet.cli.main import main
from tinyhatchet.core import logging as tinylogging
from tinyhatchet.core.config import load_config
from tinyhatchet.core.logging import configure_logging
from tinyhatchet.core.session import SessionContext


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    configure_logging()
    structlog.reset_defaults()


class TestStartup:
    def test_invalid_config_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.config"
        path.write_text("serverurl: [unclosed\n")
        fake_run = MagicMock()
        with patch("tinyhatchet.ui.app.run", fake_run):
            result = runner.invoke(main, ["-config", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output
        fake_run.assert_not_called()

    def test_bad_scheme_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.config"
        path.write_text("serverurl: ftp://logs.example.com\n")
        with patch("tinyhatchet.ui.app.run", MagicMock()):
            result = runner.invoke(main, ["--config", str(path)])
        assert result.exit_code == 1

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestShutdown:
    def test_session_state_written_back(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "tinyhatchet.config"
        path.write_text("serverurl: https://logs.example.com\ndebugpath: ''\n")

        def fake_run(session: SessionContext, initial: object = None) -> None:
            assert session.server_url == "https://logs.example.com"
            session.remember(email="ops@example.com")

        with patch("tinyhatchet.ui.app.run", fake_run):
            result = runner.invoke(main, ["-config", str(path)])

        assert result.exit_code == 0, result.output
        cfg = load_config(path)
        assert cfg.server_url == "https://logs.example.com"
        assert cfg.email_address == "ops@example.com"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_config_created(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "new.config"
        with patch("tinyhatchet.ui.app.run", MagicMock()):
            result = runner.invoke(main, ["-config", str(path)])
        assert result.exit_code == 0, result.output
        assert path.exists()
        assert "serverurl:" in path.read_text()

    def test_saved_even_when_ui_crashes(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "tinyhatchet.config"

        def fake_run(session: SessionContext, initial: object = None) -> None:
            session.remember(server_url="https://logs.example.com")
            raise RuntimeError("terminal went away")

        with patch("tinyhatchet.ui.app.run", fake_run):
            result = runner.invoke(main, ["-config", str(path)])
        assert result.exit_code != 0
        assert load_config(path).server_url == "https://logs.example.com"

    def test_debug_log_written(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "tinyhatchet.config"
        log = tmp_path / "debug.log"
        path.write_text(f"debugpath: {log}\nloglevel: debug\n")
        with patch("tinyhatchet.ui.app.run", MagicMock()):
            result = runner.invoke(main, ["-config", str(path)])
        assert result.exit_code == 0, result.output
        text = log.read_text()
        assert "event='startup'" in text
        assert "event='shutdown'" in text

    def test_env_server_url_not_persisted(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "tinyhatchet.config"
        path.write_text("serverurl: https://logs.example.com\n")
        monkeypatch.setenv("TINYHATCHET_SERVER_URL", "http://127.0.0.1:9000")

        def fake_run(session: SessionContext, initial: object = None) -> None:
            assert session.server_url == "http://127.0.0.1:9000"
            session.remember(email="ops@example.com")

        with patch("tinyhatchet.ui.app.run", fake_run):
            result = runner.invoke(main, ["-config", str(path)])

        assert result.exit_code == 0, result.output
        text = path.read_text()
        assert "serverurl: https://logs.example.com" in text
        assert "127.0.0.1" not in text
        assert "emailaddress: ops@example.com" in text

    def test_debug_log_closed_on_exit(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "tinyhatchet.config"
        path.write_text(f"debugpath: {tmp_path / 'debug.log'}\n")
        handles: list[TextIO | None] = []

        def fake_run(session: SessionContext, initial: object = None) -> None:
            handles.append(tinylogging._sink)

        with patch("tinyhatchet.ui.app.run", fake_run):
            result = runner.invoke(main, ["-config", str(path)])
        assert result.exit_code == 0, result.output
        [handle] = handles
        assert handle is not None and handle.closed
        assert tinylogging._sink is None
