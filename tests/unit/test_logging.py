"""Unit tests for tinyhatchet.core.logging: structlog never writes to the terminal."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from tinyhatchet.core import logging as tinylogging
from tinyhatchet.core.exceptions import ConfigError
from tinyhatchet.core.logging import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    configure_logging()
    structlog.reset_defaults()


def test_no_debug_path_is_silent(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("", "DEBUG")
    structlog.get_logger().error("something_broke", detail="x")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_debug_path_receives_events(tmp_path: Path) -> None:
    log = tmp_path / "logs" / "debug.log"
    configure_logging(str(log), "INFO")
    logger = structlog.get_logger()
    logger.debug("too_chatty")
    logger.info("screen_changed", previous="LoginForm", current="HomeMenu")
    text = log.read_text()
    assert "too_chatty" not in text
    assert "event='screen_changed'" in text
    assert "level='info'" in text
    assert "current='HomeMenu'" in text


def test_unknown_level_falls_back_to_info(tmp_path: Path) -> None:
    log = tmp_path / "debug.log"
    configure_logging(str(log), "verbose")
    structlog.get_logger().debug("hidden")
    structlog.get_logger().info("shown")
    text = log.read_text()
    assert "hidden" not in text
    assert "shown" in text


def test_unwritable_debug_path(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(ConfigError):
        configure_logging(str(blocker / "debug.log"))


def test_reconfigure_closes_previous_file(tmp_path: Path) -> None:
    configure_logging(str(tmp_path / "first.log"), "INFO")
    first = tinylogging._sink
    assert first is not None

    configure_logging(str(tmp_path / "second.log"), "INFO")
    second = tinylogging._sink
    assert first.closed
    assert second is not None and not second.closed

    structlog.get_logger().info("after_switch")
    assert "after_switch" in (tmp_path / "second.log").read_text()
    assert "after_switch" not in (tmp_path / "first.log").read_text()

    configure_logging()
    assert second.closed
    assert tinylogging._sink is None
