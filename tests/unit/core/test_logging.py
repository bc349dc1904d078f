"""Tests for structured logging setup."""

from __future__ import annotations

import json
from collections.abc import Generator

import pytest
import structlog
from structlog.testing import capture_logs

from charsheet.core.config import Settings
from charsheet.core.logging import (
    add_app_context,
    character_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from charsheet.engine.resources import Resource


@pytest.fixture
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults after a test configures it."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_json_lines(self, reset_structlog: None, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON output carries the level, timestamp and application."""
        configure_from_settings(Settings(log_level="DEBUG", json_logs=True))

        get_logger("charsheet.test").debug("Dice rolled", total=17)

        entry = json.loads(capsys.readouterr().out)
        assert entry["event"] == "Dice rolled"
        assert entry["total"] == 17
        assert entry["level"] == "debug"
        assert entry["app"] == "charsheet"
        assert "timestamp" in entry

    def test_level_filters(self, reset_structlog: None, capsys: pytest.CaptureFixture[str]) -> None:
        """Test entries below the configured level are dropped."""
        configure_logging(level="warning", json_format=True)

        logger = get_logger("charsheet.test")
        logger.info("Rest taken")
        logger.warning("Exhaustion level rejected", exhaustion_level=9)

        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["Exhaustion level rejected"]

    def test_app_context_processor(self) -> None:
        """Test entries are tagged with the application unless already tagged."""
        assert add_app_context(None, "info", {"event": "Dice rolled"}) == {
            "event": "Dice rolled",
            "app": "charsheet",
        }
        assert add_app_context(None, "info", {"app": "host"}) == {"app": "host"}


class TestRulesEvents:
    """Tests for the events emitted by rules mutations."""

    def test_resource_use_is_logged(self) -> None:
        """Test spending a resource records what was spent."""
        rage = Resource(name="Rage", max=3)

        with capture_logs() as logs:
            rage.use()

        assert logs == [
            {
                "event": "Resource used",
                "log_level": "info",
                "resource": "Rage",
                "amount": 1,
                "remaining": 2,
            }
        ]

    def test_character_context(self, reset_structlog: None) -> None:
        """Test the character id is bound inside the block only."""
        with character_context("c-42", campaign="Phandelver"):
            assert structlog.contextvars.get_contextvars() == {
                "character_id": "c-42",
                "campaign": "Phandelver",
            }
            with character_context("c-7"):
                assert structlog.contextvars.get_contextvars()["character_id"] == "c-7"
            assert structlog.contextvars.get_contextvars()["character_id"] == "c-42"

        assert structlog.contextvars.get_contextvars() == {}
