"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from mapperkit.config.models import LoggingConfig, LogOutputConfig
from mapperkit.core.logging import (
    bind_session_id,
    clear_session_id,
    configure_logging,
    get_logger,
    get_session_id,
    set_session_id,
)


class TestSessionIdCorrelation:
    """Session ID context variable tests."""

    def setup_method(self) -> None:
        """Clear session ID before each test."""
        clear_session_id()

    def test_given_session_id_when_set_then_can_retrieve(self) -> None:
        """Session ID can be set and retrieved."""
        # Given
        session_id = "test-123"

        # When
        result = set_session_id(session_id)

        # Then
        assert result == session_id
        assert get_session_id() == session_id

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        """Set generates UUID-based ID when none provided."""
        # When
        sid = set_session_id()

        # Then
        assert len(sid) == 12  # uuid4().hex[:12]

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        # Given
        set_session_id("to-clear")

        # When
        clear_session_id()

        # Then
        assert get_session_id() is None

    def test_given_bound_block_when_exited_then_previous_id_restored(self) -> None:
        """bind_session_id restores the outer ID on exit."""
        # Given
        set_session_id("outer")

        # When
        with bind_session_id("inner") as sid:
            inside = get_session_id()

        # Then
        assert sid == "inner"
        assert inside == "inner"
        assert get_session_id() == "outer"

    def test_given_bound_block_when_raises_then_id_still_restored(self) -> None:
        with pytest.raises(RuntimeError), bind_session_id("doomed"):
            raise RuntimeError("boom")

        assert get_session_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_session_id()

    def test_given_module_name_when_get_logger_then_binds_name(self) -> None:
        # Given
        configure_logging(json_format=False, level="INFO")

        # When
        logger = get_logger("mymodule")

        # Then
        assert logger is not None

    def test_given_json_file_output_when_log_then_valid_json_lines(
        self, tmp_path: Path
    ) -> None:
        """JSON output carries event, level, timestamp and bound keys."""
        # Given
        log_file = tmp_path / "mapperkit.log"
        config = LoggingConfig(
            level="INFO",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )
        configure_logging(config=config)
        logger = get_logger("test")

        # When
        logger.info("mapper_added", interface="UserMapper")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "mapper_added"
        assert data["interface"] == "UserMapper"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_bound_session_when_log_then_session_id_in_output(
        self, tmp_path: Path
    ) -> None:
        # Given
        log_file = tmp_path / "session.log"
        config = LoggingConfig(
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )
        configure_logging(config=config)
        logger = get_logger()

        # When
        with bind_session_id("abc123"):
            logger.info("inside")
        logger.info("outside")

        # Then
        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert lines[0]["session_id"] == "abc123"
        assert "session_id" not in lines[1]

    def test_given_config_object_when_configure_then_takes_precedence(
        self, tmp_path: Path
    ) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When  - config's DEBUG should override the level="ERROR" param
        configure_logging(config=config, json_format=False, level="ERROR")
        get_logger().debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="console", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then - info_file should have INFO only
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        # Then - debug_file inherits DEBUG from config level
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content
