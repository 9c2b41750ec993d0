"""Tests for structured logging module."""

import pytest
import structlog

from dbfacade.core.exceptions import DbFacadeException
from dbfacade.logging.structured import StructuredLogger


class TestStructuredLogger:
    """Test cases for StructuredLogger class."""

    def test_logger_initialization(self):
        """Test StructuredLogger initializes correctly."""
        logger = StructuredLogger("dbfacade.test")

        assert logger.name == "dbfacade.test"
        assert logger.get_context() == {}

    def test_log_levels(self):
        """Test every level reaches structlog with its keyword data."""
        logger = StructuredLogger("dbfacade.test")

        with structlog.testing.capture_logs() as logs:
            logger.debug("Running query", query="SELECT 1")
            logger.info("Connected", host="db.local")
            logger.warning("Version unavailable")
            logger.error("Query failed", errno=1064)

        assert [entry["log_level"] for entry in logs] == ["debug", "info", "warning", "error"]
        assert logs[0]["query"] == "SELECT 1"
        assert logs[3]["errno"] == 1064

    def test_exception_includes_exc_info(self):
        """Test exception logging marks the traceback."""
        logger = StructuredLogger("dbfacade.test")

        with structlog.testing.capture_logs() as logs:
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("Unexpected failure")

        assert logs[0]["log_level"] == "error"
        assert logs[0]["exc_info"] is True

    def test_context_manager(self):
        """Test temporary context is added and then removed."""
        logger = StructuredLogger("dbfacade.test", context={"server": "db1"})

        with structlog.testing.capture_logs() as logs:
            with logger.context(role="control_user"):
                logger.info("Inside")
            logger.info("Outside")

        assert logs[0]["server"] == "db1"
        assert logs[0]["role"] == "control_user"
        assert "role" not in logs[1]
        assert logger.get_context() == {"server": "db1"}

    def test_context_restored_after_error(self):
        """Test context is restored when the block raises."""
        logger = StructuredLogger("dbfacade.test")

        with pytest.raises(ValueError):
            with logger.context(query="SELECT 1"):
                raise ValueError("failure")

        assert logger.get_context() == {}

    def test_bind_returns_new_logger(self):
        """Test binding leaves the original logger untouched."""
        logger = StructuredLogger("dbfacade.test", context={"server": "db1"})

        bound = logger.bind(role="user")

        assert bound is not logger
        assert bound.get_context() == {"server": "db1", "role": "user"}
        assert logger.get_context() == {"server": "db1"}

    def test_keyword_overrides_context(self):
        """Test call keywords win over bound context."""
        logger = StructuredLogger("dbfacade.test", context={"role": "user"})

        with structlog.testing.capture_logs() as logs:
            logger.info("Query", role="control_user")

        assert logs[0]["role"] == "control_user"

    def test_set_level(self):
        """Test setting the stdlib level."""
        logger = StructuredLogger("dbfacade.test.levels")

        logger.set_level("warning")

        assert logger.get_level() == "WARNING"

    @pytest.mark.parametrize("level", ["LOUD", "DEBUG; rm"])
    def test_invalid_level(self, level):
        """Test invalid levels raise."""
        logger = StructuredLogger("dbfacade.test")

        with pytest.raises(DbFacadeException):
            logger.set_level(level)

    def test_repr(self):
        """Test string representation."""
        logger = StructuredLogger("dbfacade.test", context={"server": "db1"})

        assert repr(logger) == "StructuredLogger(name='dbfacade.test', context={'server': 'db1'})"
