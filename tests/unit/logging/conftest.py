"""Logging-specific test configuration and fixtures."""

import logging

import pytest
import structlog

from dbfacade.config.models import LoggingConfig
from dbfacade.logging.factory import LoggerFactory


@pytest.fixture
def temp_log_file(tmp_path):
    """Path of a log file inside a temporary directory."""
    return tmp_path / "logs" / "dbfacade.log"


@pytest.fixture
def sample_logging_config(temp_log_file):
    """Create sample logging configuration."""
    return LoggingConfig(
        level="INFO",
        format="json",
        file_path=temp_log_file,
        console_output=False,
        max_file_size=1048576,  # 1MB
        backup_count=3,
    )


@pytest.fixture
def logger_factory():
    """Create clean logger factory for testing."""
    factory = LoggerFactory()
    yield factory
    factory.shutdown()


@pytest.fixture(autouse=True)
def cleanup_global_logging():
    """Restore the test structlog pipeline and root handlers after each test."""
    saved_config = structlog.get_config()
    saved_config["processors"] = list(saved_config["processors"])
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level

    yield

    from dbfacade.logging.factory import _global_factory
    _global_factory.shutdown()

    structlog.configure(**saved_config)
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
