"""
Unit tests for the package logger setup.
"""

import logging

import pytest

from chartdigitizer.logging_config import PACKAGE_LOGGER, setup_logging


@pytest.fixture
def package_logger():
    yield logging.getLogger(PACKAGE_LOGGER)
    # Leave no handlers (or open log files) behind for other tests
    setup_logging(logging.WARNING)
    for handler in list(logging.getLogger(PACKAGE_LOGGER).handlers):
        logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)


class TestSetupLogging:
    """Test handler configuration."""

    def test_repeated_setup_does_not_duplicate_handlers(self, package_logger):
        setup_logging(logging.INFO)
        setup_logging(logging.DEBUG)
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.DEBUG

    def test_log_file(self, package_logger, tmp_path):
        log_file = tmp_path / "session.log"
        logger = setup_logging(logging.INFO, str(log_file))

        logging.getLogger("chartdigitizer.model.io").info("Exported 3 points")
        for handler in logger.handlers:
            handler.flush()

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert line.endswith(" - chartdigitizer.model.io - INFO - Exported 3 points")
        assert len(logger.handlers) == 2
