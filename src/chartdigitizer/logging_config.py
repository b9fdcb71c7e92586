"""
Logging Configuration
=====================
One call from `main` configures the 'chartdigitizer' package logger; modules
only ever do `logging.getLogger(__name__)`.

Handlers:
    - stdout, always. Point edits log at DEBUG, clear/undo, image loading and
      CSV export at INFO, a degenerate calibration at WARNING.
    - a file (`--log-file`), truncated on every start.

Records read `HH:MM:SS - module - LEVEL - message`; the date is left out
since a digitizing session never spans days.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "chartdigitizer"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Args:
        level: Threshold for the logger and every handler.
        log_file: Optional path of a log file next to the console output.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Calling this again (tests, a second window) replaces the handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}"
                 + (f", also writing to {log_file}." if log_file else "."))
    return logger
