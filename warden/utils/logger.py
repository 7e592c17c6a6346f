"""
Logging configuration for The Warden.

Console logging to stdout, optional file logging, and quieter defaults for
the chatty libraries underneath (HTTP client, MediaPipe's absl logging).
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("urllib3", "absl", "PIL")


def _attach(logger: logging.Logger, handler: logging.Handler, level: int):
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logger(
    name: str,
    level: str = "WARNING",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the application logger.

    Calling it again for an already configured name only updates the level.

    Args:
        name: Logger name (the package name for the application logger)
        level: Level name; unknown names mean WARNING
        log_file: Append log lines here as well; off when None

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logger.setLevel(numeric_level)

    if logger.handlers:
        return logger

    _attach(logger, logging.StreamHandler(sys.stdout), numeric_level)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            _attach(logger, logging.FileHandler(log_file, mode="a", encoding="utf-8"), numeric_level)
            logger.info(f"Also logging to {log_file}")
        except OSError as e:
            logger.warning(f"Could not open log file {log_file}: {e}")

    # Application records stay out of the root logger
    logger.propagate = False
    return logger


def quiet_libraries(names: Iterable[str] = NOISY_LOGGERS, level: int = logging.WARNING):
    """Raise the threshold of third-party loggers."""
    for lib_name in names:
        logging.getLogger(lib_name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Module logger; records flow up to the "warden" logger."""
    return logging.getLogger(name)
