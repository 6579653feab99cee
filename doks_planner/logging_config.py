"""Logging setup for the doks-plan CLI.

Records go to stderr so that a plan printed on stdout stays machine-readable.
"""

import logging
import sys
from pathlib import Path

from doks_planner.exceptions import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# HTTP stack behind the version catalog
QUIET_LOGGERS = ("urllib3", "requests", "charset_normalizer")


def parse_level(level: str) -> int:
    """Translate a level name such as 'info' into its logging constant.

    Raises:
        ConfigurationError: If the name is not a standard logging level
    """
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ConfigurationError(
            f"Unknown log level: {level}", "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return value


def setup_logging(level: str = "INFO", log_file: Path | None = None, verbose: bool = False) -> None:
    """Route planner logging to stderr and, optionally, a log file.

    Only warnings and errors reach stderr unless ``verbose`` is set, which
    lowers everything to DEBUG. The log file records whatever passes the
    root level.

    Args:
        level: Root level name; ignored when ``verbose`` is set
        log_file: Optional file to append records to
        verbose: Show debug records on stderr
    """
    root_level = logging.DEBUG if verbose else parse_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logging.warning(f"Cannot write log file {log_file}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the module logger for ``name`` (pass ``__name__``)."""
    return logging.getLogger(name)
