"""Logging setup for the bbprs CLI.

The configured level (config.yaml logging.level or env LOGGING_LEVEL)
applies to the ``bbprs`` loggers. HTTP library loggers stay at WARNING so
DEBUG output shows the listing steps, not every connection urllib3 opens.
Handlers and format go on the root logger.
"""

import logging

from bbprs.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PACKAGE_LOGGER = "bbprs"
QUIET_LOGGERS = ("urllib3", "requests")


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class BbprsLogging:
    """Applies LoggingConfig to the bbprs loggers and the root handler."""

    def __init__(self, config: LoggingConfig) -> None:
        self.level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        # records from bbprs propagate to the root handler whatever the root level
        logging.basicConfig(
            level=logging.WARNING,
            format=self._format,
            force=True,
        )
        logging.getLogger(PACKAGE_LOGGER).setLevel(self.level)
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
