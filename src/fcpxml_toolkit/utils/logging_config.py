"""Logging setup for the FCPXML toolkit.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers; only the CLI calls ``configure_logging``.
"""

import logging
import sys
from typing import Optional


DEFAULT_FORMAT = "%(levelname)-5s | %(asctime)s | %(filename)s:%(lineno)d | %(message)s"

# Loggers that are noisy at INFO when the toolkit runs verbose
QUIET_LOGGERS = ("asyncio", "aiofiles")


def configure_logging(
    level: str = "INFO",
    format: Optional[str] = None,
    suppress_external: bool = True
) -> None:
    """Configure root logging for a toolkit run.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        format: Record format, or None for ``DEFAULT_FORMAT``
        suppress_external: Raise third-party loggers to WARNING
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format or DEFAULT_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True
    )

    if suppress_external:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


class ProgressLogger:
    """Start / update / complete messages for a multi-file run.

    Records carry the caller's file and line, not this helper's.
    """

    # _log -> public method -> caller
    _STACKLEVEL = 3

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self._current_task: Optional[str] = None

    def _log(self, level: int, message: str) -> None:
        self.logger.log(level, message, stacklevel=self._STACKLEVEL)

    def start_task(self, task: str) -> None:
        self._current_task = task
        self._log(logging.INFO, f"Starting: {task}")

    def update(self, message: str) -> None:
        prefix = "   > " if self._current_task else "> "
        self._log(logging.INFO, f"{prefix}{message}")

    def complete(self, message: Optional[str] = None) -> None:
        """Log completion; ``message`` replaces the default task summary."""
        if message:
            self._log(logging.INFO, f"Done: {message}")
        elif self._current_task:
            self._log(logging.INFO, f"Completed: {self._current_task}")
        self._current_task = None

    def error(self, message: str) -> None:
        self._log(logging.ERROR, f"FAILED: {message}")

    def warning(self, message: str) -> None:
        self._log(logging.WARNING, message)
