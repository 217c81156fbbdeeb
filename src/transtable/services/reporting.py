"""Progress reporting collaborators used by the export pipeline."""

from __future__ import annotations

import logging
from typing import Protocol


class Reporter(Protocol):
    """Fire-and-forget sink for human readable progress messages."""

    def report(self, message: str) -> None: ...


class LoggingReporter:
    """Reporter forwarding messages to a standard library logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._level = level

    def report(self, message: str) -> None:
        self._logger.log(self._level, "%s", message)


class CollectingReporter(LoggingReporter):
    """Reporter that also keeps messages so callers can surface them later."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        super().__init__(logger, level)
        self.messages: list[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)
        super().report(message)


__all__ = ["CollectingReporter", "LoggingReporter", "Reporter"]
