"""Error reporting side channel."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from meal_budget.domain.errors import ErrorCode, ErrorReport

_logger = logging.getLogger(__name__)


class ErrorReporter(Protocol):
    """Receives failures that were recovered with a default value."""

    def report(
        self, code: ErrorCode, message: str, details: str | None = None
    ) -> ErrorReport:
        """Record a failure and return the stored report."""

    def recent(self, limit: int = 20) -> list[ErrorReport]:
        """Return the most recent reports, newest first."""


@dataclass
class LoggingErrorReporter(ErrorReporter):
    """Logs failures and keeps a bounded history for inspection."""

    max_reports: int = 100
    _reports: deque[ErrorReport] = field(init=False)

    def __post_init__(self) -> None:
        self._reports = deque(maxlen=self.max_reports)

    def report(
        self, code: ErrorCode, message: str, details: str | None = None
    ) -> ErrorReport:
        """Log the failure and append it to the history."""
        error = ErrorReport(
            code=code,
            message=message,
            details=details,
            timestamp=datetime.now(tz=UTC),
        )
        _logger.error("Error %s: %s (%s)", int(code), message, details or "-")
        self._reports.append(error)
        return error

    def recent(self, limit: int = 20) -> list[ErrorReport]:
        """Return up to ``limit`` reports, newest first."""
        return list(reversed(self._reports))[:limit]

    def clear(self) -> None:
        """Drop the stored history."""
        self._reports.clear()
