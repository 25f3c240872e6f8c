"""Error taxonomy for the tracker."""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes grouped by area."""

    DATA_STORAGE_ERROR = 1001
    DATA_PARSE_ERROR = 1002
    DATA_NOT_FOUND = 1003
    MEAL_ADD_ERROR = 3001
    MEAL_DELETE_ERROR = 3002
    MEAL_UPDATE_ERROR = 3003
    BUDGET_ADD_ERROR = 4001
    BUDGET_DELETE_ERROR = 4002
    BUDGET_UPDATE_ERROR = 4003
    NUTRITION_CALC_ERROR = 5001
    UNKNOWN_ERROR = 9999


class TrackerError(Exception):
    """Base class for tracker errors."""


class MissingDataError(TrackerError):
    """Required person data is absent."""


class LookupMiss(TrackerError):  # noqa: N818
    """A referenced food id is not in the catalog."""


class CalculationError(TrackerError):
    """A calculation produced a non-finite or otherwise invalid value."""


class StorageError(TrackerError):
    """The key-value store could not be read or written."""


@dataclass(frozen=True)
class ErrorReport:
    """A failure surfaced to the caller's error channel."""

    code: ErrorCode
    message: str
    details: str | None
    timestamp: datetime
