"""Domain layer - Pure business entities, errors and the response envelope"""

from .models import (
    DAILY_HOURS_CAP,
    DailyStatus,
    DailySummary,
    LedgerPreferences,
    Project,
    TimeEntry,
    TimeEntryRequest,
    WorkTask,
)
from .errors import (
    CapExceededError,
    DuplicateError,
    HasDependentsError,
    InactiveTaskError,
    InvalidInputError,
    LedgerError,
    NotFoundError,
    StorageFailureError,
)
from .responses import ApiResponse, ApiStatusCode

__all__ = [
    "DAILY_HOURS_CAP", "DailyStatus", "DailySummary", "LedgerPreferences",
    "Project", "TimeEntry", "TimeEntryRequest", "WorkTask",
    "CapExceededError", "DuplicateError", "HasDependentsError", "InactiveTaskError",
    "InvalidInputError", "LedgerError", "NotFoundError", "StorageFailureError",
    "ApiResponse", "ApiStatusCode",
]
