"""
Ledger error taxonomy.

Every error carries the status code its response envelope reports, so the
service layer can turn any of them into an ApiResponse without a lookup table.
Only StorageFailureError is worth retrying; the rest are deterministic for a
given input.
"""

import datetime
from decimal import Decimal
from typing import Optional

from timeledger.domain.responses import ApiStatusCode


class LedgerError(Exception):
    """Base class for all errors raised by the time ledger"""

    status_code: ApiStatusCode = ApiStatusCode.BAD_REQUEST
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LedgerError):
    """A referenced project, task or time entry does not exist"""

    status_code = ApiStatusCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InactiveTaskError(LedgerError):
    """A time entry targets a task whose active flag is off"""

    def __init__(self, task_id: int, task_name: str):
        super().__init__(
            f"Task '{task_name}' is inactive. Time entries cannot be created for inactive tasks"
        )
        self.task_id = task_id
        self.task_name = task_name


class CapExceededError(LedgerError):
    """Admitting the entry would push the day's total above the daily cap"""

    def __init__(self, day: datetime.date, existing_hours: Decimal, hours: Decimal,
                 total_hours: Decimal, cap: Decimal):
        super().__init__(
            f"Total hours for {day.isoformat()} cannot exceed {cap:f} hours. "
            f"Current total: {existing_hours:.2f}, adding: {hours:.2f}, "
            f"resulting total: {total_hours:.2f}"
        )
        self.day = day
        self.existing_hours = existing_hours
        self.hours = hours
        self.total_hours = total_hours
        self.cap = cap


class InvalidInputError(LedgerError):
    """Malformed or out-of-range input (hours, year, month, date)"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DuplicateError(LedgerError):
    """A uniqueness rule (project code, task name within project) would be broken"""


class HasDependentsError(LedgerError):
    """A project or task cannot be deleted while child rows reference it"""

    def __init__(self, message: str, dependents: int):
        super().__init__(message)
        self.dependents = dependents


class StorageFailureError(LedgerError):
    """The store is unreachable or a write failed. Safe to retry with backoff."""

    status_code = ApiStatusCode.INTERNAL_SERVER_ERROR
    retryable = True
