"""
Domain Models using Pydantic for validation.

Architecture Decision: Why Pydantic?
Pydantic provides runtime data validation, ensuring data integrity when loading
from YAML config files or database rows. It also gives us a single place to
describe the shape of an incoming request separately from the stored entity.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from timeledger.utils import normalize_date

# Fixed ceiling on the hours booked against one calendar date
DAILY_HOURS_CAP = Decimal("24")

DESCRIPTION_MAX_LENGTH = 500


class Project(BaseModel):
    """
    A client or internal project. Owns zero or more work tasks.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    is_active: bool = True


class WorkTask(BaseModel):
    """
    A task inside a project that time can be booked against.

    Only active tasks accept new time entries.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=300)
    project_id: int = Field(..., ge=1)
    is_active: bool = True

    project: Optional[Project] = None


class TimeEntryRequest(BaseModel):
    """
    Request-shaped time entry: what a caller asks to book.

    Carries no relations. It becomes a TimeEntry only after the task gate and
    the daily-hours check have admitted it.
    """
    task_id: int = Field(..., ge=1)
    date: datetime.date
    hours: Decimal = Field(..., gt=0, le=DAILY_HOURS_CAP, max_digits=4, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("date", mode="before")
    @classmethod
    def _drop_time_of_day(cls, value):
        if isinstance(value, datetime.datetime):
            return normalize_date(value)
        return value

    @field_validator("description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value


class TimeEntry(BaseModel):
    """
    An admitted booking of hours against a task on one calendar date.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    task_id: int
    date: datetime.date
    hours: Decimal
    description: str

    task: Optional[WorkTask] = None


class DailyStatus(str, Enum):
    """How a day's booked hours compare to the target working day."""
    NO_ACTIVITY = "no_activity"
    INSUFFICIENT = "insufficient"
    SUFFICIENT = "sufficient"
    EXCESSIVE = "excessive"


class DailySummary(BaseModel):
    """
    Derived per-day totals. Computed on demand, never stored.
    """
    date: datetime.date
    total_hours: Decimal = Decimal("0")
    remaining_hours: Decimal = DAILY_HOURS_CAP
    status: DailyStatus = DailyStatus.NO_ACTIVITY


class LedgerPreferences(BaseModel):
    """
    User configuration and preferences.

    This allows users to customize behavior without touching code.
    """
    model_config = ConfigDict(from_attributes=True)

    work_hours_per_day: Decimal = Field(
        default=Decimal("8"),
        gt=0,
        le=DAILY_HOURS_CAP,
        description="Target daily working hours used to rate a day's total"
    )
