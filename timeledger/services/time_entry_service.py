"""
Time Entry Service - the operations exposed to callers, wrapped in envelopes.

Creation and updates go through the LedgerCoordinator; listing and summary
requests go straight to the DailyAggregator.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import ValidationError

from timeledger.domain.errors import InvalidInputError, LedgerError, NotFoundError
from timeledger.domain.models import DailySummary, LedgerPreferences, TimeEntry, TimeEntryRequest
from timeledger.domain.responses import ApiResponse, ApiStatusCode
from timeledger.infra.base import LedgerStore, TaskDirectory
from timeledger.infra.repository import TimeEntryRepository, WorkTaskRepository
from timeledger.services.admission import AdmissionValidator
from timeledger.services.aggregator import DailyAggregator
from timeledger.services.coordinator import LedgerCoordinator
from timeledger.services.envelope import error_response, invalid_input
from timeledger.services.task_gate import TaskGate
from timeledger.utils import normalize_date

logger = logging.getLogger(__name__)

DayLike = Union[datetime.date, datetime.datetime, str]


def _parse_day(value: DayLike) -> datetime.date:
    """Accept a date, a datetime or an ISO 'YYYY-MM-DD' string"""
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInputError(f"Malformed date '{value}', expected YYYY-MM-DD", field="date")
    if isinstance(value, (datetime.date, datetime.datetime)):
        return normalize_date(value)
    raise InvalidInputError(f"Malformed date {value!r}", field="date")


class TimeEntryService:
    """
    Entry point for booking hours and reading daily totals.

    Args:
        store: Ledger store (SQL repository by default)
        tasks: Task directory used by the task gate (SQL repository by default)
        work_hours_per_day: Target working day for summary statuses
    """

    def __init__(self, store: Optional[LedgerStore] = None,
                 tasks: Optional[TaskDirectory] = None,
                 work_hours_per_day: Optional[Decimal] = None):
        self.store = store or TimeEntryRepository()
        if work_hours_per_day is None:
            work_hours_per_day = LedgerPreferences().work_hours_per_day

        self.aggregator = DailyAggregator(self.store, work_hours_per_day)
        self.coordinator = LedgerCoordinator(
            self.store,
            TaskGate(tasks or WorkTaskRepository()),
            aggregator=self.aggregator,
            validator=AdmissionValidator()
        )

    async def get_all_time_entries(self) -> ApiResponse[List[TimeEntry]]:
        try:
            logger.info("Listing all time entries")
            entries = await self.aggregator.all_entries()
            logger.info(f"Retrieved {len(entries)} time entries")
            return ApiResponse.success(entries, f"Retrieved {len(entries)} time entries")
        except LedgerError as e:
            return error_response(e, "listing time entries", logger)

    async def get_time_entries_by_date(self, day: DayLike) -> ApiResponse[List[TimeEntry]]:
        try:
            day = _parse_day(day)
            logger.info(f"Listing time entries for {day}")
            entries = await self.aggregator.entries_for_date(day)
            logger.info(f"Retrieved {len(entries)} time entries for {day}")
            return ApiResponse.success(entries, f"Retrieved {len(entries)} time entries for {day.isoformat()}")
        except LedgerError as e:
            return error_response(e, f"listing time entries for {day}", logger)

    async def get_time_entries_by_month(self, year: int, month: int) -> ApiResponse[List[TimeEntry]]:
        try:
            logger.info(f"Listing time entries for {year:04d}-{month:02d}")
            entries = await self.aggregator.entries_for_month(year, month)
            logger.info(f"Retrieved {len(entries)} time entries for {year:04d}-{month:02d}")
            return ApiResponse.success(entries, f"Retrieved {len(entries)} time entries for {year:04d}-{month:02d}")
        except LedgerError as e:
            return error_response(e, f"listing time entries for {year}-{month}", logger)

    async def create_time_entry(self, task_id: int, date: DayLike, hours,
                                description: str) -> ApiResponse[TimeEntry]:
        """
        Book hours against a task.

        Every rejection (unknown or inactive task, daily cap, bad input) is a
        400; only storage failures are 500.
        """
        try:
            request = TimeEntryRequest(task_id=task_id, date=date, hours=hours, description=description)
            entry = await self.coordinator.admit(request)
            return ApiResponse.success(entry, "Time entry created", ApiStatusCode.CREATED)
        except ValidationError as e:
            return error_response(invalid_input(e), "creating a time entry", logger)
        except LedgerError as e:
            return error_response(e, "creating a time entry", logger, status_code=self._rejection_status(e))

    async def update_time_entry(self, entry_id: int, task_id: int, date: DayLike, hours,
                                description: str) -> ApiResponse[TimeEntry]:
        """Replace an entry; the entry's own old hours do not count against the cap."""
        try:
            request = TimeEntryRequest(task_id=task_id, date=date, hours=hours, description=description)
            entry = await self.coordinator.readmit(entry_id, request)
            return ApiResponse.success(entry, "Time entry updated")
        except ValidationError as e:
            return error_response(invalid_input(e), f"updating time entry {entry_id}", logger)
        except LedgerError as e:
            status = None
            if isinstance(e, NotFoundError) and e.entity == "Task":
                status = ApiStatusCode.BAD_REQUEST
            return error_response(e, f"updating time entry {entry_id}", logger, status_code=status)

    async def get_daily_summary(self) -> ApiResponse[List[DailySummary]]:
        try:
            logger.info("Building daily summary")
            summaries = await self.aggregator.daily_summaries()
            logger.info(f"Summarized {len(summaries)} days")
            return ApiResponse.success(summaries, f"Summarized {len(summaries)} days")
        except LedgerError as e:
            return error_response(e, "building the daily summary", logger)

    async def get_day_summary(self, day: DayLike) -> ApiResponse[DailySummary]:
        try:
            day = _parse_day(day)
            summary = await self.aggregator.summary_for_date(day)
            return ApiResponse.success(summary, f"Summary for {day.isoformat()}")
        except LedgerError as e:
            return error_response(e, f"summarizing {day}", logger)

    async def get_month_summary(self, year: int, month: int) -> ApiResponse[List[DailySummary]]:
        try:
            logger.info(f"Building summary for {year:04d}-{month:02d}")
            summaries = await self.aggregator.month_summaries(year, month)
            return ApiResponse.success(summaries, f"Summarized {len(summaries)} days of {year:04d}-{month:02d}")
        except LedgerError as e:
            return error_response(e, f"summarizing {year}-{month}", logger)

    @staticmethod
    def _rejection_status(error: LedgerError) -> Optional[ApiStatusCode]:
        # a missing task is a bad request on creation, not a missing resource
        if isinstance(error, NotFoundError):
            return ApiStatusCode.BAD_REQUEST
        return None
