"""
Daily Aggregator - totals and summaries derived from the ledger.

All totals come straight from the store, so they always agree with the set
of admitted entries.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional

from timeledger.domain.errors import InvalidInputError
from timeledger.domain.models import DAILY_HOURS_CAP, DailyStatus, DailySummary, TimeEntry
from timeledger.infra.base import LedgerStore
from timeledger.utils import month_bounds, normalize_date, to_hours

logger = logging.getLogger(__name__)

MIN_YEAR = 1900
MAX_YEAR = 2100


def validate_month(year: int, month: int) -> None:
    """
    Reject out-of-range month queries before anything touches storage.

    Raises:
        InvalidInputError: month outside 1..12 or year outside 1900..2100
    """
    if not 1 <= month <= 12:
        raise InvalidInputError("Month must be between 1 and 12", field="month")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidInputError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}", field="year")


class DailyAggregator:
    """
    Computes per-day totals and summaries.

    Args:
        store: Ledger store to read from
        work_hours_per_day: Target working day used to rate a day's total
    """

    def __init__(self, store: LedgerStore, work_hours_per_day: Decimal = Decimal("8")):
        self.store = store
        self.work_hours_per_day = work_hours_per_day

    async def sum_hours(self, day, exclude_id: Optional[int] = None) -> Decimal:
        """Hours booked on a date (time of day ignored), optionally excluding one entry"""
        return await self.store.sum_hours(normalize_date(day), exclude_id)

    def rate(self, total_hours: Decimal) -> DailyStatus:
        """Compare a day's total with the target working day"""
        if total_hours <= 0:
            return DailyStatus.NO_ACTIVITY
        if total_hours < self.work_hours_per_day:
            return DailyStatus.INSUFFICIENT
        if total_hours == self.work_hours_per_day:
            return DailyStatus.SUFFICIENT
        return DailyStatus.EXCESSIVE

    def summarize(self, day: datetime.date, total_hours: Decimal) -> DailySummary:
        total = to_hours(total_hours)
        return DailySummary(
            date=day,
            total_hours=total,
            remaining_hours=max(DAILY_HOURS_CAP - total, Decimal("0")),
            status=self.rate(total)
        )

    async def daily_summaries(self) -> List[DailySummary]:
        """Summary of every date that has entries, newest first"""
        totals = await self.store.daily_totals()
        return [self.summarize(day, total) for day, total in totals]

    async def summary_for_date(self, day) -> DailySummary:
        """Summary of one date; a date without entries is reported as no activity"""
        day = normalize_date(day)
        return self.summarize(day, await self.store.sum_hours(day))

    async def month_summaries(self, year: int, month: int) -> List[DailySummary]:
        """Summary of every calendar day of a month, in date order"""
        validate_month(year, month)
        start, end = month_bounds(year, month)
        totals = dict(await self.store.daily_totals(start, end))

        summaries = []
        current = start
        while current < end:
            summaries.append(self.summarize(current, totals.get(current, Decimal("0"))))
            current += datetime.timedelta(days=1)
        return summaries

    async def all_entries(self) -> List[TimeEntry]:
        return await self.store.get_all()

    async def entries_for_date(self, day) -> List[TimeEntry]:
        return await self.store.get_by_date(normalize_date(day))

    async def entries_for_month(self, year: int, month: int) -> List[TimeEntry]:
        """Entries of a month; the range is validated before the store is queried"""
        validate_month(year, month)
        start, end = month_bounds(year, month)
        return await self.store.get_by_range(start, end)
