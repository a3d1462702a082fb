"""
Storage interfaces used by the ledger core.

Architecture Decision: Abstract interfaces
The coordinator, gate and aggregator only see these interfaces. The SQL
repositories implement them for the application and the in-memory stores
implement them for tests.
"""

import datetime
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Tuple

from timeledger.domain.models import TimeEntry, TimeEntryRequest, WorkTask


class TaskDirectory(ABC):
    """Read-only lookup of work tasks"""

    @abstractmethod
    async def get_by_id(self, task_id: int) -> Optional[WorkTask]:
        """Return the task (with its project) or None"""


class LedgerStore(ABC):
    """
    Durable storage of time entries.

    Each method is atomic on its own. Callers that need several calls to act
    as one unit (aggregate, then write) must serialize them themselves.
    """

    @abstractmethod
    async def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        """Point read of one entry"""

    @abstractmethod
    async def sum_hours(self, day: datetime.date, exclude_id: Optional[int] = None) -> Decimal:
        """Sum of hours booked on a date, optionally ignoring one entry"""

    @abstractmethod
    async def insert(self, request: TimeEntryRequest) -> TimeEntry:
        """Write a new entry and return it with its task attached"""

    @abstractmethod
    async def replace(self, entry_id: int, request: TimeEntryRequest) -> TimeEntry:
        """Overwrite an existing entry in place"""

    @abstractmethod
    async def get_all(self) -> List[TimeEntry]:
        """All entries, newest date first then by id"""

    @abstractmethod
    async def get_by_date(self, day: datetime.date) -> List[TimeEntry]:
        """Entries of one date ordered by id"""

    @abstractmethod
    async def get_by_range(self, start: datetime.date, end: datetime.date) -> List[TimeEntry]:
        """Entries with start <= date < end, newest date first then by id"""

    @abstractmethod
    async def daily_totals(self, start: Optional[datetime.date] = None,
                           end: Optional[datetime.date] = None) -> List[Tuple[datetime.date, Decimal]]:
        """(date, total hours) per date that has entries, newest date first"""

    @abstractmethod
    async def count_by_task(self, task_id: int) -> int:
        """Number of entries referencing a task"""
