"""
In-memory implementations of the storage interfaces.

Used by tests that exercise the ledger
core without a database. Every method yields to the event loop once, so
concurrent callers interleave the same way they would against a real store.
"""

import asyncio
import datetime
import itertools
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from timeledger.domain.errors import NotFoundError
from timeledger.domain.models import TimeEntry, TimeEntryRequest, WorkTask
from timeledger.infra.base import LedgerStore, TaskDirectory
from timeledger.utils import to_hours


class InMemoryTaskDirectory(TaskDirectory):
    """Task lookup backed by a dict"""

    def __init__(self, tasks: Optional[List[WorkTask]] = None):
        self._tasks: Dict[int, WorkTask] = {}
        self._ids = itertools.count(1)
        for task in tasks or []:
            self.add(task)

    def add(self, task: WorkTask) -> WorkTask:
        """Register a task, assigning an id when it has none"""
        if task.id is None:
            task = task.model_copy(update={"id": next(self._ids)})
        self._tasks[task.id] = task
        return task

    def peek(self, task_id: int) -> Optional[WorkTask]:
        return self._tasks.get(task_id)

    def set_active(self, task_id: int, is_active: bool) -> None:
        self._tasks[task_id] = self._tasks[task_id].model_copy(update={"is_active": is_active})

    async def get_by_id(self, task_id: int) -> Optional[WorkTask]:
        await asyncio.sleep(0)
        return self._tasks.get(task_id)


class InMemoryLedgerStore(LedgerStore):
    """Time entry storage backed by a dict keyed by entry id"""

    def __init__(self, tasks: Optional[InMemoryTaskDirectory] = None):
        self.tasks = tasks or InMemoryTaskDirectory()
        self._entries: Dict[int, TimeEntry] = {}
        self._ids = itertools.count(1)

    def _build(self, entry_id: int, request: TimeEntryRequest) -> TimeEntry:
        return TimeEntry(
            id=entry_id,
            task_id=request.task_id,
            date=request.date,
            hours=to_hours(request.hours),
            description=request.description,
            task=self.tasks.peek(request.task_id)
        )

    @staticmethod
    def _newest_first(entries: List[TimeEntry]) -> List[TimeEntry]:
        by_id = sorted(entries, key=lambda e: e.id)
        return sorted(by_id, key=lambda e: e.date, reverse=True)

    async def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        await asyncio.sleep(0)
        return self._entries.get(entry_id)

    async def sum_hours(self, day: datetime.date, exclude_id: Optional[int] = None) -> Decimal:
        await asyncio.sleep(0)
        return to_hours(sum(
            (e.hours for e in self._entries.values() if e.date == day and e.id != exclude_id),
            Decimal("0")
        ))

    async def insert(self, request: TimeEntryRequest) -> TimeEntry:
        await asyncio.sleep(0)
        entry = self._build(next(self._ids), request)
        self._entries[entry.id] = entry
        return entry

    async def replace(self, entry_id: int, request: TimeEntryRequest) -> TimeEntry:
        await asyncio.sleep(0)
        if entry_id not in self._entries:
            raise NotFoundError("Time entry", entry_id)
        entry = self._build(entry_id, request)
        self._entries[entry_id] = entry
        return entry

    async def get_all(self) -> List[TimeEntry]:
        await asyncio.sleep(0)
        return self._newest_first(list(self._entries.values()))

    async def get_by_date(self, day: datetime.date) -> List[TimeEntry]:
        await asyncio.sleep(0)
        return sorted((e for e in self._entries.values() if e.date == day), key=lambda e: e.id)

    async def get_by_range(self, start: datetime.date, end: datetime.date) -> List[TimeEntry]:
        await asyncio.sleep(0)
        return self._newest_first([e for e in self._entries.values() if start <= e.date < end])

    async def daily_totals(self, start: Optional[datetime.date] = None,
                           end: Optional[datetime.date] = None) -> List[Tuple[datetime.date, Decimal]]:
        await asyncio.sleep(0)
        totals: Dict[datetime.date, Decimal] = defaultdict(Decimal)
        for entry in self._entries.values():
            if start is not None and entry.date < start:
                continue
            if end is not None and entry.date >= end:
                continue
            totals[entry.date] += entry.hours
        return [(day, to_hours(totals[day])) for day in sorted(totals, reverse=True)]

    async def count_by_task(self, task_id: int) -> int:
        await asyncio.sleep(0)
        return sum(1 for e in self._entries.values() if e.task_id == task_id)
