"""
Ledger Coordinator - admits time entries without breaking the daily cap.

Architecture Decision: Per-date locking
Reading a day's total, checking it and writing the new entry must behave as
one step, otherwise two concurrent admissions can both pass the check against
the same stale total. Every admission holds an exclusive lock for its date
from the aggregate read until the write has finished. Different dates never
contend.

The lock registry is shared by every coordinator in this process.
Deployments that run several writer processes against one database need a
serializable transaction around the same three steps instead.
"""

import asyncio
import datetime
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from timeledger.domain.errors import NotFoundError, StorageFailureError
from timeledger.domain.models import TimeEntry, TimeEntryRequest
from timeledger.infra.base import LedgerStore
from timeledger.services.admission import AdmissionValidator
from timeledger.services.aggregator import DailyAggregator
from timeledger.services.task_gate import TaskGate

logger = logging.getLogger(__name__)


class DateLocks:
    """
    Registry of one asyncio.Lock per calendar date.

    A lock exists only while someone holds or waits for it.
    """

    def __init__(self):
        self._locks: Dict[datetime.date, asyncio.Lock] = {}
        self._users: Dict[datetime.date, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def locked(self, day: datetime.date) -> bool:
        lock = self._locks.get(day)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, day: datetime.date):
        """Hold the exclusive lock of a date for the duration of the block"""
        lock = self._locks.setdefault(day, asyncio.Lock())
        self._users[day] = self._users.get(day, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[day] -= 1
            if self._users[day] == 0:
                del self._users[day]
                del self._locks[day]


# Shared by every coordinator in the process, so separately built services
# writing to the same database still queue on the same date.
PROCESS_DATE_LOCKS = DateLocks()


class LedgerCoordinator:
    """
    Runs gate -> aggregate -> validate -> commit for each admission attempt.

    Every attempt ends at the first rejection or at the successful write.
    Nothing is persisted unless all checks pass.
    """

    def __init__(self, store: LedgerStore, gate: TaskGate,
                 aggregator: Optional[DailyAggregator] = None,
                 validator: Optional[AdmissionValidator] = None,
                 locks: Optional[DateLocks] = None):
        self.store = store
        self.gate = gate
        self.aggregator = aggregator or DailyAggregator(store)
        self.validator = validator or AdmissionValidator()
        self.locks = locks if locks is not None else PROCESS_DATE_LOCKS

    async def admit(self, request: TimeEntryRequest) -> TimeEntry:
        """
        Admit a new time entry.

        Raises:
            NotFoundError: the task does not exist
            InactiveTaskError: the task is inactive
            CapExceededError: the date's total would exceed the cap
            InvalidInputError: non-positive hours
            StorageFailureError: the write failed; nothing was committed
        """
        logger.info(f"Admitting {request.hours}h on {request.date} for task {request.task_id}")
        await self.gate.require_active(request.task_id)

        async with self.locks.hold(request.date):
            self._check_budget(request, await self.aggregator.sum_hours(request.date))
            entry = await self._commit(self.store.insert(request), request)

        logger.info(f"Time entry {entry.id} admitted on {entry.date}")
        return entry

    async def readmit(self, entry_id: int, request: TimeEntryRequest) -> TimeEntry:
        """
        Replace an existing entry, checking the cap without the entry's old hours.

        The task must be active only when the entry moves to a different task;
        an entry keeps its task even after that task was deactivated.

        Raises:
            NotFoundError: the entry or the task does not exist
            InactiveTaskError: the entry moves to an inactive task
            CapExceededError: the date's total would exceed the cap
            StorageFailureError: the write failed; nothing was committed
        """
        logger.info(f"Re-admitting time entry {entry_id} as {request.hours}h on {request.date}")
        current = await self.store.get_by_id(entry_id)
        if current is None:
            logger.warning(f"Time entry {entry_id} not found")
            raise NotFoundError("Time entry", entry_id)

        if request.task_id != current.task_id:
            await self.gate.require_active(request.task_id)
        else:
            await self.gate.check_active(request.task_id)

        async with self.locks.hold(request.date):
            existing = await self.aggregator.sum_hours(request.date, exclude_id=entry_id)
            self._check_budget(request, existing)
            entry = await self._commit(self.store.replace(entry_id, request), request)

        logger.info(f"Time entry {entry_id} updated")
        return entry

    def _check_budget(self, request: TimeEntryRequest, existing_hours) -> None:
        decision = self.validator.validate(request, existing_hours)
        if not decision.admitted:
            logger.warning(f"Rejected entry for task {request.task_id}: {decision.reason}")
            decision.raise_for_rejection()
        logger.info(
            f"Hours on {decision.day}: existing {decision.existing_hours}, "
            f"adding {decision.hours}, total {decision.total_hours}"
        )

    async def _commit(self, write, request: TimeEntryRequest) -> TimeEntry:
        """
        Run the store write. Once started it runs to completion, and the date
        lock stays held until it has, even if the caller is cancelled.
        """
        commit = asyncio.ensure_future(write)
        try:
            return await asyncio.shield(commit)
        except asyncio.CancelledError:
            await asyncio.wait({commit})
            if not commit.cancelled() and commit.exception() is None:
                logger.warning(f"Caller cancelled after commit of entry on {request.date}")
            raise
        except StorageFailureError:
            logger.error(f"Commit failed for entry on {request.date} (task {request.task_id})")
            raise
