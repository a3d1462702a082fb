"""
Repository Pattern Implementation.

Architecture Decision: Why Repository Pattern?
Separates data access logic from business logic. Makes it easy to:
- Switch database implementations
- Mock data for testing
- Swap the SQL store for the in-memory one behind the same interfaces

Every SQLAlchemy failure leaves a repository as a StorageFailureError, so the
layers above never see driver exceptions.
"""

import datetime
import functools
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from timeledger.domain.errors import NotFoundError, StorageFailureError
from timeledger.domain.models import Project, WorkTask, TimeEntry, TimeEntryRequest
from timeledger.infra.base import LedgerStore, TaskDirectory
from timeledger.infra.db import ProjectModel, WorkTaskModel, TimeEntryModel, DatabaseEngine, get_engine
from timeledger.utils import to_hours

logger = logging.getLogger(__name__)


def _storage_errors(method):
    """Translate SQLAlchemy errors raised by a repository coroutine"""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"{type(self).__name__}.{method.__name__} failed: {e}")
            raise StorageFailureError(f"Storage failure during {method.__name__}: {e}") from e

    return wrapper


class _Repository:
    """Session handling shared by all repositories"""

    def __init__(self, session: Optional[AsyncSession] = None,
                 engine: Optional[DatabaseEngine] = None):
        self.session = session
        self.engine = engine

    async def _get_session(self) -> AsyncSession:
        """Get session - either injected or create new one"""
        if self.session:
            return self.session
        engine = self.engine or get_engine()
        return engine.get_session()


class ProjectRepository(_Repository):
    """
    Handles all Project-related database operations.
    """

    @_storage_errors
    async def get_all(self) -> List[Project]:
        """Get all projects ordered by name"""
        session = await self._get_session()
        async with session:
            result = await session.execute(select(ProjectModel).order_by(ProjectModel.name, ProjectModel.id))
            return [Project.model_validate(m) for m in result.scalars().all()]

    @_storage_errors
    async def get_by_id(self, project_id: int) -> Optional[Project]:
        """Get a specific project by ID"""
        session = await self._get_session()
        async with session:
            model = await session.get(ProjectModel, project_id)
            return Project.model_validate(model) if model else None

    @_storage_errors
    async def get_by_code(self, code: str, exclude_id: Optional[int] = None) -> Optional[Project]:
        """Get a project by its unique code, optionally ignoring one project"""
        session = await self._get_session()
        async with session:
            stmt = select(ProjectModel).where(ProjectModel.code == code)
            if exclude_id is not None:
                stmt = stmt.where(ProjectModel.id != exclude_id)
            model = (await session.execute(stmt)).scalar_one_or_none()
            return Project.model_validate(model) if model else None

    @_storage_errors
    async def create(self, project: Project) -> Project:
        """Create a new project"""
        session = await self._get_session()
        async with session:
            model = ProjectModel(code=project.code, name=project.name, is_active=project.is_active)
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return Project.model_validate(model)

    @_storage_errors
    async def update(self, project: Project) -> Project:
        """Update an existing project"""
        session = await self._get_session()
        async with session:
            model = await session.get(ProjectModel, project.id)
            if model is None:
                raise NotFoundError("Project", project.id)
            model.code = project.code
            model.name = project.name
            model.is_active = project.is_active
            await session.commit()
            return Project.model_validate(model)

    @_storage_errors
    async def delete(self, project_id: int) -> None:
        """Delete a project by ID"""
        session = await self._get_session()
        async with session:
            await session.execute(delete(ProjectModel).where(ProjectModel.id == project_id))
            await session.commit()

    @_storage_errors
    async def count_tasks(self, project_id: int) -> int:
        """Number of tasks that belong to a project"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(func.count()).select_from(WorkTaskModel).where(WorkTaskModel.project_id == project_id)
            )
            return result.scalar_one()


class WorkTaskRepository(_Repository, TaskDirectory):
    """
    Handles all WorkTask-related database operations.

    Converts between domain models (Pydantic) and ORM models (SQLAlchemy).
    Tasks are always returned with their project loaded.
    """

    @staticmethod
    def _select():
        return select(WorkTaskModel).options(selectinload(WorkTaskModel.project))

    @_storage_errors
    async def get_all(self, include_inactive: bool = True) -> List[WorkTask]:
        """Get all tasks ordered by name, optionally active ones only"""
        session = await self._get_session()
        async with session:
            stmt = self._select()
            if not include_inactive:
                stmt = stmt.where(WorkTaskModel.is_active == True)
            result = await session.execute(stmt.order_by(WorkTaskModel.name, WorkTaskModel.id))
            return [WorkTask.model_validate(m) for m in result.scalars().all()]

    async def get_all_active(self) -> List[WorkTask]:
        """Get all tasks that accept new time entries"""
        return await self.get_all(include_inactive=False)

    @_storage_errors
    async def get_by_id(self, task_id: int) -> Optional[WorkTask]:
        """Get a specific task by ID"""
        session = await self._get_session()
        async with session:
            result = await session.execute(self._select().where(WorkTaskModel.id == task_id))
            model = result.scalar_one_or_none()
            return WorkTask.model_validate(model) if model else None

    @_storage_errors
    async def get_by_name(self, name: str, project_id: int,
                          exclude_id: Optional[int] = None) -> Optional[WorkTask]:
        """Get a task by its name within a project, optionally ignoring one task"""
        session = await self._get_session()
        async with session:
            stmt = self._select().where(
                WorkTaskModel.name == name,
                WorkTaskModel.project_id == project_id
            )
            if exclude_id is not None:
                stmt = stmt.where(WorkTaskModel.id != exclude_id)
            model = (await session.execute(stmt)).scalar_one_or_none()
            return WorkTask.model_validate(model) if model else None

    @_storage_errors
    async def create(self, task: WorkTask) -> WorkTask:
        """Create a new task"""
        session = await self._get_session()
        async with session:
            model = WorkTaskModel(name=task.name, project_id=task.project_id, is_active=task.is_active)
            session.add(model)
            await session.commit()
            result = await session.execute(
                self._select()
                .where(WorkTaskModel.id == model.id)
                .execution_options(populate_existing=True)
            )
            return WorkTask.model_validate(result.scalar_one())

    @_storage_errors
    async def update(self, task: WorkTask) -> WorkTask:
        """Update an existing task"""
        session = await self._get_session()
        async with session:
            model = await session.get(WorkTaskModel, task.id)
            if model is None:
                raise NotFoundError("Task", task.id)
            model.name = task.name
            model.project_id = task.project_id
            model.is_active = task.is_active
            await session.commit()
            result = await session.execute(
                self._select()
                .where(WorkTaskModel.id == task.id)
                .execution_options(populate_existing=True)
            )
            return WorkTask.model_validate(result.scalar_one())

    @_storage_errors
    async def delete(self, task_id: int) -> None:
        """Delete a task by ID"""
        session = await self._get_session()
        async with session:
            await session.execute(delete(WorkTaskModel).where(WorkTaskModel.id == task_id))
            await session.commit()


class TimeEntryRepository(_Repository, LedgerStore):
    """
    Handles all TimeEntry-related database operations.

    Entries are returned with their task and the task's project attached.
    """

    @staticmethod
    def _select():
        return select(TimeEntryModel).options(
            selectinload(TimeEntryModel.task).selectinload(WorkTaskModel.project)
        )

    async def _fetch(self, session: AsyncSession, entry_id: int) -> Optional[TimeEntry]:
        result = await session.execute(
            self._select()
            .where(TimeEntryModel.id == entry_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return TimeEntry.model_validate(model) if model else None

    @_storage_errors
    async def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        """Get a specific time entry by ID"""
        session = await self._get_session()
        async with session:
            return await self._fetch(session, entry_id)

    @_storage_errors
    async def sum_hours(self, day: datetime.date, exclude_id: Optional[int] = None) -> Decimal:
        """Total hours booked on a date, optionally ignoring one entry (for updates)"""
        session = await self._get_session()
        async with session:
            stmt = select(func.sum(TimeEntryModel.hours)).where(TimeEntryModel.date == day)
            if exclude_id is not None:
                stmt = stmt.where(TimeEntryModel.id != exclude_id)
            result = await session.execute(stmt)
            return to_hours(result.scalar_one())

    @_storage_errors
    async def insert(self, request: TimeEntryRequest) -> TimeEntry:
        """Create a new time entry"""
        session = await self._get_session()
        async with session:
            model = TimeEntryModel(
                date=request.date,
                hours=request.hours,
                description=request.description,
                task_id=request.task_id
            )
            session.add(model)
            await session.commit()
            return await self._fetch(session, model.id)

    @_storage_errors
    async def replace(self, entry_id: int, request: TimeEntryRequest) -> TimeEntry:
        """Overwrite an existing time entry in place"""
        session = await self._get_session()
        async with session:
            model = await session.get(TimeEntryModel, entry_id)
            if model is None:
                raise NotFoundError("Time entry", entry_id)
            model.date = request.date
            model.hours = request.hours
            model.description = request.description
            model.task_id = request.task_id
            await session.commit()
            return await self._fetch(session, entry_id)

    @_storage_errors
    async def get_all(self) -> List[TimeEntry]:
        """Get all time entries, newest date first"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                self._select().order_by(TimeEntryModel.date.desc(), TimeEntryModel.id)
            )
            return [TimeEntry.model_validate(m) for m in result.scalars().all()]

    @_storage_errors
    async def get_by_date(self, day: datetime.date) -> List[TimeEntry]:
        """Get all time entries of one date"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                self._select().where(TimeEntryModel.date == day).order_by(TimeEntryModel.id)
            )
            return [TimeEntry.model_validate(m) for m in result.scalars().all()]

    @_storage_errors
    async def get_by_range(self, start: datetime.date, end: datetime.date) -> List[TimeEntry]:
        """Get all time entries with start <= date < end"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                self._select()
                .where(TimeEntryModel.date >= start, TimeEntryModel.date < end)
                .order_by(TimeEntryModel.date.desc(), TimeEntryModel.id)
            )
            return [TimeEntry.model_validate(m) for m in result.scalars().all()]

    @_storage_errors
    async def daily_totals(self, start: Optional[datetime.date] = None,
                           end: Optional[datetime.date] = None) -> List[Tuple[datetime.date, Decimal]]:
        """Total hours per date that has entries, newest date first"""
        session = await self._get_session()
        async with session:
            stmt = select(TimeEntryModel.date, func.sum(TimeEntryModel.hours))
            if start is not None:
                stmt = stmt.where(TimeEntryModel.date >= start)
            if end is not None:
                stmt = stmt.where(TimeEntryModel.date < end)
            result = await session.execute(
                stmt.group_by(TimeEntryModel.date).order_by(TimeEntryModel.date.desc())
            )
            return [(day, to_hours(total)) for day, total in result.all()]

    @_storage_errors
    async def count_by_task(self, task_id: int) -> int:
        """Number of time entries referencing a task"""
        session = await self._get_session()
        async with session:
            result = await session.execute(
                select(func.count()).select_from(TimeEntryModel).where(TimeEntryModel.task_id == task_id)
            )
            return result.scalar_one()
