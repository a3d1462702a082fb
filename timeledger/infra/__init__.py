"""Infrastructure layer - Database, persistence and configuration"""

from .db import DatabaseEngine, get_engine, init_db
from .db import Base, ProjectModel, WorkTaskModel, TimeEntryModel
from .base import LedgerStore, TaskDirectory
from .repository import ProjectRepository, WorkTaskRepository, TimeEntryRepository
from .memory import InMemoryLedgerStore, InMemoryTaskDirectory

__all__ = [
    "DatabaseEngine", "get_engine", "init_db",
    "Base", "ProjectModel", "WorkTaskModel", "TimeEntryModel",
    "LedgerStore", "TaskDirectory",
    "ProjectRepository", "WorkTaskRepository", "TimeEntryRepository",
    "InMemoryLedgerStore", "InMemoryTaskDirectory",
]
