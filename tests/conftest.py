"""
Pytest configuration and fixtures.
"""

import sys
from pathlib import Path
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Add project root
sys.path.insert(0, str(Path(__file__).parent.parent))

from timeledger.domain.models import Project, WorkTask
from timeledger.infra.db import DatabaseEngine
from timeledger.infra.memory import InMemoryLedgerStore, InMemoryTaskDirectory
from timeledger.infra.repository import ProjectRepository, WorkTaskRepository, TimeEntryRepository


@pytest_asyncio.fixture
async def database(tmp_path):
    """Create a file-backed SQLite database for testing"""
    engine = DatabaseEngine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await engine.create_tables()

    yield engine

    await engine.drop_tables()
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    """Create a new session for a test"""
    async_session = async_sessionmaker(database.engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def project_repo(database):
    return ProjectRepository(engine=database)


@pytest.fixture
def task_repo(database):
    return WorkTaskRepository(engine=database)


@pytest.fixture
def entry_repo(database):
    return TimeEntryRepository(engine=database)


@pytest_asyncio.fixture
async def project(project_repo):
    return await project_repo.create(Project(code="ACME", name="Acme Portal"))


@pytest_asyncio.fixture
async def active_task(task_repo, project):
    return await task_repo.create(WorkTask(name="Development", project_id=project.id))


@pytest_asyncio.fixture
async def inactive_task(task_repo, project):
    return await task_repo.create(WorkTask(name="Legacy Support", project_id=project.id, is_active=False))


@pytest.fixture
def memory_tasks():
    """In-memory task directory with one active (id 1) and one inactive (id 2) task"""
    project = Project(id=1, code="INT", name="Internal")
    return InMemoryTaskDirectory([
        WorkTask(id=1, name="Development", project_id=1, project=project),
        WorkTask(id=2, name="Archived Work", project_id=1, is_active=False, project=project),
    ])


@pytest.fixture
def memory_store(memory_tasks):
    return InMemoryLedgerStore(memory_tasks)
