"""
Tests for the SQL repositories.
"""

import datetime
from decimal import Decimal

import pytest
import pytest_asyncio

from timeledger.domain.errors import NotFoundError, StorageFailureError
from timeledger.domain.models import Project, TimeEntryRequest, WorkTask
from timeledger.infra.repository import TimeEntryRepository

DAY = datetime.date(2025, 5, 15)


def make_request(task_id: int, hours: str, day=DAY, description: str = "Work") -> TimeEntryRequest:
    return TimeEntryRequest(task_id=task_id, date=day, hours=Decimal(hours), description=description)


@pytest_asyncio.fixture
async def booked(entry_repo, active_task):
    """Entries on two dates in May and one in June"""
    await entry_repo.insert(make_request(active_task.id, "3", day=DAY))
    await entry_repo.insert(make_request(active_task.id, "4.75", day=DAY))
    await entry_repo.insert(make_request(active_task.id, "6", day=datetime.date(2025, 5, 2)))
    await entry_repo.insert(make_request(active_task.id, "2", day=datetime.date(2025, 6, 1)))
    return entry_repo


class TestProjectRepository:

    @pytest.mark.asyncio
    async def test_create_and_get(self, project_repo, project):
        loaded = await project_repo.get_by_id(project.id)

        assert loaded.code == "ACME"
        assert loaded.is_active

    @pytest.mark.asyncio
    async def test_get_all_ordered_by_name(self, project_repo, project):
        await project_repo.create(Project(code="INT", name="Internal"))
        await project_repo.create(Project(code="ZZZ", name="Administration"))

        projects = await project_repo.get_all()

        assert [p.name for p in projects] == ["Acme Portal", "Administration", "Internal"]

    @pytest.mark.asyncio
    async def test_get_by_code_excludes_self(self, project_repo, project):
        assert (await project_repo.get_by_code("ACME")).id == project.id
        assert await project_repo.get_by_code("ACME", exclude_id=project.id) is None

    @pytest.mark.asyncio
    async def test_update_missing_project(self, project_repo):
        with pytest.raises(NotFoundError):
            await project_repo.update(Project(id=42, code="X", name="Ghost"))

    @pytest.mark.asyncio
    async def test_count_tasks(self, project_repo, project, active_task, inactive_task):
        assert await project_repo.count_tasks(project.id) == 2

    @pytest.mark.asyncio
    async def test_duplicate_code_is_a_storage_failure(self, project_repo, project):
        with pytest.raises(StorageFailureError):
            await project_repo.create(Project(code="ACME", name="Another"))


class TestWorkTaskRepository:

    @pytest.mark.asyncio
    async def test_task_comes_with_project(self, task_repo, active_task):
        task = await task_repo.get_by_id(active_task.id)

        assert task.project.code == "ACME"

    @pytest.mark.asyncio
    async def test_active_filter(self, task_repo, active_task, inactive_task):
        all_tasks = await task_repo.get_all()
        active = await task_repo.get_all_active()

        assert [t.name for t in all_tasks] == ["Development", "Legacy Support"]
        assert [t.id for t in active] == [active_task.id]

    @pytest.mark.asyncio
    async def test_get_by_name_is_scoped_to_project(self, task_repo, project_repo, active_task):
        other = await project_repo.create(Project(code="INT", name="Internal"))

        assert await task_repo.get_by_name("Development", active_task.project_id) is not None
        assert await task_repo.get_by_name("Development", other.id) is None

    @pytest.mark.asyncio
    async def test_update_toggles_active(self, task_repo, active_task):
        updated = await task_repo.update(active_task.model_copy(update={"is_active": False}))

        assert not updated.is_active
        assert not (await task_repo.get_by_id(active_task.id)).is_active

    @pytest.mark.asyncio
    async def test_missing_task(self, task_repo):
        assert await task_repo.get_by_id(999) is None
        with pytest.raises(NotFoundError):
            await task_repo.update(WorkTask(id=999, name="Ghost", project_id=1))


class TestTimeEntryRepository:

    @pytest.mark.asyncio
    async def test_insert_returns_entry_with_relations(self, entry_repo, active_task):
        entry = await entry_repo.insert(make_request(active_task.id, "2.5"))

        assert entry.id is not None
        assert entry.hours == Decimal("2.50")
        assert entry.task.name == "Development"
        assert entry.task.project.code == "ACME"

    @pytest.mark.asyncio
    async def test_sum_hours(self, booked):
        assert await booked.sum_hours(DAY) == Decimal("7.75")
        assert await booked.sum_hours(datetime.date(2025, 1, 1)) == Decimal("0")

    @pytest.mark.asyncio
    async def test_sum_hours_excluding_entry(self, booked):
        first = (await booked.get_by_date(DAY))[0]

        assert await booked.sum_hours(DAY, exclude_id=first.id) == Decimal("4.75")

    @pytest.mark.asyncio
    async def test_replace(self, booked, active_task):
        entry = (await booked.get_by_date(DAY))[0]

        replaced = await booked.replace(
            entry.id, make_request(active_task.id, "1", day=datetime.date(2025, 5, 16), description="Moved")
        )

        assert replaced.id == entry.id
        assert replaced.date == datetime.date(2025, 5, 16)
        assert replaced.description == "Moved"
        assert await booked.sum_hours(DAY) == Decimal("4.75")

    @pytest.mark.asyncio
    async def test_replace_missing_entry(self, entry_repo, active_task):
        with pytest.raises(NotFoundError):
            await entry_repo.replace(12345, make_request(active_task.id, "1"))

    @pytest.mark.asyncio
    async def test_listing_order(self, booked):
        dates = [e.date for e in await booked.get_all()]

        assert dates == [datetime.date(2025, 6, 1), DAY, DAY, datetime.date(2025, 5, 2)]

    @pytest.mark.asyncio
    async def test_range_end_is_exclusive(self, booked):
        entries = await booked.get_by_range(datetime.date(2025, 5, 1), datetime.date(2025, 6, 1))

        assert len(entries) == 3
        assert all(e.date.month == 5 for e in entries)

    @pytest.mark.asyncio
    async def test_daily_totals(self, booked):
        totals = await booked.daily_totals()

        assert totals == [
            (datetime.date(2025, 6, 1), Decimal("2.00")),
            (DAY, Decimal("7.75")),
            (datetime.date(2025, 5, 2), Decimal("6.00")),
        ]

    @pytest.mark.asyncio
    async def test_daily_totals_in_range(self, booked):
        totals = await booked.daily_totals(datetime.date(2025, 5, 1), datetime.date(2025, 6, 1))

        assert [day for day, _ in totals] == [DAY, datetime.date(2025, 5, 2)]

    @pytest.mark.asyncio
    async def test_count_by_task(self, booked, active_task, inactive_task):
        assert await booked.count_by_task(active_task.id) == 4
        assert await booked.count_by_task(inactive_task.id) == 0

    @pytest.mark.asyncio
    async def test_unknown_task_violates_foreign_key(self, entry_repo, active_task):
        with pytest.raises(StorageFailureError):
            await entry_repo.insert(make_request(active_task.id + 100, "1"))

    @pytest.mark.asyncio
    async def test_injected_session(self, db_session, active_task):
        repo = TimeEntryRepository(session=db_session)

        entry = await repo.insert(make_request(active_task.id, "1.25"))

        assert entry.hours == Decimal("1.25")
