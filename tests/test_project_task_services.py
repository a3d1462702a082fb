"""
Tests for project and task CRUD through the services.
"""

import datetime
from decimal import Decimal

import pytest

from timeledger.domain.models import TimeEntryRequest
from timeledger.domain.responses import ApiStatusCode
from timeledger.services.project_service import ProjectService
from timeledger.services.task_service import TaskService


@pytest.fixture
def projects(project_repo):
    return ProjectService(project_repo)


@pytest.fixture
def tasks(task_repo, project_repo, entry_repo):
    return TaskService(task_repo, project_repo, entry_repo)


class TestProjectService:

    @pytest.mark.asyncio
    async def test_create_project(self, projects):
        response = await projects.create_project("INT", "Internal")

        assert response.status_code == ApiStatusCode.CREATED
        assert response.is_success
        assert response.data.id is not None

    @pytest.mark.asyncio
    async def test_duplicate_code(self, projects, project):
        response = await projects.create_project("ACME", "Second Acme")

        assert response.status_code == ApiStatusCode.BAD_REQUEST
        assert "ACME" in response.message
        assert response.data is None

    @pytest.mark.asyncio
    async def test_invalid_fields(self, projects):
        response = await projects.create_project("", "No Code")

        assert response.status_code == ApiStatusCode.BAD_REQUEST
        assert "code" in response.message

    @pytest.mark.asyncio
    async def test_get_missing_project(self, projects):
        response = await projects.get_project(404)

        assert response.status_code == ApiStatusCode.NOT_FOUND
        assert response.message == "Project with ID 404 not found"

    @pytest.mark.asyncio
    async def test_update_keeps_own_code(self, projects, project):
        response = await projects.update_project(project.id, "ACME", "Acme Portal v2", False)

        assert response.status_code == ApiStatusCode.SUCCESS
        assert response.data.name == "Acme Portal v2"
        assert not response.data.is_active

    @pytest.mark.asyncio
    async def test_update_to_taken_code(self, projects, project):
        other = (await projects.create_project("INT", "Internal")).data

        response = await projects.update_project(other.id, "ACME", "Internal", True)

        assert response.status_code == ApiStatusCode.BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_missing_project(self, projects):
        response = await projects.update_project(77, "X", "Ghost", True)

        assert response.status_code == ApiStatusCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_with_tasks_is_refused(self, projects, project, active_task):
        response = await projects.delete_project(project.id)

        assert response.status_code == ApiStatusCode.BAD_REQUEST
        assert "1 related tasks" in response.message

    @pytest.mark.asyncio
    async def test_delete_empty_project(self, projects, project):
        response = await projects.delete_project(project.id)

        assert response.data is True
        assert (await projects.get_project(project.id)).status_code == ApiStatusCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_list_projects(self, projects, project):
        response = await projects.get_all_projects()

        assert [p.code for p in response.data] == ["ACME"]


class TestTaskService:

    @pytest.mark.asyncio
    async def test_create_task(self, tasks, project):
        response = await tasks.create_task("Testing", project.id)

        assert response.status_code == ApiStatusCode.CREATED
        assert response.data.project.code == "ACME"

    @pytest.mark.asyncio
    async def test_duplicate_name_in_project(self, tasks, active_task):
        response = await tasks.create_task("Development", active_task.project_id)

        assert response.status_code == ApiStatusCode.BAD_REQUEST
        assert "already exists" in response.message

    @pytest.mark.asyncio
    async def test_same_name_in_other_project(self, tasks, projects, active_task):
        other = (await projects.create_project("INT", "Internal")).data

        response = await tasks.create_task("Development", other.id)

        assert response.status_code == ApiStatusCode.CREATED

    @pytest.mark.asyncio
    async def test_unknown_project(self, tasks):
        response = await tasks.create_task("Orphan", 999)

        assert response.status_code == ApiStatusCode.BAD_REQUEST
        assert "999" in response.message

    @pytest.mark.asyncio
    async def test_active_listing(self, tasks, active_task, inactive_task):
        all_tasks = (await tasks.get_all_tasks()).data
        active = (await tasks.get_active_tasks()).data

        assert len(all_tasks) == 2
        assert [t.name for t in active] == ["Development"]

    @pytest.mark.asyncio
    async def test_deactivate_task(self, tasks, active_task):
        response = await tasks.update_task(active_task.id, "Development", active_task.project_id, False)

        assert response.status_code == ApiStatusCode.SUCCESS
        assert not response.data.is_active

    @pytest.mark.asyncio
    async def test_get_missing_task(self, tasks):
        assert (await tasks.get_task(5)).status_code == ApiStatusCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_with_entries_is_refused(self, tasks, entry_repo, active_task):
        await entry_repo.insert(TimeEntryRequest(
            task_id=active_task.id, date=datetime.date(2025, 5, 15), hours=Decimal("2"), description="Work"
        ))

        response = await tasks.delete_task(active_task.id)

        assert response.status_code == ApiStatusCode.BAD_REQUEST
        assert "1 related time entries" in response.message

    @pytest.mark.asyncio
    async def test_delete_unused_task(self, tasks, active_task):
        response = await tasks.delete_task(active_task.id)

        assert response.status_code == ApiStatusCode.SUCCESS
        assert (await tasks.get_task(active_task.id)).status_code == ApiStatusCode.NOT_FOUND
