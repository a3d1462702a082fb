"""
Task Service - plain CRUD over work tasks.

Task names are unique within a project. Deleting a task is refused while
time entries still reference it.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from timeledger.domain.errors import (
    DuplicateError, HasDependentsError, InvalidInputError, LedgerError, NotFoundError
)
from timeledger.domain.models import WorkTask
from timeledger.domain.responses import ApiResponse, ApiStatusCode
from timeledger.infra.base import LedgerStore
from timeledger.infra.repository import ProjectRepository, TimeEntryRepository, WorkTaskRepository
from timeledger.services.envelope import error_response, invalid_input

logger = logging.getLogger(__name__)


class TaskService:

    def __init__(self, task_repo: Optional[WorkTaskRepository] = None,
                 project_repo: Optional[ProjectRepository] = None,
                 entry_store: Optional[LedgerStore] = None):
        self.task_repo = task_repo or WorkTaskRepository()
        self.project_repo = project_repo or ProjectRepository()
        self.entry_store = entry_store or TimeEntryRepository()

    async def _require(self, task_id: int) -> WorkTask:
        task = await self.task_repo.get_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def _check_references(self, task: WorkTask, exclude_id: Optional[int] = None) -> None:
        if await self.project_repo.get_by_id(task.project_id) is None:
            raise InvalidInputError(f"Project with ID {task.project_id} does not exist", field="project_id")
        if await self.task_repo.get_by_name(task.name, task.project_id, exclude_id=exclude_id):
            raise DuplicateError(f"Task named '{task.name}' already exists in this project")

    async def get_all_tasks(self) -> ApiResponse[List[WorkTask]]:
        try:
            logger.info("Listing all tasks")
            tasks = await self.task_repo.get_all()
            logger.info(f"Retrieved {len(tasks)} tasks")
            return ApiResponse.success(tasks, f"Retrieved {len(tasks)} tasks")
        except LedgerError as e:
            return error_response(e, "listing tasks", logger)

    async def get_active_tasks(self) -> ApiResponse[List[WorkTask]]:
        try:
            logger.info("Listing active tasks")
            tasks = await self.task_repo.get_all_active()
            logger.info(f"Retrieved {len(tasks)} active tasks")
            return ApiResponse.success(tasks, f"Retrieved {len(tasks)} active tasks")
        except LedgerError as e:
            return error_response(e, "listing active tasks", logger)

    async def get_task(self, task_id: int) -> ApiResponse[WorkTask]:
        try:
            logger.info(f"Fetching task {task_id}")
            task = await self._require(task_id)
            return ApiResponse.success(task, "Task retrieved")
        except LedgerError as e:
            return error_response(e, f"fetching task {task_id}", logger)

    async def create_task(self, name: str, project_id: int, is_active: bool = True) -> ApiResponse[WorkTask]:
        try:
            logger.info(f"Creating task {name!r} in project {project_id}")
            task = WorkTask(name=name, project_id=project_id, is_active=is_active)
            await self._check_references(task)
            created = await self.task_repo.create(task)
            logger.info(f"Task created with ID {created.id}")
            return ApiResponse.success(created, "Task created", ApiStatusCode.CREATED)
        except ValidationError as e:
            return error_response(invalid_input(e), "creating a task", logger)
        except LedgerError as e:
            return error_response(e, "creating a task", logger)

    async def update_task(self, task_id: int, name: str, project_id: int,
                          is_active: bool) -> ApiResponse[WorkTask]:
        """Update a task. Deactivating it does not touch its existing time entries."""
        try:
            logger.info(f"Updating task {task_id}")
            task = WorkTask(id=task_id, name=name, project_id=project_id, is_active=is_active)
            await self._require(task_id)
            await self._check_references(task, exclude_id=task_id)
            updated = await self.task_repo.update(task)
            logger.info(f"Task {task_id} updated")
            return ApiResponse.success(updated, "Task updated")
        except ValidationError as e:
            return error_response(invalid_input(e), f"updating task {task_id}", logger)
        except LedgerError as e:
            return error_response(e, f"updating task {task_id}", logger)

    async def delete_task(self, task_id: int) -> ApiResponse[bool]:
        try:
            logger.info(f"Deleting task {task_id}")
            task = await self._require(task_id)
            entry_count = await self.entry_store.count_by_task(task_id)
            if entry_count:
                raise HasDependentsError(
                    f"Cannot delete task '{task.name}': it has {entry_count} related time entries",
                    entry_count
                )
            await self.task_repo.delete(task_id)
            logger.info(f"Task {task_id} deleted")
            return ApiResponse.success(True, "Task deleted")
        except LedgerError as e:
            return error_response(e, f"deleting task {task_id}", logger)
