"""
Project Service - plain CRUD over projects.

Deleting a project is refused while tasks still belong to it.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from timeledger.domain.errors import DuplicateError, HasDependentsError, LedgerError, NotFoundError
from timeledger.domain.models import Project
from timeledger.domain.responses import ApiResponse, ApiStatusCode
from timeledger.infra.repository import ProjectRepository
from timeledger.services.envelope import error_response, invalid_input

logger = logging.getLogger(__name__)


class ProjectService:

    def __init__(self, project_repo: Optional[ProjectRepository] = None):
        self.project_repo = project_repo or ProjectRepository()

    async def _require(self, project_id: int) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    async def _ensure_unique_code(self, code: str, exclude_id: Optional[int] = None) -> None:
        if await self.project_repo.get_by_code(code, exclude_id=exclude_id):
            raise DuplicateError(f"Project with code '{code}' already exists")

    async def get_all_projects(self) -> ApiResponse[List[Project]]:
        try:
            logger.info("Listing all projects")
            projects = await self.project_repo.get_all()
            logger.info(f"Retrieved {len(projects)} projects")
            return ApiResponse.success(projects, f"Retrieved {len(projects)} projects")
        except LedgerError as e:
            return error_response(e, "listing projects", logger)

    async def get_project(self, project_id: int) -> ApiResponse[Project]:
        try:
            logger.info(f"Fetching project {project_id}")
            project = await self._require(project_id)
            return ApiResponse.success(project, "Project retrieved")
        except LedgerError as e:
            return error_response(e, f"fetching project {project_id}", logger)

    async def create_project(self, code: str, name: str, is_active: bool = True) -> ApiResponse[Project]:
        try:
            logger.info(f"Creating project {code!r} ({name})")
            project = Project(code=code, name=name, is_active=is_active)
            await self._ensure_unique_code(project.code)
            created = await self.project_repo.create(project)
            logger.info(f"Project created with ID {created.id}")
            return ApiResponse.success(created, "Project created", ApiStatusCode.CREATED)
        except ValidationError as e:
            return error_response(invalid_input(e), "creating a project", logger)
        except LedgerError as e:
            return error_response(e, "creating a project", logger)

    async def update_project(self, project_id: int, code: str, name: str,
                             is_active: bool) -> ApiResponse[Project]:
        try:
            logger.info(f"Updating project {project_id}")
            project = Project(id=project_id, code=code, name=name, is_active=is_active)
            await self._require(project_id)
            await self._ensure_unique_code(project.code, exclude_id=project_id)
            updated = await self.project_repo.update(project)
            logger.info(f"Project {project_id} updated")
            return ApiResponse.success(updated, "Project updated")
        except ValidationError as e:
            return error_response(invalid_input(e), f"updating project {project_id}", logger)
        except LedgerError as e:
            return error_response(e, f"updating project {project_id}", logger)

    async def delete_project(self, project_id: int) -> ApiResponse[bool]:
        try:
            logger.info(f"Deleting project {project_id}")
            project = await self._require(project_id)
            task_count = await self.project_repo.count_tasks(project_id)
            if task_count:
                raise HasDependentsError(
                    f"Cannot delete project '{project.name}': it has {task_count} related tasks",
                    task_count
                )
            await self.project_repo.delete(project_id)
            logger.info(f"Project {project_id} deleted")
            return ApiResponse.success(True, "Project deleted")
        except LedgerError as e:
            return error_response(e, f"deleting project {project_id}", logger)
