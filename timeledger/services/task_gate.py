"""
Task Gate - decides whether a task may receive new time entries.
"""

import logging

from pydantic import BaseModel

from timeledger.domain.errors import InactiveTaskError, NotFoundError
from timeledger.domain.models import WorkTask
from timeledger.infra.base import TaskDirectory

logger = logging.getLogger(__name__)


class TaskStatus(BaseModel):
    """Outcome of a gate lookup"""
    active: bool
    task_name: str
    task: WorkTask


class TaskGate:
    """
    Read-only check of a task's activation state.
    """

    def __init__(self, tasks: TaskDirectory):
        self.tasks = tasks

    async def check_active(self, task_id: int) -> TaskStatus:
        """
        Look up a task and report whether it is active.

        Raises:
            NotFoundError: the task does not exist
        """
        task = await self.tasks.get_by_id(task_id)
        if task is None:
            logger.warning(f"Task {task_id} not found")
            raise NotFoundError("Task", task_id)
        return TaskStatus(active=task.is_active, task_name=task.name, task=task)

    async def require_active(self, task_id: int) -> WorkTask:
        """
        Return the task if it may receive new entries.

        Raises:
            NotFoundError: the task does not exist
            InactiveTaskError: the task exists but is inactive
        """
        status = await self.check_active(task_id)
        if not status.active:
            logger.warning(f"Task {task_id} ('{status.task_name}') is inactive")
            raise InactiveTaskError(task_id, status.task_name)
        return status.task
