"""
Tests for the Task Gate.
"""

import pytest

from timeledger.domain.errors import InactiveTaskError, NotFoundError
from timeledger.services.task_gate import TaskGate


@pytest.mark.asyncio
async def test_active_task(memory_tasks):
    status = await TaskGate(memory_tasks).check_active(1)

    assert status.active
    assert status.task_name == "Development"


@pytest.mark.asyncio
async def test_inactive_task_is_reported(memory_tasks):
    status = await TaskGate(memory_tasks).check_active(2)

    assert not status.active
    assert status.task_name == "Archived Work"


@pytest.mark.asyncio
async def test_missing_task(memory_tasks):
    with pytest.raises(NotFoundError) as exc_info:
        await TaskGate(memory_tasks).check_active(99)

    assert exc_info.value.entity == "Task"
    assert exc_info.value.entity_id == 99


@pytest.mark.asyncio
async def test_require_active_returns_task(memory_tasks):
    task = await TaskGate(memory_tasks).require_active(1)

    assert task.id == 1
    assert task.project.code == "INT"


@pytest.mark.asyncio
async def test_require_active_rejects_inactive(memory_tasks):
    with pytest.raises(InactiveTaskError) as exc_info:
        await TaskGate(memory_tasks).require_active(2)

    assert exc_info.value.task_id == 2


@pytest.mark.asyncio
async def test_reactivated_task_passes(memory_tasks):
    gate = TaskGate(memory_tasks)
    memory_tasks.set_active(2, True)

    assert (await gate.require_active(2)).is_active


@pytest.mark.asyncio
async def test_gate_reads_database(task_repo, active_task, inactive_task):
    gate = TaskGate(task_repo)

    assert (await gate.check_active(active_task.id)).active
    with pytest.raises(InactiveTaskError):
        await gate.require_active(inactive_task.id)
