"""Unit tests for background recompute tasks (bodymind/services/tasks.py)"""
import asyncio
import pytest
from datetime import date

from bodymind.services.tasks import RecomputeTask, TaskDispatcher


@pytest.mark.asyncio
async def test_dispatch_runs_in_background():
    """Test dispatch returns before the handler runs"""
    seen = []

    async def handler(task):
        seen.append(task)

    dispatcher = TaskDispatcher(handler)
    task = RecomputeTask(user_id="u1", day=date(2025, 1, 1))

    dispatcher.dispatch(task)
    assert seen == []
    assert dispatcher.pending == 1

    await dispatcher.drain()
    assert seen == [task]
    assert dispatcher.pending == 0


@pytest.mark.asyncio
async def test_failed_task_is_recorded():
    """Test a failing handler does not escape the background task"""
    async def handler(task):
        raise RuntimeError("boom")

    dispatcher = TaskDispatcher(handler)
    task = RecomputeTask(user_id="u1", day=date(2025, 1, 1), reason="deletion")

    dispatcher.dispatch(task)
    await dispatcher.drain()

    assert dispatcher.failures == [task]


@pytest.mark.asyncio
async def test_drain_waits_for_spawned_tasks():
    """Test tasks dispatched by other tasks are drained too"""
    seen = []
    dispatcher = None

    async def handler(task):
        await asyncio.sleep(0)
        seen.append(task.reason)
        if task.reason == "completion":
            dispatcher.dispatch(RecomputeTask(user_id=task.user_id, day=task.day, reason="follow-up"))

    dispatcher = TaskDispatcher(handler)
    dispatcher.dispatch(RecomputeTask(user_id="u1", day=date(2025, 1, 1)))
    await dispatcher.drain()

    assert seen == ["completion", "follow-up"]


def test_tasks_are_hashable_values():
    """Test identical tasks compare equal"""
    a = RecomputeTask(user_id="u1", day=date(2025, 1, 1))
    b = RecomputeTask(user_id="u1", day=date(2025, 1, 1))
    assert a == b
    assert len({a, b}) == 1
