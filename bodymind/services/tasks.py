"""
Background recompute tasks

Completions and deletions do not recompute scores and streaks inline. They
dispatch a RecomputeTask that runs in the background (asyncio.create_task),
so the caller gets the companion update back immediately.

Every task recomputes from stored inputs, so delivering the same task twice,
or two tasks for the same day concurrently, converges on the same state.
Tests and the replay CLI call drain() to wait for outstanding work.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Awaitable, Callable, List, Set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecomputeTask:
    """Recompute one user's daily score for `day`, then their streaks"""
    user_id: str
    day: date
    reason: str = "completion"


TaskHandler = Callable[[RecomputeTask], Awaitable[None]]


class TaskDispatcher:
    """Fire-and-forget runner for RecomputeTasks"""

    def __init__(self, handler: TaskHandler):
        self.handler = handler
        self._pending: Set[asyncio.Task] = set()
        self.failures: List[RecomputeTask] = []

    def dispatch(self, task: RecomputeTask) -> asyncio.Task:
        """Schedule a task on the running loop and return immediately"""
        running = asyncio.create_task(self._run(task))
        self._pending.add(running)
        running.add_done_callback(self._pending.discard)
        logger.debug(f"Dispatched recompute for user {task.user_id} on {task.day} ({task.reason})")
        return running

    async def _run(self, task: RecomputeTask) -> None:
        try:
            await self.handler(task)
        except Exception as e:
            # Background work; the failure is recorded and the next task for
            # the same day recomputes from scratch anyway
            self.failures.append(task)
            logger.error(
                f"Recompute failed for user {task.user_id} on {task.day}: {e}",
                exc_info=True,
            )

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait until every dispatched task (including ones they spawn) is done"""
        while self._pending:
            await asyncio.gather(*list(self._pending))
