"""Shared fixtures for engine integration tests"""
import pytest
from datetime import date, timedelta

from tests.integration.engine_helpers import FULL_DAY, at


@pytest.fixture
def complete_day(service, test_user_id):
    """Record completions that qualify body and mind on a day, then drain recomputes"""
    async def _complete(day: date, user_id: str = None):
        results = []
        for offset, (habit_id, sub_category, points) in enumerate(FULL_DAY):
            results.append(await service.record_completion(
                user_id=user_id or test_user_id,
                habit_id=habit_id,
                sub_category=sub_category,
                points=points,
                timestamp=at(day) + timedelta(minutes=offset),
            ))
        await service.dispatcher.drain()
        return results

    return _complete
