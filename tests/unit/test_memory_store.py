"""Unit tests for the in-memory snapshot store (bodymind/db/memory_store.py)"""
import pytest
from datetime import date, timedelta

from bodymind.db.memory_store import InMemoryStore
from bodymind.models.streak import StreakState


@pytest.mark.asyncio
async def test_events_scoped_to_user(store, event_factory):
    """Test users never see each other's events"""
    mine = event_factory("training")
    theirs = event_factory("training", user_id="other")
    await store.add_event(mine)
    await store.add_event(theirs)

    assert await store.get_event(mine.user_id, theirs.id) is None
    assert await store.delete_event(mine.user_id, theirs.id) is False
    assert [e.id for e in await store.get_events(mine.user_id)] == [mine.id]


@pytest.mark.asyncio
async def test_find_event_by_habit_and_day(store, event_factory, base_time):
    """Test duplicate lookup matches habit and local day"""
    event = event_factory("reading", habit_id="book")
    await store.add_event(event)

    assert await store.find_event(event.user_id, "book", base_time.date()) == event
    assert await store.find_event(event.user_id, "book", base_time.date() + timedelta(days=1)) is None


@pytest.mark.asyncio
async def test_daily_records_range(store, record_factory, start_day, test_user_id):
    """Test records come back sorted and filtered by range"""
    for offset in (3, 0, 1):
        await store.save_daily_record(record_factory(start_day + timedelta(days=offset), body=10))

    records = await store.get_daily_records(test_user_id, start_day, start_day + timedelta(days=1))

    assert [r.day for r in records] == [start_day, start_day + timedelta(days=1)]


@pytest.mark.asyncio
async def test_streaks_and_achievements(store, test_user_id):
    """Test streak and achievement round trip"""
    await store.save_streak(test_user_id, "body", StreakState(current_length=2, longest_length=2, last_qualifying_date=date(2025, 1, 2)))
    await store.add_achievements(test_user_id, ["streak_3"])
    await store.add_achievements(test_user_id, ["streak_3", "streak_7"])

    assert (await store.get_streaks(test_user_id))["body"].current_length == 2
    assert await store.get_achievements(test_user_id) == {"streak_3", "streak_7"}


@pytest.mark.asyncio
async def test_fresh_store_is_empty():
    """Test missing state reads as None or empty"""
    store = InMemoryStore()

    assert await store.get_companion("u", "fitness") is None
    assert await store.get_weights("u") is None
    assert await store.get_timezone("u") is None
    assert await store.get_streaks("u") == {}
    assert await store.get_stacks("u") == []
