"""Global test fixtures and utilities for bodymind tests"""
import pytest
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from bodymind.db.memory_store import InMemoryStore
from bodymind.models.companion import Companion
from bodymind.models.completion import CompletionEvent
from bodymind.models.score import DailyScoreRecord, SubScores
from bodymind.scoring.weights import WeightConfigManager
from bodymind.services.completion_service import CompletionService


# ============================================================================
# Time Fixtures
# ============================================================================

@pytest.fixture
def utc():
    return ZoneInfo("UTC")


@pytest.fixture
def stockholm():
    return ZoneInfo("Europe/Stockholm")


@pytest.fixture
def base_time():
    """Fixed reference instant: Wednesday 2025-01-15 09:00 UTC"""
    return datetime(2025, 1, 15, 9, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user-123"


# ============================================================================
# Store & Service Fixtures
# ============================================================================

@pytest.fixture
def store():
    """Fresh in-memory snapshot store"""
    return InMemoryStore()


@pytest.fixture
def weight_manager(store):
    return WeightConfigManager(store)


@pytest.fixture
def service(store, weight_manager):
    """CompletionService with the default threshold (50) and caps (100)"""
    return CompletionService(store, weight_manager, caps={
        "training": 100,
        "sleep": 100,
        "nutrition": 100,
        "meditation": 100,
        "reading": 100,
        "learning": 100,
    }, threshold=50)


# ============================================================================
# Model Factories
# ============================================================================

@pytest.fixture
def companion_factory(test_user_id, base_time):
    """Factory for companions with custom progression state"""
    def _create(category="fitness", experience=0, health=100, last_interaction=None, **kwargs):
        companion = Companion.new(test_user_id, category, last_interaction or base_time)
        from bodymind.gamification.xp_system import level_for
        from bodymind.gamification.evolution import stage_for
        level = level_for(experience)
        return companion.model_copy(update={
            "experience": experience,
            "level": level,
            "evolution_stage": stage_for(level),
            "health": health,
            **kwargs,
        })

    return _create


@pytest.fixture
def event_factory(test_user_id, base_time):
    """Factory for completion events on a given local date"""
    counter = {"n": 0}

    def _create(sub_category="training", points=50, day=None, details=None, **kwargs):
        counter["n"] += 1
        day = day or base_time.date()
        timestamp = kwargs.pop(
            "timestamp",
            datetime(day.year, day.month, day.day, 8, 0, tzinfo=timezone.utc) + timedelta(minutes=counter["n"]),
        )
        return CompletionEvent(
            user_id=kwargs.pop("user_id", test_user_id),
            habit_id=kwargs.pop("habit_id", f"habit-{counter['n']}"),
            sub_category=sub_category,
            points=points,
            timestamp=timestamp,
            local_date=day,
            details=details,
            **kwargs,
        )

    return _create


@pytest.fixture
def record_factory(test_user_id):
    """Factory for daily score records with chosen pillar scores"""
    def _create(day, body=0, mind=0, threshold=50):
        return DailyScoreRecord(
            user_id=test_user_id,
            day=day,
            body_score=body,
            mind_score=mind,
            body_complete=body >= threshold,
            mind_complete=mind >= threshold,
            balance_index=(body + mind) // 2,
            sub_scores=SubScores(),
        )

    return _create


@pytest.fixture
def start_day():
    return date(2025, 1, 1)
