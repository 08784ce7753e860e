"""Unit tests for the Recommendation Composer (bodymind/recommendations/composer.py)"""
import pytest
from datetime import datetime, timedelta, timezone

from bodymind.gamification.streak_system import evaluate_all
from bodymind.models.recommendation import HabitStack, RecoverySignal
from bodymind.models.streak import StreakState
from bodymind.recommendations.composer import (
    compose_recommendation,
    max_quick_actions,
    quick_actions,
    recovery_section,
    recovery_zone,
)
from bodymind.recommendations.quotes import daily_quote


# ============================================================================
# Recovery Tests
# ============================================================================

@pytest.mark.parametrize("score,zone", [
    (100, "green"),
    (67, "green"),
    (66.9, "yellow"),
    (34, "yellow"),
    (33, "red"),
    (0, "red"),
])
def test_recovery_zone_from_score(score, zone):
    """Test zone thresholds"""
    assert recovery_zone(score) == zone


def test_recovery_section_explicit_zone_wins():
    """Test a supplied zone overrides the score"""
    section = recovery_section(RecoverySignal(score=90, zone="red"))

    assert section.zone == "red"
    assert section.suggested_activities == ["meditation", "reading", "sleep"]


def test_recovery_section_derived_zone():
    """Test zone is derived when only a score is given"""
    section = recovery_section(RecoverySignal(score=70))

    assert section.zone == "green"
    assert section.suggestion == "Great recovery! Push yourself today."


def test_recovery_section_missing_signal():
    """Test no signal means no recovery section"""
    assert recovery_section(None) is None
    assert recovery_section(RecoverySignal()) is None


# ============================================================================
# Quick Action Tests
# ============================================================================

def test_max_quick_actions_by_window():
    """Test action count shrinks with the time left"""
    assert max_quick_actions(6) == 3
    assert max_quick_actions(5.9) == 2
    assert max_quick_actions(2) == 2
    assert max_quick_actions(1.9) == 1
    assert max_quick_actions(0.2) == 1


def test_quick_actions_prioritise_training_and_meditation():
    """Test training and meditation lead the list"""
    actions = quick_actions(None, [], 10)
    assert [a.activity for a in actions] == ["training", "meditation", "reading"]


def test_quick_actions_skip_complete_pillars(record_factory, base_time):
    """Test only incomplete pillars get suggestions"""
    record = record_factory(base_time.date(), body=80, mind=20)

    actions = quick_actions(record, ["meditation"], 3)

    assert [a.activity for a in actions] == ["reading", "learning"]


def test_quick_actions_short_window_only_tiny_actions(record_factory, base_time):
    """Test under an hour only two-minute actions are offered"""
    record = record_factory(base_time.date(), body=80, mind=20)

    assert quick_actions(record, ["meditation", "reading"], 0.5) == []
    assert [a.activity for a in quick_actions(record, ["meditation"], 0.5)] == ["reading"]


def test_quick_actions_all_done(record_factory, base_time):
    """Test nothing to suggest once both pillars are complete"""
    record = record_factory(base_time.date(), body=80, mind=80)
    assert quick_actions(record, [], 12) == []


# ============================================================================
# Bundle Tests
# ============================================================================

def test_compose_only_quote_without_sources(base_time, utc, test_user_id):
    """Test missing upstream data yields None sections"""
    rec = compose_recommendation(test_user_id, base_time, utc)

    assert rec.recovery is None
    assert rec.streak_status is None
    assert rec.next_in_stack is None
    assert rec.quote == daily_quote(test_user_id, base_time.date())


def test_compose_full_bundle(base_time, utc, test_user_id):
    """Test every section is filled when its source is present"""
    yesterday = base_time.date() - timedelta(days=1)
    streaks = evaluate_all(
        {"overall": StreakState(current_length=4, longest_length=4, last_qualifying_date=yesterday)},
        None,
        base_time,
        utc,
    )
    stack = HabitStack(
        user_id=test_user_id,
        name="Morning Momentum",
        activities=["training", "meditation"],
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )

    rec = compose_recommendation(
        test_user_id,
        base_time,
        utc,
        streaks=streaks,
        completed_today=["training"],
        recovery=RecoverySignal(score=40),
        stacks=[stack],
    )

    assert rec.recovery.zone == "yellow"
    assert rec.streak_status.current == 4
    assert rec.streak_status.at_risk is True
    assert rec.streak_status.hours_remaining == 15.0
    assert [a.activity for a in rec.streak_status.quick_actions] == ["meditation", "reading", "nutrition"]
    assert rec.next_in_stack.activity == "meditation"
    assert rec.next_in_stack.after_completing == "training"
