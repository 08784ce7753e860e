"""
Recommendation Composer

Assembles the daily recommendation bundle from state the engine already
holds plus optional external signals:

1. Recovery - readiness zone and suggested sub-categories (needs a signal)
2. Streak status - overall streak, at-risk countdown, quick actions sized to
   the time left today
3. Next in stack - the next pending step of the first active habit stack
4. Quote - deterministic per user and day

Composition is pure. A missing upstream source leaves its section as None;
the quote is always present.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo
import logging

from bodymind.models.completion import PILLARS, PILLAR_SUB_CATEGORIES
from bodymind.models.recommendation import (
    HabitStack,
    QuickAction,
    Recommendation,
    RecoverySection,
    RecoverySignal,
    StreakSection,
)
from bodymind.models.score import DailyScoreRecord
from bodymind.models.streak import AllStreaks
from bodymind.recommendations.habit_stacks import next_in_stack
from bodymind.recommendations.quotes import CatalogQuote, QUOTES, daily_quote
from bodymind.utils.datetime_helpers import local_date

logger = logging.getLogger(__name__)

GREEN_ZONE_MIN = 67
YELLOW_ZONE_MIN = 34

RECOVERY_SUGGESTIONS: Dict[str, Dict] = {
    "green": {
        "suggestion": "Great recovery! Push yourself today.",
        "activities": ["training", "learning"],
    },
    "yellow": {
        "suggestion": "Moderate recovery. Balance intensity.",
        "activities": ["training", "meditation", "reading"],
    },
    "red": {
        "suggestion": "Rest day recommended. Focus on Mind.",
        "activities": ["meditation", "reading", "sleep"],
    },
}

QUICK_ACTIONS: Dict[str, QuickAction] = {
    "training": QuickAction(activity="training", label="Quick stretch", duration_minutes=2),
    "meditation": QuickAction(activity="meditation", label="Breathe", duration_minutes=2),
    "reading": QuickAction(activity="reading", label="Read 1 page", duration_minutes=2),
    "nutrition": QuickAction(activity="nutrition", label="Log a meal", duration_minutes=1),
    "learning": QuickAction(activity="learning", label="Quick lesson", duration_minutes=5),
    "sleep": QuickAction(activity="sleep", label="Log sleep", duration_minutes=1),
}

# Training and meditation move each pillar the most for the least effort
QUICK_ACTION_PRIORITY = ("training", "meditation", "reading", "nutrition", "learning", "sleep")

SHORT_WINDOW_MAX_MINUTES = 2


# ============================================================================
# Recovery
# ============================================================================

def recovery_zone(score: float) -> str:
    if score >= GREEN_ZONE_MIN:
        return "green"
    if score >= YELLOW_ZONE_MIN:
        return "yellow"
    return "red"


def recovery_section(signal: Optional[RecoverySignal]) -> Optional[RecoverySection]:
    """Recovery section; an explicit zone wins over one derived from the score"""
    if signal is None or (signal.zone is None and signal.score is None):
        return None

    zone = signal.zone or recovery_zone(signal.score)
    suggestion = RECOVERY_SUGGESTIONS[zone]
    return RecoverySection(
        score=signal.score,
        zone=zone,
        suggestion=suggestion["suggestion"],
        suggested_activities=list(suggestion["activities"]),
    )


# ============================================================================
# Streak status
# ============================================================================

def max_quick_actions(hours_remaining: float) -> int:
    if hours_remaining >= 6:
        return 3
    if hours_remaining >= 2:
        return 2
    return 1


def quick_actions(
    today_record: Optional[DailyScoreRecord],
    completed_today: Iterable[str],
    hours_remaining: float,
) -> List[QuickAction]:
    """
    Small actions toward the pillars not yet complete today

    Sub-categories already done today are skipped. With under an hour left
    only actions of two minutes or less are offered.
    """
    done = set(completed_today)
    open_pillars = [
        p for p in PILLARS
        if today_record is None or not today_record.pillar_complete(p)
    ]
    candidates = {sub for p in open_pillars for sub in PILLAR_SUB_CATEGORIES[p]} - done

    actions = [QUICK_ACTIONS[sub] for sub in QUICK_ACTION_PRIORITY if sub in candidates]
    if hours_remaining < 1:
        actions = [a for a in actions if a.duration_minutes <= SHORT_WINDOW_MAX_MINUTES]

    return actions[:max_quick_actions(hours_remaining)]


def streak_section(
    streaks: Optional[AllStreaks],
    today_record: Optional[DailyScoreRecord],
    completed_today: Iterable[str],
) -> Optional[StreakSection]:
    if streaks is None:
        return None

    overall = streaks.overall
    return StreakSection(
        current=overall.current_length,
        at_risk=overall.at_risk,
        hours_remaining=overall.hours_remaining,
        quick_actions=quick_actions(today_record, completed_today, overall.hours_remaining),
    )


# ============================================================================
# Bundle
# ============================================================================

def compose_recommendation(
    user_id: str,
    now: datetime,
    tz: ZoneInfo,
    streaks: Optional[AllStreaks] = None,
    today_record: Optional[DailyScoreRecord] = None,
    completed_today: Iterable[str] = (),
    recovery: Optional[RecoverySignal] = None,
    stacks: Optional[Iterable[HabitStack]] = None,
    quotes: Sequence[CatalogQuote] = QUOTES,
) -> Recommendation:
    """
    Build the recommendation bundle for a user at `now`

    Args:
        user_id: User the bundle is for
        now: Current instant
        tz: User's timezone (defines "today")
        streaks: Evaluated streaks, or None if unavailable
        today_record: Today's score record, or None if nothing logged
        completed_today: Sub-categories completed today
        recovery: External readiness signal, if any
        stacks: The user's habit stacks, if any
        quotes: Quote catalog

    Returns:
        Recommendation with None for every section lacking its source
    """
    completed = list(completed_today)
    today = local_date(now, tz)

    recommendation = Recommendation(
        recovery=recovery_section(recovery),
        streak_status=streak_section(streaks, today_record, completed),
        next_in_stack=next_in_stack(stacks, completed) if stacks else None,
        quote=daily_quote(user_id, today, quotes),
    )

    logger.debug(
        f"Composed recommendation for user {user_id} on {today}: "
        f"recovery={recommendation.recovery is not None}, "
        f"streak={recommendation.streak_status is not None}, "
        f"stack={recommendation.next_in_stack is not None}"
    )
    return recommendation
