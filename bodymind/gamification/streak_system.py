"""
Multi-Domain Streak Tracking System

Tracks consecutive qualifying calendar days for three domains:
- body
- mind
- overall (body AND mind qualified on the same day)

A day qualifies for a pillar when that pillar's daily score reaches the
completion threshold, the same threshold behind the daily record's
completion flags.

Two ways to arrive at a StreakState:
- advance_streak(): incremental, for a newly qualifying day
- project_streak(): canonical, rebuilt from the full qualifying-date history

Both must agree for forward-moving histories. Reversals always go through
the canonical path.
"""

from typing import Dict, Iterable, List, Optional
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo
import logging

from bodymind.models.score import DailyScoreRecord
from bodymind.models.streak import StreakState, StreakView, AllStreaks, STREAK_DOMAINS
from bodymind.utils.datetime_helpers import hours_until_end_of_day

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


# ============================================
# Qualification
# ============================================

def record_qualifies(record: Optional[DailyScoreRecord], domain: str) -> bool:
    """Whether a daily record qualifies the given streak domain"""
    if record is None:
        return False
    if domain == "overall":
        return record.body_complete and record.mind_complete
    return record.pillar_complete(domain)


def qualifying_dates(records: Iterable[DailyScoreRecord], domain: str) -> List[date]:
    """Sorted, de-duplicated qualifying dates for a domain"""
    return sorted({r.day for r in records if record_qualifies(r, domain)})


# ============================================
# State transitions
# ============================================

def advance_streak(state: StreakState, qualifying_date: date) -> StreakState:
    """
    Apply one newly qualifying date to a streak

    Logic:
    - Same date as last qualifying date: no change
    - Exactly one day later: extend streak
    - More than one day later: streak broken, restart at 1
    - Earlier than last qualifying date: ignored (backfills use project_streak)
    """
    last = state.last_qualifying_date

    if last is not None and qualifying_date <= last:
        return state

    if last is not None and qualifying_date - last == _ONE_DAY:
        current = state.current_length + 1
    else:
        current = 1

    return StreakState(
        current_length=current,
        longest_length=max(state.longest_length, current),
        last_qualifying_date=qualifying_date,
    )


def project_streak(dates: Iterable[date]) -> StreakState:
    """
    Rebuild streak state from the complete set of qualifying dates

    The current run is the one ending at the latest qualifying date; the
    longest run is the longest anywhere in the history.
    """
    ordered = sorted(set(dates))
    if not ordered:
        return StreakState()

    longest = run = 1
    for previous, current in zip(ordered, ordered[1:]):
        run = run + 1 if current - previous == _ONE_DAY else 1
        longest = max(longest, run)

    return StreakState(
        current_length=run,
        longest_length=longest,
        last_qualifying_date=ordered[-1],
    )


def project_all(records: Iterable[DailyScoreRecord]) -> Dict[str, StreakState]:
    """Canonical streak state for every domain from a user's daily records"""
    records = list(records)
    return {domain: project_streak(qualifying_dates(records, domain)) for domain in STREAK_DOMAINS}


# ============================================
# Read-time evaluation
# ============================================

def evaluate_streak(
    domain: str,
    state: StreakState,
    today_qualifies: bool,
    now: datetime,
    tz: ZoneInfo,
) -> StreakView:
    """
    Live view of a streak at `now` in the user's timezone

    - Current length reads as 0 once the last qualifying date is older than
      yesterday (streak broken)
    - At risk when yesterday qualified but today has not yet
    """
    today = now.astimezone(tz).date()
    yesterday = today - _ONE_DAY
    last = state.last_qualifying_date

    alive = last is not None and last >= yesterday
    current = state.current_length if alive else 0
    at_risk = alive and last == yesterday and not today_qualifies

    return StreakView(
        domain=domain,
        current_length=current,
        longest_length=max(state.longest_length, current),
        last_qualifying_date=last,
        at_risk=at_risk,
        hours_remaining=hours_until_end_of_day(now, tz),
    )


def evaluate_all(
    states: Dict[str, StreakState],
    today_record: Optional[DailyScoreRecord],
    now: datetime,
    tz: ZoneInfo,
) -> AllStreaks:
    """Evaluate body, mind and overall streaks against today's record"""
    views = {
        domain: evaluate_streak(
            domain,
            states.get(domain) or StreakState(),
            record_qualifies(today_record, domain),
            now,
            tz,
        )
        for domain in STREAK_DOMAINS
    }
    return AllStreaks(**views)


def describe_change(domain: str, old: StreakState, new: StreakState) -> str:
    """Human-readable description of a streak transition"""
    if new.current_length == 0:
        return f"{domain.capitalize()} streak cleared."
    if old.last_qualifying_date == new.last_qualifying_date and old.current_length == new.current_length:
        return f"{domain.capitalize()} streak continues! Day {new.current_length} 🔥"
    if new.current_length == 1 and old.current_length > 1:
        return f"{domain.capitalize()} streak reset. Previous: {old.current_length} days. Starting fresh! Day 1 💪"
    if new.current_length == 1:
        return f"{domain.capitalize()} streak started! Day 1 🎉"
    return f"{domain.capitalize()} streak continues! Day {new.current_length} 🔥"


def format_streak_display(streaks: AllStreaks) -> str:
    """
    Format streaks for display

    Args:
        streaks: Evaluated streaks from evaluate_all()

    Returns:
        Formatted string for display
    """
    emoji_map = {
        "overall": "⭐",
        "body": "🏃",
        "mind": "🧘",
    }

    lines = ["🔥 YOUR STREAKS\n"]

    for domain in ("overall", "body", "mind"):
        view: StreakView = getattr(streaks, domain)
        line = f"{emoji_map[domain]} {domain.capitalize()}: {view.current_length} days"
        if view.longest_length > view.current_length:
            line += f" (best: {view.longest_length})"
        if view.at_risk:
            line += f" ⚠️ {view.hours_remaining}h left today"
        lines.append(line)

    return "\n".join(lines)
