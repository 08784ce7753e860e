"""
Streak achievements and ember intensity

Milestones unlock once per user and are never revoked, even when the streak
that earned them is later reversed.
"""

from typing import Dict, Iterable, List
import logging

logger = logging.getLogger(__name__)

STREAK_MILESTONES = (3, 7, 14, 30, 60, 100, 365)

ACHIEVEMENT_DEFINITIONS: Dict[str, Dict[str, str]] = {
    "streak_3": {"title": "Getting Started", "description": "3 day streak", "icon": "flame"},
    "streak_7": {"title": "One Week Strong", "description": "7 day streak", "icon": "fire"},
    "streak_14": {"title": "Two Weeks In", "description": "14 day streak", "icon": "fire-plus"},
    "streak_30": {"title": "Monthly Master", "description": "30 day streak", "icon": "medal"},
    "streak_60": {"title": "Consistency King", "description": "60 day streak", "icon": "crown"},
    "streak_100": {"title": "Century Club", "description": "100 day streak", "icon": "trophy"},
    "streak_365": {"title": "Year of Excellence", "description": "365 day streak", "icon": "star"},
    "perfect_balance": {"title": "Perfect Balance", "description": "Body & Mind both at 100", "icon": "yin-yang"},
}


def milestones_for(streak_length: int) -> List[str]:
    """All streak achievement types earned by a streak of this length"""
    return [f"streak_{m}" for m in STREAK_MILESTONES if streak_length >= m]


def new_achievements(
    streak_length: int,
    body_score: int,
    mind_score: int,
    already_unlocked: Iterable[str],
) -> List[str]:
    """
    Achievement types newly earned by the latest streak and scores

    Args:
        streak_length: Current overall streak length
        body_score: Body score of the day just evaluated
        mind_score: Mind score of the day just evaluated
        already_unlocked: Types the user already holds

    Returns:
        Types to unlock, in milestone order
    """
    held = set(already_unlocked)
    earned = milestones_for(streak_length)
    if body_score == 100 and mind_score == 100:
        earned.append("perfect_balance")

    unlocked = [a for a in earned if a not in held]
    if unlocked:
        logger.info(f"New achievements: {', '.join(unlocked)}")
    return unlocked


def ember_intensity(days: int) -> Dict[str, object]:
    """Visual intensity of the streak flame for a streak length"""
    if days >= 14:
        return {"level": "golden", "has_particles": True}
    if days >= 7:
        return {"level": "bright", "has_particles": False}
    if days >= 4:
        return {"level": "steady", "has_particles": False}
    return {"level": "dim", "has_particles": False}
