"""
Gamification engine

This module implements the progression side of the product:
- XP and leveling (triangular curve, closed-form inverse)
- Evolution stages
- Companion health decay and recovery
- Multi-domain streak tracking (body, mind, overall)
- Streak milestones
"""

from bodymind.gamification.xp_system import (
    xp_for_completion,
    total_xp_for_level,
    xp_for_next_level,
    level_for,
    level_progress,
)
from bodymind.gamification.evolution import stage_for, stage_name
from bodymind.gamification.vitality import (
    days_between,
    decay,
    recover,
    mood_for,
    needs_attention,
    current_health,
)
from bodymind.gamification.streak_system import (
    advance_streak,
    project_streak,
    evaluate_streak,
    evaluate_all,
)

__all__ = [
    "xp_for_completion",
    "total_xp_for_level",
    "xp_for_next_level",
    "level_for",
    "level_progress",
    "stage_for",
    "stage_name",
    "days_between",
    "decay",
    "recover",
    "mood_for",
    "needs_attention",
    "current_health",
    "advance_streak",
    "project_streak",
    "evaluate_streak",
    "evaluate_all",
]
