"""
Companion health ("vitality") model

Implements the "never miss twice" rule:
- Interaction today or yesterday: no decay (one-day grace window)
- Two days since last interaction: small flat penalty (10)
- Every further day: 30 more on top

Completions recover a flat 15 health, capped at 100.
"""

from datetime import datetime, timedelta
from typing import Literal
import logging

from bodymind.models.companion import Companion, MAX_HEALTH, MIN_HEALTH

logger = logging.getLogger(__name__)

HEALTH_DECAY_SINGLE_MISS = 10
HEALTH_DECAY_CONSECUTIVE_MISS = 30
HEALTH_RECOVERY_PER_COMPLETION = 15

Mood = Literal["happy", "neutral", "tired", "sad"]

_ONE_DAY = timedelta(days=1)


def days_between(a: datetime, b: datetime) -> int:
    """Number of whole 24-hour periods between two instants, in either order"""
    return abs(b - a) // _ONE_DAY


def decay_penalty(days: int) -> int:
    """Health lost after `days` full days without interaction"""
    if days <= 1:
        return 0
    return HEALTH_DECAY_SINGLE_MISS + (days - 2) * HEALTH_DECAY_CONSECUTIVE_MISS


def decay(current_health: int, last_interaction: datetime, now: datetime) -> int:
    """Health after time decay since the last interaction, floored at 0"""
    penalty = decay_penalty(days_between(last_interaction, now))
    return max(MIN_HEALTH, current_health - penalty)


def recover(health: int) -> int:
    """Health after one qualifying completion"""
    return min(MAX_HEALTH, health + HEALTH_RECOVERY_PER_COMPLETION)


def mood_for(health: int) -> Mood:
    if health >= 80:
        return "happy"
    if health >= 50:
        return "neutral"
    if health >= 30:
        return "tired"
    return "sad"


def needs_attention(health: int) -> bool:
    return health < 50


def current_health(companion: Companion, now: datetime) -> int:
    """
    Decayed health of a companion at `now`

    The stored health is the value as of the last interaction, so this is a
    pure projection and can be evaluated any number of times.
    """
    return decay(companion.health, companion.last_interaction, now)
