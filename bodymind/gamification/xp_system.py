"""
XP and Leveling System

Manages XP awards and level calculations for companions.

Leveling Curve:
- Advancing from level k to k+1 costs 100 * k XP
- Reaching level n therefore takes 100 * (n-1) * n / 2 XP in total
  (Level 1: 0-99, Level 2: 100-299, Level 3: 300-599, ...)

XP Award Rules:
- Completion without details: 10 XP
- Completion with logged details: 15 XP (flat bonus, not a multiplier)
"""

from typing import Dict
import math
import logging

logger = logging.getLogger(__name__)

BASE_XP = 10
DETAIL_BONUS_XP = 5
XP_PER_LEVEL_MULTIPLIER = 100


def xp_for_completion(has_detail: bool) -> int:
    """XP earned for one completion"""
    return BASE_XP + DETAIL_BONUS_XP if has_detail else BASE_XP


def xp_for_next_level(level: int) -> int:
    """XP needed to advance from `level` to `level + 1`"""
    return XP_PER_LEVEL_MULTIPLIER * level


def total_xp_for_level(level: int) -> int:
    """Cumulative XP required to reach `level`"""
    if level <= 1:
        return 0
    return XP_PER_LEVEL_MULTIPLIER * (level - 1) * level // 2


def level_for(total_xp: int) -> int:
    """
    Largest level whose cumulative requirement is <= total_xp

    Solves 100 * (n-1) * n / 2 <= xp for n in closed form, so the cost is
    constant no matter how much XP has been accumulated.

    Raises:
        ValueError: If total_xp is negative
    """
    if total_xp < 0:
        raise ValueError(f"XP cannot be negative: {total_xp}")

    # (n-1)n <= 2xp/100  =>  n <= (1 + sqrt(1 + 8xp/100)) / 2
    # isqrt keeps this exact for arbitrarily large integers.
    triangular = total_xp // XP_PER_LEVEL_MULTIPLIER
    level = (1 + math.isqrt(1 + 8 * triangular)) // 2

    # Correct for rounding at the boundary
    while total_xp_for_level(level + 1) <= total_xp:
        level += 1
    while level > 1 and total_xp_for_level(level) > total_xp:
        level -= 1

    return max(level, 1)


def level_progress(total_xp: int) -> Dict[str, int]:
    """
    Calculate level and progress inside it from total XP

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int
        }
    """
    level = level_for(total_xp)
    level_floor = total_xp_for_level(level)
    next_level_total = total_xp_for_level(level + 1)

    return {
        "current_level": level,
        "xp_in_current_level": total_xp - level_floor,
        "xp_to_next_level": next_level_total - total_xp,
        "total_xp_for_next_level": next_level_total,
    }
