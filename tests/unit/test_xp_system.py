"""Unit tests for XP and Leveling System (bodymind/gamification/xp_system.py)"""
import pytest

from bodymind.gamification.xp_system import (
    xp_for_completion,
    xp_for_next_level,
    total_xp_for_level,
    level_for,
    level_progress,
)


# ============================================================================
# XP Award Tests
# ============================================================================

def test_xp_for_completion_without_details():
    """Test plain completion earns base XP"""
    assert xp_for_completion(False) == 10


def test_xp_for_completion_with_details():
    """Test logged details add a flat 5 XP"""
    assert xp_for_completion(True) == 15


# ============================================================================
# Level Curve Tests
# ============================================================================

def test_xp_for_next_level():
    """Test cost of each level grows linearly"""
    assert xp_for_next_level(1) == 100
    assert xp_for_next_level(2) == 200
    assert xp_for_next_level(10) == 1000


def test_total_xp_for_level_low_levels():
    """Test level 1 and below need no XP"""
    assert total_xp_for_level(0) == 0
    assert total_xp_for_level(1) == 0
    assert total_xp_for_level(-3) == 0


def test_total_xp_for_level_triangular():
    """Test cumulative requirement follows 100 * (n-1) * n / 2"""
    assert total_xp_for_level(2) == 100
    assert total_xp_for_level(3) == 300
    assert total_xp_for_level(4) == 600
    assert total_xp_for_level(5) == 1000
    assert total_xp_for_level(50) == 122500


# ============================================================================
# Level Calculation Tests
# ============================================================================

@pytest.mark.parametrize("xp,expected", [
    (0, 1),
    (99, 1),
    (100, 2),
    (299, 2),
    (300, 3),
    (599, 3),
    (600, 4),
    (9099, 13),
    (9100, 14),
    (10000, 14),
    (122499, 49),
    (122500, 50),
])
def test_level_for_boundaries(xp, expected):
    """Test level changes exactly at the cumulative thresholds"""
    assert level_for(xp) == expected


def test_level_for_matches_definition():
    """Test level is the largest n with total_xp_for_level(n) <= xp"""
    for xp in range(0, 60000, 37):
        level = level_for(xp)
        assert total_xp_for_level(level) <= xp
        assert total_xp_for_level(level + 1) > xp


def test_level_for_huge_values():
    """Test closed form stays exact for very large XP"""
    n = 10 ** 9
    threshold = total_xp_for_level(n)

    assert level_for(threshold) == n
    assert level_for(threshold - 1) == n - 1
    assert level_for(threshold + xp_for_next_level(n) - 1) == n


def test_level_for_negative_raises():
    """Test negative XP is rejected, not clamped"""
    with pytest.raises(ValueError):
        level_for(-1)


# ============================================================================
# Level Progress Tests
# ============================================================================

def test_level_progress_zero():
    """Test progress for a fresh companion"""
    result = level_progress(0)

    assert result["current_level"] == 1
    assert result["xp_in_current_level"] == 0
    assert result["xp_to_next_level"] == 100
    assert result["total_xp_for_next_level"] == 100


def test_level_progress_mid_level():
    """Test progress partway through level 2"""
    result = level_progress(150)

    assert result["current_level"] == 2
    assert result["xp_in_current_level"] == 50
    assert result["xp_to_next_level"] == 150
    assert result["total_xp_for_next_level"] == 300


def test_level_progress_exact_threshold():
    """Test progress resets at an exact level threshold"""
    result = level_progress(300)

    assert result["current_level"] == 3
    assert result["xp_in_current_level"] == 0
    assert result["xp_to_next_level"] == 300
