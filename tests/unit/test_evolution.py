"""Unit tests for evolution stages (bodymind/gamification/evolution.py)"""
import pytest

from bodymind.gamification.evolution import stage_for, stage_name, evolved


@pytest.mark.parametrize("level,stage", [
    (1, 1),
    (9, 1),
    (10, 2),
    (24, 2),
    (25, 3),
    (49, 3),
    (50, 4),
    (500, 4),
])
def test_stage_for_level_bands(level, stage):
    """Test each level band maps to its stage"""
    assert stage_for(level) == stage


def test_stage_names():
    """Test display names for the four stages"""
    assert [stage_name(s) for s in (1, 2, 3, 4)] == ["Baby", "Teen", "Adult", "Legendary"]


@pytest.mark.parametrize("stage", [0, 5, -1])
def test_stage_name_unknown(stage):
    """Test stages outside 1-4 read as Unknown"""
    assert stage_name(stage) == "Unknown"


def test_evolved_when_crossing_band():
    """Test evolution is detected only when the stage changes"""
    assert evolved(9, 10) is True
    assert evolved(8, 9) is False
    assert evolved(24, 50) is True
    assert evolved(10, 9) is False
