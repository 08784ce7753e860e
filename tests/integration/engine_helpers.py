"""Helper utilities for engine integration tests"""
from datetime import date, datetime, timezone


# (habit_id, sub_category, points) that qualify body and mind under balanced weights
FULL_DAY = (
    ("run", "training", 100),
    ("bed", "sleep", 100),
    ("sit", "meditation", 100),
    ("book", "reading", 100),
)


def at(day: date, hour: int = 8, minute: int = 0) -> datetime:
    """UTC instant on a calendar day"""
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)
