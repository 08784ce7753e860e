"""Streak models"""
from typing import Optional, Literal
from datetime import date
from pydantic import BaseModel, Field

StreakDomain = Literal["body", "mind", "overall"]

STREAK_DOMAINS: tuple[str, ...] = ("body", "mind", "overall")


class StreakState(BaseModel):
    """Persisted streak snapshot for one domain"""
    current_length: int = Field(default=0, ge=0)
    longest_length: int = Field(default=0, ge=0)
    last_qualifying_date: Optional[date] = None


class StreakView(BaseModel):
    """Streak as seen at a given instant, with the live at-risk countdown"""
    domain: StreakDomain
    current_length: int
    longest_length: int
    last_qualifying_date: Optional[date]
    at_risk: bool
    hours_remaining: float


class AllStreaks(BaseModel):
    overall: StreakView
    body: StreakView
    mind: StreakView
