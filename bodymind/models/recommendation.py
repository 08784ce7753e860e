"""Recommendation and habit stack models"""
from typing import Optional, Literal
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from uuid import uuid4

from bodymind.models.completion import SubCategory

RecoveryZone = Literal["green", "yellow", "red"]
CueType = Literal["time", "location", "after_activity"]


class RecoverySignal(BaseModel):
    """External readiness input; either field may be missing"""
    score: Optional[float] = Field(None, ge=0, le=100)
    zone: Optional[RecoveryZone] = None


class QuickAction(BaseModel):
    activity: SubCategory
    label: str
    duration_minutes: int


class RecoverySection(BaseModel):
    score: Optional[float]
    zone: RecoveryZone
    suggestion: str
    suggested_activities: list[SubCategory]


class StreakSection(BaseModel):
    current: int
    at_risk: bool
    hours_remaining: float
    quick_actions: list[QuickAction]


class HabitStack(BaseModel):
    """Ordered sequence of sub-categories meant to be done back to back"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    name: str
    description: Optional[str] = None
    activities: list[SubCategory]
    cue_type: Optional[CueType] = None
    cue_value: Optional[str] = None
    is_active: bool = True
    preset_key: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NextInStack(BaseModel):
    stack_id: str
    stack_name: str
    activity: SubCategory
    step: int  # 1-based position in the stack
    after_completing: Optional[SubCategory] = None


class Quote(BaseModel):
    text: str
    author: Optional[str] = None


class Recommendation(BaseModel):
    recovery: Optional[RecoverySection] = None
    streak_status: Optional[StreakSection] = None
    next_in_stack: Optional[NextInStack] = None
    quote: Quote
