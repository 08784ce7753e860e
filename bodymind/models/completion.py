"""Completion event models and the pillar/sub-category tables"""
from typing import Optional, Any, Literal
from datetime import datetime, date
from pydantic import BaseModel, Field, field_validator, model_validator
from uuid import uuid4

Pillar = Literal["body", "mind"]

SubCategory = Literal[
    "training",
    "sleep",
    "nutrition",
    "meditation",
    "reading",
    "learning",
]

PILLAR_SUB_CATEGORIES: dict[str, tuple[str, ...]] = {
    "body": ("training", "sleep", "nutrition"),
    "mind": ("meditation", "reading", "learning"),
}

PILLARS: tuple[str, ...] = tuple(PILLAR_SUB_CATEGORIES)

SUB_CATEGORIES: tuple[str, ...] = tuple(
    sub for subs in PILLAR_SUB_CATEGORIES.values() for sub in subs
)

SUB_CATEGORY_PILLAR: dict[str, str] = {
    sub: pillar for pillar, subs in PILLAR_SUB_CATEGORIES.items() for sub in subs
}


class CompletionEvent(BaseModel):
    """
    A single completed activity

    Immutable once created. The applied effects (xp_awarded, health_recovered)
    are recorded so a deletion can reverse exactly what the creation did.
    `applied_at` is when it reached the companion; it differs from
    `timestamp` only for events that arrived after a later interaction.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    habit_id: str
    sub_category: SubCategory
    points: int = Field(ge=0)
    timestamp: datetime
    local_date: date  # calendar day in the user's timezone
    details: Optional[dict[str, Any]] = None
    xp_awarded: int = 0
    health_recovered: int = 0
    applied_at: datetime

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def default_applied_at(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("applied_at") is None:
            data = {**data, "applied_at": data.get("timestamp")}
        return data

    @field_validator("timestamp", "applied_at")
    @classmethod
    def require_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("timestamp must be timezone-aware")
        return v

    @property
    def pillar(self) -> str:
        return SUB_CATEGORY_PILLAR[self.sub_category]

    @property
    def has_details(self) -> bool:
        return bool(self.details)
