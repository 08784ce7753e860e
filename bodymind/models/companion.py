"""Companion (habitanimal) models"""
from typing import Literal
from datetime import datetime
from pydantic import BaseModel, Field

CompanionCategory = Literal["fitness", "sleep", "nutrition", "mindfulness", "learning"]

# Default identity for each companion category
COMPANION_DEFAULTS: dict[str, dict[str, str]] = {
    "fitness": {"species": "gorilla", "name": "Guiro"},
    "sleep": {"species": "sloth", "name": "Milo"},
    "nutrition": {"species": "ox", "name": "Greeny"},
    "mindfulness": {"species": "turtle", "name": "Zen"},
    "learning": {"species": "fox", "name": "Finn"},
}

# Which companion a sub-category's completions feed
SUB_CATEGORY_COMPANION: dict[str, str] = {
    "training": "fitness",
    "sleep": "sleep",
    "nutrition": "nutrition",
    "meditation": "mindfulness",
    "reading": "learning",
    "learning": "learning",
}

MAX_HEALTH = 100
MIN_HEALTH = 0


class Companion(BaseModel):
    """
    Persisted companion snapshot

    `health` is the value as of `last_interaction`; time decay is applied at
    read time (see gamification.vitality.current_health).
    """
    user_id: str
    category: CompanionCategory
    species: str
    name: str
    experience: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    health: int = Field(default=MAX_HEALTH, ge=MIN_HEALTH, le=MAX_HEALTH)
    evolution_stage: int = Field(default=1, ge=1)
    last_interaction: datetime

    @classmethod
    def new(cls, user_id: str, category: str, now: datetime) -> "Companion":
        identity = COMPANION_DEFAULTS[category]
        return cls(
            user_id=user_id,
            category=category,
            species=identity["species"],
            name=identity["name"],
            last_interaction=now,
        )


class CompanionView(BaseModel):
    """Read projection of a companion at a given instant"""
    category: CompanionCategory
    species: str
    name: str
    experience: int
    level: int
    xp_in_current_level: int
    xp_to_next_level: int
    health: int
    mood: Literal["happy", "neutral", "tired", "sad"]
    needs_attention: bool
    evolution_stage: int
    stage_name: str
    last_interaction: datetime


class CompanionChange(BaseModel):
    """Before/after state of a companion touched by a completion or reversal"""
    category: CompanionCategory
    previous_experience: int
    new_experience: int
    previous_level: int
    new_level: int
    previous_health: int
    new_health: int
    previous_stage: int
    new_stage: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.previous_level

    @property
    def evolved(self) -> bool:
        return self.new_stage > self.previous_stage
