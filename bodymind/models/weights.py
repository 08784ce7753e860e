"""Weight configuration models"""
from typing import Literal, Optional
from pydantic import BaseModel

WeightPreset = Literal["balanced", "athlete", "recovery", "knowledge", "custom"]


class BodyWeights(BaseModel):
    training: int
    sleep: int
    nutrition: int


class MindWeights(BaseModel):
    meditation: int
    reading: int
    learning: int


class WeightConfiguration(BaseModel):
    """Active per-pillar percentage split for a user"""
    preset: WeightPreset
    body: BodyWeights
    mind: MindWeights

    def for_pillar(self, pillar: str) -> dict[str, int]:
        return getattr(self, pillar).model_dump()


class FieldError(BaseModel):
    """One invalid field, addressed as "body", "mind" or "body.training" etc."""
    field: str
    message: str


class WeightUpdateResult(BaseModel):
    success: bool
    configuration: Optional[WeightConfiguration] = None
    errors: list[FieldError] = []
