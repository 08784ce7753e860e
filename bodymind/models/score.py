"""Daily score models"""
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field


class BiometricData(BaseModel):
    """Wearable readings for a day (e.g. from a WHOOP sync)"""
    strain: Optional[float] = Field(None, ge=0, le=21)
    sleep_performance: Optional[float] = Field(None, ge=0, le=100)
    recovery_score: Optional[float] = Field(None, ge=0, le=100)
    sleep_efficiency: Optional[float] = Field(None, ge=0, le=100)


class SubScores(BaseModel):
    training: int = 0
    sleep: int = 0
    nutrition: int = 0
    meditation: int = 0
    reading: int = 0
    learning: int = 0


class DailyScoreRecord(BaseModel):
    """
    Derived score for one user and calendar day

    A cache over the day's completion events and the active weights.
    """
    user_id: str
    day: date
    body_score: int = Field(ge=0, le=100)
    mind_score: int = Field(ge=0, le=100)
    body_points: int = 0
    mind_points: int = 0
    body_complete: bool
    mind_complete: bool
    balance_index: int = Field(ge=0, le=100)
    sub_scores: SubScores
    biometrics: Optional[BiometricData] = None

    def pillar_score(self, pillar: str) -> int:
        return self.body_score if pillar == "body" else self.mind_score

    def pillar_complete(self, pillar: str) -> bool:
        return self.body_complete if pillar == "body" else self.mind_complete

    @property
    def perfect(self) -> bool:
        return self.body_complete and self.mind_complete


class ScoreSummary(BaseModel):
    """Roll-up over a date range"""
    total_days: int
    days_with_data: int
    average_body: int
    average_mind: int
    average_balance: int
    perfect_days: int
    body_complete_days: int
    mind_complete_days: int


class ScoreHistory(BaseModel):
    start_date: date
    end_date: date
    scores: list[DailyScoreRecord]
    summary: ScoreSummary
