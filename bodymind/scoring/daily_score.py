"""
Daily Score Aggregator

Turns one calendar day of completion events into a DailyScoreRecord:

1. Points per sub-category are normalized against that sub-category's daily
   cap into a 0-100 sub-score (wearable readings override training/sleep)
2. Sub-scores are combined with the active weight configuration into a
   0-100 pillar score
3. A pillar is complete when its score reaches the completion threshold
4. The balance index rewards two strong, similar pillar scores

compute_daily_score() is pure and uses integer arithmetic wherever it can,
so recomputing a day from the same inputs always yields the same record.
"""

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional
import logging

from bodymind import config
from bodymind.models.completion import CompletionEvent, PILLAR_SUB_CATEGORIES, SUB_CATEGORIES
from bodymind.models.score import BiometricData, DailyScoreRecord, ScoreSummary, SubScores
from bodymind.models.weights import WeightConfiguration

logger = logging.getLogger(__name__)

BALANCE_BONUS = 5
BALANCE_BONUS_MAX_GAP = 15

# Strain (0-21) at which the training sub-score saturates
STRAIN_FOR_FULL_SCORE = 15
SLEEP_EFFICIENCY_BONUS_THRESHOLD = 85
SLEEP_EFFICIENCY_BONUS = 5


def _div_round(numerator: int, denominator: int) -> int:
    """Integer division rounded half up"""
    return (2 * numerator + denominator) // (2 * denominator)


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


# ============================================================================
# Sub-scores
# ============================================================================

def points_by_sub_category(events: Iterable[CompletionEvent]) -> Dict[str, int]:
    totals = {sub: 0 for sub in SUB_CATEGORIES}
    for event in events:
        totals[event.sub_category] += event.points
    return totals


def normalize_points(points: int, cap: int) -> int:
    """Points earned against a daily cap, as a 0-100 score"""
    if points <= 0:
        return 0
    return min(100, _div_round(points * 100, cap))


def training_score_from_strain(strain: float) -> int:
    return min(100, _round_half_up(strain / STRAIN_FOR_FULL_SCORE * 100))


def sleep_score_from_biometrics(biometrics: BiometricData) -> int:
    """
    Sleep score from wearable sleep performance

    Recovery scales the score between 0.8x and 1.0x; efficiency above 85%
    adds a small bonus.
    """
    score = biometrics.sleep_performance
    if biometrics.recovery_score is not None:
        score *= 0.8 + biometrics.recovery_score / 500
    if biometrics.sleep_efficiency is not None and biometrics.sleep_efficiency > SLEEP_EFFICIENCY_BONUS_THRESHOLD:
        score += SLEEP_EFFICIENCY_BONUS
    return _round_half_up(min(100.0, score))


def compute_sub_scores(
    points: Mapping[str, int],
    caps: Mapping[str, int],
    biometrics: Optional[BiometricData] = None,
) -> SubScores:
    scores = {sub: normalize_points(points.get(sub, 0), caps[sub]) for sub in SUB_CATEGORIES}

    if biometrics is not None:
        if biometrics.strain is not None:
            scores["training"] = training_score_from_strain(biometrics.strain)
        if biometrics.sleep_performance is not None:
            scores["sleep"] = sleep_score_from_biometrics(biometrics)

    return SubScores(**scores)


# ============================================================================
# Pillars and balance
# ============================================================================

def pillar_score(sub_scores: SubScores, weights: Mapping[str, int]) -> int:
    """Weighted sum of a pillar's sub-scores; weights are percentages"""
    total = sum(getattr(sub_scores, sub) * pct for sub, pct in weights.items())
    return min(100, _div_round(total, 100))


def balance_index(body_score: int, mind_score: int) -> int:
    """
    Average of both pillars, plus a bonus when they are close together

    High when both pillars are strong and similar, lower when one dominates.
    """
    index = _div_round(body_score + mind_score, 2)
    if body_score > 0 and mind_score > 0 and abs(body_score - mind_score) <= BALANCE_BONUS_MAX_GAP:
        index = min(100, index + BALANCE_BONUS)
    return index


def compute_daily_score(
    user_id: str,
    day: date,
    events: Iterable[CompletionEvent],
    weights: WeightConfiguration,
    caps: Optional[Mapping[str, int]] = None,
    threshold: Optional[int] = None,
    biometrics: Optional[BiometricData] = None,
) -> DailyScoreRecord:
    """
    Derive the score record for one user and local calendar day

    Args:
        user_id: Owner of the events
        day: Local calendar day; events from other days are ignored
        events: Completion events (any order)
        weights: Active weight configuration
        caps: Daily points cap per sub-category (defaults to config)
        threshold: Pillar completion threshold (defaults to config)
        biometrics: Optional wearable readings for the day

    Returns:
        DailyScoreRecord
    """
    caps = caps if caps is not None else config.SUB_CATEGORY_DAILY_CAPS
    threshold = threshold if threshold is not None else config.PILLAR_COMPLETION_THRESHOLD

    day_events = [e for e in events if e.local_date == day and e.user_id == user_id]
    points = points_by_sub_category(day_events)
    sub_scores = compute_sub_scores(points, caps, biometrics)

    body = pillar_score(sub_scores, weights.for_pillar("body"))
    mind = pillar_score(sub_scores, weights.for_pillar("mind"))

    return DailyScoreRecord(
        user_id=user_id,
        day=day,
        body_score=body,
        mind_score=mind,
        body_points=sum(points[sub] for sub in PILLAR_SUB_CATEGORIES["body"]),
        mind_points=sum(points[sub] for sub in PILLAR_SUB_CATEGORIES["mind"]),
        body_complete=body >= threshold,
        mind_complete=mind >= threshold,
        balance_index=balance_index(body, mind),
        sub_scores=sub_scores,
        biometrics=biometrics,
    )


# ============================================================================
# Range summary
# ============================================================================

def summarize_scores(records: Iterable[DailyScoreRecord], start: date, end: date) -> ScoreSummary:
    """
    Roll up the records that fall in [start, end]

    Days without a record count toward total_days only.
    """
    in_range: List[DailyScoreRecord] = [r for r in records if start <= r.day <= end]
    count = len(in_range)

    def average(values: List[int]) -> int:
        return _div_round(sum(values), count) if count else 0

    return ScoreSummary(
        total_days=(end - start).days + 1,
        days_with_data=count,
        average_body=average([r.body_score for r in in_range]),
        average_mind=average([r.mind_score for r in in_range]),
        average_balance=average([r.balance_index for r in in_range]),
        perfect_days=sum(1 for r in in_range if r.perfect),
        body_complete_days=sum(1 for r in in_range if r.body_complete),
        mind_complete_days=sum(1 for r in in_range if r.mind_complete),
    )
