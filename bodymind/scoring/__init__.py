"""Weighted daily scoring: weight presets and the daily score aggregator"""
from bodymind.scoring.weights import WeightConfigManager, resolve_weights, validate_weights, WEIGHT_PRESETS
from bodymind.scoring.daily_score import compute_daily_score, summarize_scores, balance_index

__all__ = [
    "WeightConfigManager",
    "resolve_weights",
    "validate_weights",
    "WEIGHT_PRESETS",
    "compute_daily_score",
    "summarize_scores",
    "balance_index",
]
