"""Value objects passed into and returned from the engine"""
from bodymind.models.completion import (
    CompletionEvent,
    PILLARS,
    PILLAR_SUB_CATEGORIES,
    SUB_CATEGORIES,
    SUB_CATEGORY_PILLAR,
)
from bodymind.models.companion import Companion, CompanionView, CompanionChange
from bodymind.models.streak import StreakState, StreakView, AllStreaks, STREAK_DOMAINS
from bodymind.models.weights import (
    BodyWeights,
    MindWeights,
    WeightConfiguration,
    FieldError,
    WeightUpdateResult,
)
from bodymind.models.score import (
    BiometricData,
    SubScores,
    DailyScoreRecord,
    ScoreSummary,
    ScoreHistory,
)
from bodymind.models.recommendation import (
    RecoverySignal,
    QuickAction,
    RecoverySection,
    StreakSection,
    HabitStack,
    NextInStack,
    Quote,
    Recommendation,
)

__all__ = [
    "CompletionEvent",
    "PILLARS",
    "PILLAR_SUB_CATEGORIES",
    "SUB_CATEGORIES",
    "SUB_CATEGORY_PILLAR",
    "Companion",
    "CompanionView",
    "CompanionChange",
    "StreakState",
    "StreakView",
    "AllStreaks",
    "STREAK_DOMAINS",
    "BodyWeights",
    "MindWeights",
    "WeightConfiguration",
    "FieldError",
    "WeightUpdateResult",
    "BiometricData",
    "SubScores",
    "DailyScoreRecord",
    "ScoreSummary",
    "ScoreHistory",
    "RecoverySignal",
    "QuickAction",
    "RecoverySection",
    "StreakSection",
    "HabitStack",
    "NextInStack",
    "Quote",
    "Recommendation",
]
