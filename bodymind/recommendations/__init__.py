"""Daily recommendations: recovery, streak rescue, habit stacks and quotes"""
from bodymind.recommendations.composer import compose_recommendation, recovery_zone, quick_actions
from bodymind.recommendations.habit_stacks import HabitStackManager, PRESET_STACKS, next_in_stack
from bodymind.recommendations.quotes import daily_quote, random_quote

__all__ = [
    "compose_recommendation",
    "recovery_zone",
    "quick_actions",
    "HabitStackManager",
    "PRESET_STACKS",
    "next_in_stack",
    "daily_quote",
    "random_quote",
]
