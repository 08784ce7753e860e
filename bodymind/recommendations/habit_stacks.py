"""
Habit Stacks

A habit stack is an ordered run of sub-categories meant to be done back to
back ("after I meditate, I read"), optionally anchored to a cue:
- time: "HH:MM"
- location: free text
- after_activity: a sub-category that triggers the stack

Users can start from a preset or define their own. The recommendation
composer reads the first active stack to suggest the next pending step.
"""

from typing import Any, Dict, Iterable, List, Optional
import logging

from bodymind.exceptions import RecordNotFoundError, ValidationError
from bodymind.models.recommendation import HabitStack, NextInStack
from bodymind.validators import HabitStackInput, validate_input

logger = logging.getLogger(__name__)


PRESET_STACKS: Dict[str, Dict[str, Any]] = {
    "morning_momentum": {
        "name": "Morning Momentum",
        "description": "Start the day with movement and stillness",
        "activities": ["training", "meditation"],
        "cue_type": "time",
        "cue_value": "07:00",
    },
    "evening_wind_down": {
        "name": "Evening Wind Down",
        "description": "Quiet the mind before sleep",
        "activities": ["reading", "meditation"],
        "cue_type": "time",
        "cue_value": "21:00",
    },
    "two_minute_start": {
        "name": "Two Minute Start",
        "description": "Tiny versions of each habit to keep the chain alive",
        "activities": ["training", "meditation", "reading"],
        "cue_type": None,
        "cue_value": None,
    },
    "recovery_day": {
        "name": "Recovery Day",
        "description": "Low intensity day focused on rest and the Mind pillar",
        "activities": ["sleep", "meditation", "reading", "learning"],
        "cue_type": None,
        "cue_value": None,
    },
}


def build_stack(user_id: str, preset_key: Optional[str] = None, **fields: Any) -> HabitStack:
    """
    Validate stack fields and build a HabitStack

    Raises:
        ValidationError: fewer than 2 activities, unknown sub-category, bad cue
    """
    data = validate_input(HabitStackInput, fields, user_id=user_id)
    return HabitStack(user_id=user_id, preset_key=preset_key, **data.model_dump())


def stack_from_preset(user_id: str, preset_key: str) -> HabitStack:
    if preset_key not in PRESET_STACKS:
        raise ValidationError(
            message=f"Unknown habit stack preset '{preset_key}'",
            field="preset_key",
            value=preset_key,
            user_id=user_id,
        )
    return build_stack(user_id, preset_key=preset_key, **PRESET_STACKS[preset_key])


def next_in_stack(
    stacks: Iterable[HabitStack],
    completed_today: Iterable[str],
) -> Optional[NextInStack]:
    """
    First pending step of the first active stack that still has one

    Stacks are considered in creation order. A stack whose after_activity cue
    has not happened yet today is skipped. For the first step the cue activity
    (if any) is reported as what to do it after.
    """
    done = set(completed_today)

    for stack in sorted(stacks, key=lambda s: s.created_at):
        if not stack.is_active:
            continue
        if stack.cue_type == "after_activity" and stack.cue_value not in done:
            continue

        for index, activity in enumerate(stack.activities):
            if activity in done:
                continue
            if index > 0:
                after = stack.activities[index - 1]
            elif stack.cue_type == "after_activity":
                after = stack.cue_value
            else:
                after = None
            return NextInStack(
                stack_id=stack.id,
                stack_name=stack.name,
                activity=activity,
                step=index + 1,
                after_completing=after,
            )

    return None


class HabitStackManager:
    """CRUD for a user's habit stacks on top of the snapshot store"""

    def __init__(self, store):
        self.store = store

    async def create_stack(self, user_id: str, **fields: Any) -> HabitStack:
        stack = build_stack(user_id, **fields)
        await self.store.save_stack(stack)
        logger.info(f"Created habit stack '{stack.name}' for user {user_id}")
        return stack

    async def create_from_preset(self, user_id: str, preset_key: str) -> HabitStack:
        stack = stack_from_preset(user_id, preset_key)
        await self.store.save_stack(stack)
        logger.info(f"Created habit stack from preset '{preset_key}' for user {user_id}")
        return stack

    async def update_stack(self, user_id: str, stack_id: str, **changes: Any) -> HabitStack:
        """Update a stack; the merged result is re-validated as a whole"""
        existing = await self.store.get_stack(user_id, stack_id)
        if existing is None:
            raise RecordNotFoundError(
                message=f"Habit stack {stack_id} not found",
                record_type="habit_stack",
                record_id=stack_id,
                user_id=user_id,
            )

        merged = existing.model_dump(include={"name", "description", "activities", "cue_type", "cue_value", "is_active"})
        merged.update(changes)
        data = validate_input(HabitStackInput, merged, user_id=user_id)

        updated = existing.model_copy(update=data.model_dump())
        await self.store.save_stack(updated)
        return updated

    async def delete_stack(self, user_id: str, stack_id: str) -> bool:
        deleted = await self.store.delete_stack(user_id, stack_id)
        if deleted:
            logger.info(f"Deleted habit stack {stack_id} for user {user_id}")
        return deleted

    async def get_stacks(self, user_id: str, active_only: bool = False) -> List[HabitStack]:
        stacks = await self.store.get_stacks(user_id)
        if active_only:
            stacks = [s for s in stacks if s.is_active]
        return sorted(stacks, key=lambda s: s.created_at)

    @staticmethod
    def get_presets() -> Dict[str, Dict[str, Any]]:
        return {key: dict(preset) for key, preset in PRESET_STACKS.items()}
