"""
In-memory snapshot store

Holds every persisted entity the engine works with, keyed per user:
companions, completion events, daily score records, streak states, weight
configurations, unlocked achievements, habit stacks, daily biometrics and
user timezones.

The methods are async so a database-backed store can be dropped in with the
same interface. Nothing here is persisted across processes.
"""

from datetime import date
from typing import Dict, List, Optional, Set, Tuple
import logging

from bodymind.models.companion import Companion
from bodymind.models.completion import CompletionEvent
from bodymind.models.recommendation import HabitStack
from bodymind.models.score import BiometricData, DailyScoreRecord
from bodymind.models.streak import StreakState
from bodymind.models.weights import WeightConfiguration

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Dict-backed store; models are immutable-by-convention snapshots"""

    def __init__(self):
        self._companions: Dict[Tuple[str, str], Companion] = {}
        self._events: Dict[str, CompletionEvent] = {}
        self._daily_records: Dict[Tuple[str, date], DailyScoreRecord] = {}
        self._streaks: Dict[Tuple[str, str], StreakState] = {}
        self._weights: Dict[str, WeightConfiguration] = {}
        self._achievements: Dict[str, Set[str]] = {}
        self._stacks: Dict[str, HabitStack] = {}
        self._biometrics: Dict[Tuple[str, date], BiometricData] = {}
        self._timezones: Dict[str, str] = {}
        logger.debug("InMemoryStore initialized")

    # ==========================================
    # Companions
    # ==========================================

    async def get_companion(self, user_id: str, category: str) -> Optional[Companion]:
        return self._companions.get((user_id, category))

    async def get_companions(self, user_id: str) -> List[Companion]:
        return [c for (uid, _), c in self._companions.items() if uid == user_id]

    async def save_companion(self, companion: Companion) -> None:
        self._companions[(companion.user_id, companion.category)] = companion

    async def delete_companion(self, user_id: str, category: str) -> bool:
        return self._companions.pop((user_id, category), None) is not None

    # ==========================================
    # Completion events
    # ==========================================

    async def add_event(self, event: CompletionEvent) -> None:
        self._events[event.id] = event
        logger.debug(f"Stored completion {event.id} for user {event.user_id}")

    async def get_event(self, user_id: str, event_id: str) -> Optional[CompletionEvent]:
        event = self._events.get(event_id)
        if event is None or event.user_id != user_id:
            return None
        return event

    async def delete_event(self, user_id: str, event_id: str) -> bool:
        if await self.get_event(user_id, event_id) is None:
            return False
        del self._events[event_id]
        return True

    async def get_events(self, user_id: str, day: Optional[date] = None) -> List[CompletionEvent]:
        """A user's events, optionally for one local calendar day, oldest first"""
        events = [
            e for e in self._events.values()
            if e.user_id == user_id and (day is None or e.local_date == day)
        ]
        return sorted(events, key=lambda e: (e.timestamp, e.id))

    async def find_event(self, user_id: str, habit_id: str, day: date) -> Optional[CompletionEvent]:
        """Existing completion of a habit on a local calendar day, if any"""
        for event in self._events.values():
            if event.user_id == user_id and event.habit_id == habit_id and event.local_date == day:
                return event
        return None

    # ==========================================
    # Daily score records
    # ==========================================

    async def get_daily_record(self, user_id: str, day: date) -> Optional[DailyScoreRecord]:
        return self._daily_records.get((user_id, day))

    async def save_daily_record(self, record: DailyScoreRecord) -> None:
        self._daily_records[(record.user_id, record.day)] = record

    async def delete_daily_record(self, user_id: str, day: date) -> None:
        self._daily_records.pop((user_id, day), None)

    async def get_daily_records(
        self,
        user_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DailyScoreRecord]:
        records = [
            r for (uid, day), r in self._daily_records.items()
            if uid == user_id
            and (start is None or day >= start)
            and (end is None or day <= end)
        ]
        return sorted(records, key=lambda r: r.day)

    # ==========================================
    # Streaks
    # ==========================================

    async def get_streaks(self, user_id: str) -> Dict[str, StreakState]:
        return {domain: state for (uid, domain), state in self._streaks.items() if uid == user_id}

    async def save_streak(self, user_id: str, domain: str, state: StreakState) -> None:
        self._streaks[(user_id, domain)] = state

    # ==========================================
    # Weights
    # ==========================================

    async def get_weights(self, user_id: str) -> Optional[WeightConfiguration]:
        return self._weights.get(user_id)

    async def save_weights(self, user_id: str, configuration: WeightConfiguration) -> None:
        self._weights[user_id] = configuration

    # ==========================================
    # Achievements
    # ==========================================

    async def get_achievements(self, user_id: str) -> Set[str]:
        return set(self._achievements.get(user_id, set()))

    async def add_achievements(self, user_id: str, achievement_types: List[str]) -> None:
        self._achievements.setdefault(user_id, set()).update(achievement_types)

    # ==========================================
    # Habit stacks
    # ==========================================

    async def save_stack(self, stack: HabitStack) -> None:
        self._stacks[stack.id] = stack

    async def get_stack(self, user_id: str, stack_id: str) -> Optional[HabitStack]:
        stack = self._stacks.get(stack_id)
        if stack is None or stack.user_id != user_id:
            return None
        return stack

    async def get_stacks(self, user_id: str) -> List[HabitStack]:
        return [s for s in self._stacks.values() if s.user_id == user_id]

    async def delete_stack(self, user_id: str, stack_id: str) -> bool:
        if await self.get_stack(user_id, stack_id) is None:
            return False
        del self._stacks[stack_id]
        return True

    # ==========================================
    # Biometrics and user settings
    # ==========================================

    async def get_biometrics(self, user_id: str, day: date) -> Optional[BiometricData]:
        return self._biometrics.get((user_id, day))

    async def save_biometrics(self, user_id: str, day: date, biometrics: BiometricData) -> None:
        self._biometrics[(user_id, day)] = biometrics

    async def get_timezone(self, user_id: str) -> Optional[str]:
        return self._timezones.get(user_id)

    async def set_timezone(self, user_id: str, tz_name: str) -> None:
        self._timezones[user_id] = tz_name
