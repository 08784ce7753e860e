"""
CompletionService - Completion Processing and Derived State

Orchestrates the engine around the snapshot store:

1. record_completion(): validate, reject same-habit same-day duplicates,
   award XP, recover the companion, persist the event with its effects,
   then dispatch a background recompute of the day's score and the streaks
2. delete_completion(): reverse exactly the recorded effects and recompute
3. Read side: companion views, live streaks, daily scores and history,
   and the recommendation bundle

Score and streak recomputation always rebuilds from stored events, so the
background task is safe to run more than once.
"""

import asyncio
import logging
import weakref
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from bodymind import config
from bodymind.exceptions import CompletionNotFoundError, DuplicateCompletionError
from bodymind.gamification.achievements import new_achievements
from bodymind.gamification.companions import apply_completion, companion_view, reverse_completion
from bodymind.gamification.streak_system import (
    advance_streak,
    evaluate_all,
    project_streak,
    qualifying_dates,
    record_qualifies,
)
from bodymind.gamification.xp_system import xp_for_completion
from bodymind.models.companion import COMPANION_DEFAULTS, SUB_CATEGORY_COMPANION, Companion, CompanionView
from bodymind.models.completion import CompletionEvent
from bodymind.models.recommendation import Recommendation, RecoverySignal
from bodymind.models.score import BiometricData, DailyScoreRecord, ScoreHistory
from bodymind.models.streak import STREAK_DOMAINS, AllStreaks, StreakState
from bodymind.models.weights import WeightUpdateResult
from bodymind.recommendations.composer import compose_recommendation
from bodymind.scoring.daily_score import compute_daily_score, summarize_scores
from bodymind.scoring.weights import WeightConfigManager
from bodymind.services.tasks import RecomputeTask, TaskDispatcher
from bodymind.utils.datetime_helpers import get_user_timezone, local_date, now_utc
from bodymind.validators import CompletionInput, DateRangeQuery, TimezoneInput, validate_input

logger = logging.getLogger(__name__)


class CompletionService:
    """
    Service for completion events and everything derived from them.

    Responsibilities:
    - Companion XP, level, evolution and health on completion/deletion
    - Duplicate completion detection per habit per local day
    - Background daily score and streak recomputation
    - Streak achievements
    - Read projections for companions, streaks, scores and recommendations
    """

    def __init__(
        self,
        store,
        weight_manager: Optional[WeightConfigManager] = None,
        caps: Optional[Mapping[str, int]] = None,
        threshold: Optional[int] = None,
    ):
        """
        Initialize CompletionService.

        Args:
            store: Snapshot store (see bodymind.db.InMemoryStore)
            weight_manager: Weight configuration manager over the same store
            caps: Daily points cap per sub-category (defaults to config)
            threshold: Pillar completion threshold (defaults to config)

        Raises:
            ConfigurationError: A sub-category cap is missing or not positive
        """
        self.store = store
        self.weights = weight_manager or WeightConfigManager(store)
        self.caps = config.validate_caps(caps if caps is not None else config.SUB_CATEGORY_DAILY_CAPS)
        self.threshold = threshold if threshold is not None else config.PILLAR_COMPLETION_THRESHOLD
        self.dispatcher = TaskDispatcher(self.handle_recompute)
        # Entries disappear once no task holds or waits on the lock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
        logger.debug("CompletionService initialized")

    def _user_lock(self, user_id: str) -> asyncio.Lock:
        return self._locks.setdefault(user_id, asyncio.Lock())

    async def _companion(self, user_id: str, category: str, now: datetime) -> Companion:
        companion = await self.store.get_companion(user_id, category)
        return companion or Companion.new(user_id, category, now)

    # ==========================================
    # User settings
    # ==========================================

    async def get_user_timezone(self, user_id: str):
        return get_user_timezone(await self.store.get_timezone(user_id))

    async def set_user_timezone(self, user_id: str, tz_name: str) -> None:
        """Set the zone that defines a user's calendar days; affects new events only"""
        data = validate_input(TimezoneInput, {"timezone": tz_name}, user_id=user_id)
        await self.store.set_timezone(user_id, data.timezone)
        logger.info(f"User {user_id} timezone set to {data.timezone}")

    # ==========================================
    # Write side
    # ==========================================

    async def record_completion(
        self,
        user_id: str,
        habit_id: str,
        sub_category: str,
        points: int,
        timestamp: datetime,
        details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Apply one completion event.

        Args:
            user_id: User who completed the habit
            habit_id: Habit identifier (one completion per habit per local day)
            sub_category: training, sleep, nutrition, meditation, reading or learning
            points: Points toward the day's score
            timestamp: When it was completed (timezone-aware)
            details: Optional detail payload; earns bonus XP

        Returns:
            {
                'event': CompletionEvent,
                'companion': CompanionView,
                'change': CompanionChange,
                'xp_awarded': int,
                'leveled_up': bool,
                'evolved': bool,
            }

        Raises:
            ValidationError: Invalid input
            DuplicateCompletionError: Habit already completed that local day
        """
        data = validate_input(
            CompletionInput,
            {
                "user_id": user_id,
                "habit_id": habit_id,
                "sub_category": sub_category,
                "points": points,
                "timestamp": timestamp,
                "details": details,
            },
            user_id=user_id,
        )
        tz = await self.get_user_timezone(user_id)
        day = local_date(data.timestamp, tz)

        async with self._user_lock(user_id):
            if await self.store.find_event(user_id, data.habit_id, day) is not None:
                raise DuplicateCompletionError(
                    data.habit_id,
                    day,
                    user_id=user_id,
                    operation="record_completion",
                )

            category = SUB_CATEGORY_COMPANION[data.sub_category]
            companion = await self._companion(user_id, category, data.timestamp)

            # Late-arriving events never move the interaction clock backwards
            applied_at = max(data.timestamp, companion.last_interaction)
            xp = xp_for_completion(data.details is not None)
            updated, change, recovered = apply_completion(companion, xp, applied_at)

            event = CompletionEvent(
                user_id=user_id,
                habit_id=data.habit_id,
                sub_category=data.sub_category,
                points=data.points,
                timestamp=data.timestamp,
                local_date=day,
                details=data.details,
                xp_awarded=xp,
                health_recovered=recovered,
                applied_at=applied_at,
            )
            await self.store.save_companion(updated)
            await self.store.add_event(event)

        logger.info(
            f"User {user_id} completed {data.sub_category} ({data.habit_id}) on {day}: "
            f"+{xp} XP, +{recovered} health"
        )
        self.dispatcher.dispatch(RecomputeTask(user_id=user_id, day=day, reason="completion"))

        return {
            "event": event,
            "companion": companion_view(updated, applied_at),
            "change": change,
            "xp_awarded": xp,
            "leveled_up": change.leveled_up,
            "evolved": change.evolved,
        }

    async def delete_completion(
        self,
        user_id: str,
        event_id: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Delete a completion and reverse exactly the effects it applied.

        XP is subtracted; health and the interaction clock are rebuilt from
        the companion's remaining events.

        Returns:
            {'event': CompletionEvent, 'companion': CompanionView, 'change': CompanionChange}

        Raises:
            CompletionNotFoundError: No such event for this user
        """
        now = now or now_utc()

        async with self._user_lock(user_id):
            event = await self.store.get_event(user_id, event_id)
            if event is None:
                raise CompletionNotFoundError(event_id, user_id=user_id, operation="delete_completion")

            category = SUB_CATEGORY_COMPANION[event.sub_category]
            companion = await self._companion(user_id, category, event.timestamp)
            remaining = [
                e for e in await self.store.get_events(user_id)
                if e.id != event_id and SUB_CATEGORY_COMPANION[e.sub_category] == category
            ]
            updated, change = reverse_completion(companion, event, remaining)

            await self.store.delete_event(user_id, event_id)
            if remaining:
                await self.store.save_companion(updated)
            else:
                # No events left: reads fall back to a fresh companion
                await self.store.delete_companion(user_id, category)
                updated = await self._companion(user_id, category, now)

        logger.info(
            f"User {user_id} deleted completion {event_id} ({event.sub_category} on {event.local_date}): "
            f"-{event.xp_awarded} XP"
        )
        self.dispatcher.dispatch(RecomputeTask(user_id=user_id, day=event.local_date, reason="deletion"))

        return {
            "event": event,
            "companion": companion_view(updated, now),
            "change": change,
        }

    async def record_biometrics(self, user_id: str, day: date, biometrics: Union[BiometricData, Dict[str, Any]]) -> None:
        """Store wearable readings for a day and rescore it"""
        if not isinstance(biometrics, BiometricData):
            biometrics = BiometricData(**biometrics)
        await self.store.save_biometrics(user_id, day, biometrics)
        self.dispatcher.dispatch(RecomputeTask(user_id=user_id, day=day, reason="biometrics"))

    async def update_weights(
        self,
        user_id: str,
        preset: str,
        body: Optional[Mapping[str, Any]] = None,
        mind: Optional[Mapping[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> WeightUpdateResult:
        """Change the weight configuration and rescore today; past days keep their scores"""
        result = await self.weights.set_weights(user_id, preset, body, mind)
        if result.success:
            tz = await self.get_user_timezone(user_id)
            today = local_date(now or now_utc(), tz)
            self.dispatcher.dispatch(RecomputeTask(user_id=user_id, day=today, reason="weights"))
        return result

    # ==========================================
    # Recompute (background)
    # ==========================================

    async def handle_recompute(self, task: RecomputeTask) -> None:
        async with self._user_lock(f"recompute:{task.user_id}"):
            await self.recompute_day(task.user_id, task.day)
            await self.recompute_streaks(
                task.user_id,
                day=task.day,
                incremental=task.reason == "completion",
            )

    async def recompute_day(self, user_id: str, day: date) -> Optional[DailyScoreRecord]:
        """
        Rebuild the score record for one day from its stored events.

        A day left with neither events nor biometrics has its record removed.
        """
        events = await self.store.get_events(user_id, day)
        biometrics = await self.store.get_biometrics(user_id, day)

        if not events and biometrics is None:
            await self.store.delete_daily_record(user_id, day)
            logger.debug(f"No data left for user {user_id} on {day}, record removed")
            return None

        weights = await self.weights.get_weights(user_id)
        record = compute_daily_score(
            user_id,
            day,
            events,
            weights,
            caps=self.caps,
            threshold=self.threshold,
            biometrics=biometrics,
        )
        await self.store.save_daily_record(record)
        logger.debug(
            f"Scored user {user_id} on {day}: body={record.body_score} mind={record.mind_score} "
            f"balance={record.balance_index}"
        )
        return record

    async def recompute_streaks(
        self,
        user_id: str,
        day: Optional[date] = None,
        incremental: bool = False,
    ) -> Dict[str, Any]:
        """
        Bring stored streak state in line with the daily records.

        With `incremental`, a domain that `day` newly qualifies at or after its
        last qualifying date is advanced in place; every other case is
        rebuilt from the full qualifying-date history.

        Returns:
            {'streaks': {domain: StreakState}, 'new_achievements': [str]}
        """
        records = await self.store.get_daily_records(user_id)
        stored = await self.store.get_streaks(user_id)
        day_record = next((r for r in records if r.day == day), None) if day else None

        states: Dict[str, StreakState] = {}
        for domain in STREAK_DOMAINS:
            state = stored.get(domain) or StreakState()
            last = state.last_qualifying_date
            if (
                incremental
                and record_qualifies(day_record, domain)
                and (last is None or day >= last)
            ):
                states[domain] = advance_streak(state, day)
            else:
                states[domain] = project_streak(qualifying_dates(records, domain))
            await self.store.save_streak(user_id, domain, states[domain])

        unlocked: List[str] = []
        latest = day_record or (records[-1] if records else None)
        if latest is not None:
            unlocked = new_achievements(
                states["overall"].current_length,
                latest.body_score,
                latest.mind_score,
                await self.store.get_achievements(user_id),
            )
            if unlocked:
                await self.store.add_achievements(user_id, unlocked)

        return {"streaks": states, "new_achievements": unlocked}

    # ==========================================
    # Read side
    # ==========================================

    async def get_companion(self, user_id: str, category: str, now: Optional[datetime] = None) -> CompanionView:
        now = now or now_utc()
        return companion_view(await self._companion(user_id, category, now), now)

    async def get_companions(self, user_id: str, now: Optional[datetime] = None) -> List[CompanionView]:
        """All five companions; ones never fed read as fresh defaults"""
        now = now or now_utc()
        return [
            companion_view(await self._companion(user_id, category, now), now)
            for category in COMPANION_DEFAULTS
        ]

    async def get_streaks(self, user_id: str, now: Optional[datetime] = None) -> AllStreaks:
        now = now or now_utc()
        tz = await self.get_user_timezone(user_id)
        states = await self.store.get_streaks(user_id)
        today_record = await self.store.get_daily_record(user_id, local_date(now, tz))
        return evaluate_all(states, today_record, now, tz)

    async def get_daily_score(self, user_id: str, day: date) -> Optional[DailyScoreRecord]:
        return await self.store.get_daily_record(user_id, day)

    async def get_score_history(
        self,
        user_id: str,
        days: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> ScoreHistory:
        """
        Daily records for a date range plus a summary.

        Defaults to the last 7 days ending today in the user's timezone.

        Raises:
            ValidationError: range outside 1-365 days or start after end
        """
        if end_date is None:
            tz = await self.get_user_timezone(user_id)
            end_date = local_date(now or now_utc(), tz)

        query = validate_input(
            DateRangeQuery,
            {"days": days, "start_date": start_date, "end_date": end_date},
            user_id=user_id,
        )
        records = await self.store.get_daily_records(user_id, query.start_date, query.end_date)
        return ScoreHistory(
            start_date=query.start_date,
            end_date=query.end_date,
            scores=records,
            summary=summarize_scores(records, query.start_date, query.end_date),
        )

    async def get_achievements(self, user_id: str) -> List[str]:
        return sorted(await self.store.get_achievements(user_id))

    async def get_recommendations(
        self,
        user_id: str,
        recovery: Optional[RecoverySignal] = None,
        now: Optional[datetime] = None,
    ) -> Recommendation:
        now = now or now_utc()
        tz = await self.get_user_timezone(user_id)
        today = local_date(now, tz)

        today_events = await self.store.get_events(user_id, today)
        stacks = [s for s in await self.store.get_stacks(user_id) if s.is_active]

        return compose_recommendation(
            user_id,
            now,
            tz,
            streaks=await self.get_streaks(user_id, now),
            today_record=await self.store.get_daily_record(user_id, today),
            completed_today=[e.sub_category for e in today_events],
            recovery=recovery,
            stacks=stacks,
        )
