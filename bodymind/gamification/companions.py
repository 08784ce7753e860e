"""
Companion state transitions

Pure functions that take a companion snapshot and return the updated one
together with a before/after record. Level and stage are always re-derived
from experience, never stored independently.
"""

from datetime import datetime
from typing import Iterable, Optional, Tuple
import logging

from bodymind.models.companion import Companion, CompanionChange, CompanionView, MAX_HEALTH
from bodymind.models.completion import CompletionEvent
from bodymind.gamification.xp_system import level_for, level_progress
from bodymind.gamification.evolution import stage_for, stage_name
from bodymind.gamification.vitality import current_health, decay, recover, mood_for, needs_attention

logger = logging.getLogger(__name__)


def _change(before: Companion, after: Companion) -> CompanionChange:
    return CompanionChange(
        category=before.category,
        previous_experience=before.experience,
        new_experience=after.experience,
        previous_level=before.level,
        new_level=after.level,
        previous_health=before.health,
        new_health=after.health,
        previous_stage=before.evolution_stage,
        new_stage=after.evolution_stage,
    )


def apply_completion(
    companion: Companion,
    xp_awarded: int,
    now: datetime,
) -> Tuple[Companion, CompanionChange, int]:
    """
    Feed one completion to a companion

    Decay accrued since the last interaction is settled first, then the flat
    recovery is applied and the interaction clock restarts at `now`.

    Returns:
        (updated companion, change record, health actually recovered)
    """
    settled = current_health(companion, now)
    recovered = recover(settled)
    experience = companion.experience + xp_awarded
    level = level_for(experience)

    updated = companion.model_copy(update={
        "experience": experience,
        "level": level,
        "evolution_stage": stage_for(level),
        "health": recovered,
        "last_interaction": now,
    })

    change = _change(companion, updated)
    if change.leveled_up:
        logger.info(
            f"{companion.name} ({companion.category}) leveled up "
            f"{change.previous_level} → {change.new_level}"
        )
    if change.evolved:
        logger.info(f"{companion.name} evolved to {stage_name(change.new_stage)}")

    return updated, change, recovered - settled


def rebuild_health(events: Iterable[CompletionEvent]) -> Optional[Tuple[int, datetime]]:
    """
    Replay a companion's events from a fresh start

    Events are applied in the order they reached the companion. Returns the
    (health, last_interaction) they leave behind, or None when there are none.
    """
    ordered = sorted(events, key=lambda e: (e.applied_at, e.timestamp))
    if not ordered:
        return None

    health = MAX_HEALTH
    clock = ordered[0].applied_at
    for event in ordered:
        health = recover(decay(health, clock, event.applied_at))
        clock = event.applied_at
    return health, clock


def reverse_completion(
    companion: Companion,
    event: CompletionEvent,
    remaining: Iterable[CompletionEvent] = (),
) -> Tuple[Companion, CompanionChange]:
    """
    Undo everything a completion did to its companion

    The recorded XP is subtracted (clamped at 0). Health and the interaction
    clock are rebuilt from the companion's remaining events, so the decay the
    deleted event settled comes back. With no events left the companion is
    back to full health; the caller drops it.
    """
    experience = max(0, companion.experience - event.xp_awarded)
    level = level_for(experience)

    rebuilt = rebuild_health(e for e in remaining if e.id != event.id)
    if rebuilt is None:
        health, last_interaction = MAX_HEALTH, companion.last_interaction
    else:
        health, last_interaction = rebuilt

    updated = companion.model_copy(update={
        "experience": experience,
        "level": level,
        "evolution_stage": stage_for(level),
        "health": health,
        "last_interaction": last_interaction,
    })
    return updated, _change(companion, updated)


def companion_view(companion: Companion, now: datetime) -> CompanionView:
    """Read projection with decayed health, mood and level progress"""
    health = current_health(companion, now)
    progress = level_progress(companion.experience)
    stage = stage_for(progress["current_level"])

    return CompanionView(
        category=companion.category,
        species=companion.species,
        name=companion.name,
        experience=companion.experience,
        level=progress["current_level"],
        xp_in_current_level=progress["xp_in_current_level"],
        xp_to_next_level=progress["xp_to_next_level"],
        health=health,
        mood=mood_for(health),
        needs_attention=needs_attention(health),
        evolution_stage=stage,
        stage_name=stage_name(stage),
        last_interaction=companion.last_interaction,
    )
