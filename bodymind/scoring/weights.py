"""
Weight Configuration Manager

Per-pillar percentage splits used to combine sub-category scores into a
pillar score. Named presets carry fixed tables; the "custom" preset takes
caller-supplied weights, validated per field and never auto-normalized.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from bodymind.models.completion import PILLAR_SUB_CATEGORIES
from bodymind.models.weights import (
    BodyWeights,
    FieldError,
    MindWeights,
    WeightConfiguration,
    WeightUpdateResult,
)

logger = logging.getLogger(__name__)

REQUIRED_SUM = 100
DEFAULT_PRESET = "balanced"

WEIGHT_PRESETS: Dict[str, Dict[str, Dict[str, int]]] = {
    "balanced": {
        "body": {"training": 35, "sleep": 35, "nutrition": 30},
        "mind": {"meditation": 40, "reading": 30, "learning": 30},
    },
    "athlete": {
        "body": {"training": 50, "sleep": 35, "nutrition": 15},
        "mind": {"meditation": 50, "reading": 25, "learning": 25},
    },
    "recovery": {
        "body": {"training": 20, "sleep": 50, "nutrition": 30},
        "mind": {"meditation": 50, "reading": 30, "learning": 20},
    },
    "knowledge": {
        "body": {"training": 30, "sleep": 40, "nutrition": 30},
        "mind": {"meditation": 20, "reading": 40, "learning": 40},
    },
}

VALID_PRESETS = set(WEIGHT_PRESETS) | {"custom"}


# ==========================================
# Validation
# ==========================================

def validate_pillar_weights(pillar: str, weights: Optional[Mapping[str, Any]]) -> List[FieldError]:
    """
    Validate one pillar's percentages

    Field errors are addressed as "<pillar>.<sub_category>" for individual
    values and "<pillar>" for the pillar as a whole (missing, wrong sum).
    """
    label = pillar.capitalize()
    if weights is None:
        return [FieldError(field=pillar, message=f"{label} weights are required for a custom preset")]

    errors: List[FieldError] = []
    expected = PILLAR_SUB_CATEGORIES[pillar]

    for key in weights:
        if key not in expected:
            errors.append(FieldError(field=f"{pillar}.{key}", message=f"Unknown {pillar} sub-category '{key}'"))

    for sub in expected:
        value = weights.get(sub)
        if value is None:
            errors.append(FieldError(field=f"{pillar}.{sub}", message="Weight is required"))
        elif isinstance(value, bool) or not isinstance(value, int):
            errors.append(FieldError(field=f"{pillar}.{sub}", message="Weight must be a whole number"))
        elif value < 0:
            errors.append(FieldError(field=f"{pillar}.{sub}", message="Weight cannot be negative"))

    if errors:
        return errors

    total = sum(weights[sub] for sub in expected)
    if total != REQUIRED_SUM:
        errors.append(FieldError(
            field=pillar,
            message=f"{label} weights must sum to {REQUIRED_SUM}, got {total}",
        ))
    return errors


def validate_weights(
    body: Optional[Mapping[str, Any]],
    mind: Optional[Mapping[str, Any]],
) -> List[FieldError]:
    """Validate both pillars, collecting every error"""
    return validate_pillar_weights("body", body) + validate_pillar_weights("mind", mind)


def preset_configuration(preset: str) -> WeightConfiguration:
    """Concrete configuration for a named (non-custom) preset"""
    table = WEIGHT_PRESETS[preset]
    return WeightConfiguration(
        preset=preset,
        body=BodyWeights(**table["body"]),
        mind=MindWeights(**table["mind"]),
    )


def default_configuration() -> WeightConfiguration:
    return preset_configuration(DEFAULT_PRESET)


def resolve_weights(
    preset: str,
    body: Optional[Mapping[str, Any]] = None,
    mind: Optional[Mapping[str, Any]] = None,
) -> WeightUpdateResult:
    """
    Turn a preset (plus custom weights) into a configuration or field errors

    - Named preset: its fixed table; supplied weights are ignored
    - "custom": both pillars required, each summing to exactly 100
    """
    if preset not in VALID_PRESETS:
        return WeightUpdateResult(
            success=False,
            errors=[FieldError(
                field="preset",
                message=f"Unknown preset '{preset}'. Must be one of: {', '.join(sorted(VALID_PRESETS))}",
            )],
        )

    if preset != "custom":
        return WeightUpdateResult(success=True, configuration=preset_configuration(preset))

    errors = validate_weights(body, mind)
    if errors:
        return WeightUpdateResult(success=False, errors=errors)

    return WeightUpdateResult(
        success=True,
        configuration=WeightConfiguration(
            preset="custom",
            body=BodyWeights(**{sub: body[sub] for sub in PILLAR_SUB_CATEGORIES["body"]}),
            mind=MindWeights(**{sub: mind[sub] for sub in PILLAR_SUB_CATEGORIES["mind"]}),
        ),
    )


# ==========================================
# Service
# ==========================================

class WeightConfigManager:
    """
    Reads and updates the active weight configuration per user.

    A failed update leaves the stored configuration untouched.
    """

    def __init__(self, store):
        self.store = store

    async def get_weights(self, user_id: str) -> WeightConfiguration:
        """Active configuration; the balanced preset is stored on first access"""
        config = await self.store.get_weights(user_id)
        if config is None:
            config = default_configuration()
            await self.store.save_weights(user_id, config)
            logger.debug(f"Created default weight configuration for user {user_id}")
        return config

    async def set_weights(
        self,
        user_id: str,
        preset: str,
        body: Optional[Mapping[str, Any]] = None,
        mind: Optional[Mapping[str, Any]] = None,
    ) -> WeightUpdateResult:
        result = resolve_weights(preset, body, mind)

        if not result.success:
            logger.info(
                f"Rejected weight update for user {user_id}: "
                f"{', '.join(e.field for e in result.errors)}"
            )
            return result

        await self.store.save_weights(user_id, result.configuration)
        logger.info(f"User {user_id} weights set to preset '{preset}'")
        return result

    @staticmethod
    def get_presets() -> Dict[str, Dict[str, Dict[str, int]]]:
        return {name: {p: dict(w) for p, w in table.items()} for name, table in WEIGHT_PRESETS.items()}
