"""
Centralized Pydantic Input Validation Layer

Validates everything that enters the engine from the calling layer so that
invalid data never reaches derived-state computation.

Validation Categories:
1. Completion Input - known sub-category, point range, no future timestamps
2. Habit Stacks - at least two activities, cue consistent with cue type
3. Date Ranges - 1-365 days, start before end
4. Timezones - valid IANA names
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional, Type, TypeVar

import pytz
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from bodymind.exceptions import ValidationError
from bodymind.models.completion import SUB_CATEGORIES, SubCategory
from bodymind.models.recommendation import CueType

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MAX_POINTS_PER_COMPLETION = 1000
MAX_FUTURE_SKEW = timedelta(minutes=5)
MAX_RANGE_DAYS = 365

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


# ============================================================================
# COMPLETION INPUT VALIDATION
# ============================================================================

class CompletionInput(BaseModel):
    """
    Validate an incoming completion event

    Constraints:
    - sub_category: one of the six known sub-categories
    - points: 0-1000
    - timestamp: timezone-aware, not more than 5 minutes in the future
    - details: optional free-form payload; empty dicts count as no details
    """
    user_id: str = Field(..., min_length=1)
    habit_id: str = Field(..., min_length=1)
    sub_category: SubCategory
    points: int = Field(..., ge=0, le=MAX_POINTS_PER_COMPLETION)
    timestamp: datetime
    details: Optional[dict[str, Any]] = None

    @field_validator("sub_category", mode="before")
    @classmethod
    def normalize_sub_category(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("timestamp must include a timezone")
        if v - datetime.now(timezone.utc) > MAX_FUTURE_SKEW:
            raise ValueError("timestamp cannot be in the future")
        return v

    @field_validator("details")
    @classmethod
    def empty_details_are_none(cls, v: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
        return v or None


# ============================================================================
# HABIT STACK VALIDATION
# ============================================================================

class HabitStackInput(BaseModel):
    """
    Validate a habit stack definition

    Constraints:
    - name: 1-100 characters
    - activities: at least 2 known sub-categories, in order
    - cue: "time" needs HH:MM, "location" and "after_activity" need a value,
      and "after_activity" must name a known sub-category
    """
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    activities: list[SubCategory] = Field(..., min_length=2)
    cue_type: Optional[CueType] = None
    cue_value: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be only whitespace")
        return v

    @model_validator(mode="after")
    def validate_cue(self) -> "HabitStackInput":
        if self.cue_type is None:
            return self

        value = (self.cue_value or "").strip()
        if self.cue_type == "time" and not _TIME_PATTERN.match(value):
            raise ValueError(f"Cue time must be HH:MM, got '{self.cue_value}'")
        if self.cue_type in ("location", "after_activity") and not value:
            raise ValueError(f"cue_value is required for cue type '{self.cue_type}'")
        if self.cue_type == "after_activity" and value not in SUB_CATEGORIES:
            raise ValueError(f"after_activity cue must be a sub-category, got '{value}'")

        self.cue_value = value
        return self


# ============================================================================
# DATE RANGE VALIDATION
# ============================================================================

class DateRangeQuery(BaseModel):
    """
    Validate a score history request

    Either `days` (counted back from end_date, inclusive) or an explicit
    start_date. end_date defaults to the caller-supplied today.
    """
    days: Optional[int] = Field(None, ge=1, le=MAX_RANGE_DAYS)
    start_date: Optional[date] = None
    end_date: date

    @model_validator(mode="after")
    def resolve_range(self) -> "DateRangeQuery":
        if self.start_date is None:
            self.start_date = self.end_date - timedelta(days=(self.days or 7) - 1)
        if self.start_date > self.end_date:
            raise ValueError("start_date must be before end_date")
        if (self.end_date - self.start_date).days + 1 > MAX_RANGE_DAYS:
            raise ValueError(f"Date range cannot exceed {MAX_RANGE_DAYS} days")
        return self


# ============================================================================
# TIMEZONE VALIDATION
# ============================================================================

class TimezoneInput(BaseModel):
    """Validate an IANA timezone name"""
    timezone: str

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Unknown timezone: {v}")
        return v


# ============================================================================
# HELPERS
# ============================================================================

def validate_input(model: Type[ModelT], data: Dict[str, Any], user_id: Optional[str] = None) -> ModelT:
    """
    Build a validated input model, translating pydantic errors

    Raises:
        ValidationError: naming the first offending field
    """
    try:
        return model(**data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            message=first.get("msg", "Invalid input"),
            field=field,
            value=first.get("input"),
            user_id=user_id,
            operation=f"validate_{model.__name__}",
            cause=e,
        )
