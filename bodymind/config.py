"""Configuration management"""
import os
from typing import Mapping

from dotenv import load_dotenv

from bodymind.exceptions import ConfigurationError

load_dotenv()

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Calendar days are evaluated in this zone unless a user supplies their own
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")

# Pillar score (0-100) a day must reach to count as complete and extend a streak
PILLAR_COMPLETION_THRESHOLD: int = int(os.getenv("PILLAR_COMPLETION_THRESHOLD", "50"))

# Points per sub-category that saturate its daily sub-score.
# Format: "training=100,sleep=80" - unlisted sub-categories keep the default.
DEFAULT_SUB_CATEGORY_CAP: int = int(os.getenv("DEFAULT_SUB_CATEGORY_CAP", "100"))


def parse_caps(raw: str, default: int) -> dict[str, int]:
    """Parse a "name=value,name=value" caps string into a dict"""
    from bodymind.models.completion import SUB_CATEGORIES

    caps = {sub: default for sub in SUB_CATEGORIES}
    for chunk in filter(None, (part.strip() for part in raw.split(","))):
        name, sep, value = chunk.partition("=")
        name = name.strip().lower()
        if not sep or name not in caps:
            raise ConfigurationError(
                f"Invalid sub-category cap entry '{chunk}'",
                config_key="SUB_CATEGORY_DAILY_CAPS",
            )
        try:
            caps[name] = int(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Cap for '{name}' must be an integer, got '{value.strip()}'",
                config_key="SUB_CATEGORY_DAILY_CAPS",
                cause=e,
            )
    return caps


SUB_CATEGORY_DAILY_CAPS: dict[str, int] = parse_caps(
    os.getenv("SUB_CATEGORY_DAILY_CAPS", ""), DEFAULT_SUB_CATEGORY_CAP
)


def validate_caps(caps: Mapping[str, int]) -> Mapping[str, int]:
    """Check every sub-category has a positive cap; returns the caps unchanged"""
    from bodymind.models.completion import SUB_CATEGORIES

    missing = [sub for sub in SUB_CATEGORIES if sub not in caps]
    if missing:
        raise ConfigurationError(
            f"No daily cap for {', '.join(missing)}",
            config_key="SUB_CATEGORY_DAILY_CAPS",
        )
    for name, cap in caps.items():
        if cap <= 0:
            raise ConfigurationError(
                f"Daily cap for '{name}' must be positive",
                config_key="SUB_CATEGORY_DAILY_CAPS",
            )
    return caps


# Validation
def validate_config() -> None:
    """Validate scoring configuration"""
    if not 0 < PILLAR_COMPLETION_THRESHOLD <= 100:
        raise ConfigurationError(
            "PILLAR_COMPLETION_THRESHOLD must be between 1 and 100",
            config_key="PILLAR_COMPLETION_THRESHOLD",
        )
    validate_caps(SUB_CATEGORY_DAILY_CAPS)
    try:
        from zoneinfo import ZoneInfo
        ZoneInfo(DEFAULT_TIMEZONE)
    except Exception as e:
        raise ConfigurationError(
            f"Unknown DEFAULT_TIMEZONE '{DEFAULT_TIMEZONE}'",
            config_key="DEFAULT_TIMEZONE",
            cause=e,
        )
