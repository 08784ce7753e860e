"""Evolution stages derived from companion level"""

STAGE_NAMES = {
    1: "Baby",
    2: "Teen",
    3: "Adult",
    4: "Legendary",
}

# (minimum level, stage), highest first
_STAGE_THRESHOLDS = ((50, 4), (25, 3), (10, 2))


def stage_for(level: int) -> int:
    """Map a level to its evolution stage (1-4)"""
    for min_level, stage in _STAGE_THRESHOLDS:
        if level >= min_level:
            return stage
    return 1


def stage_name(stage: int) -> str:
    """Display name for a stage; "Unknown" outside 1-4"""
    return STAGE_NAMES.get(stage, "Unknown")


def evolved(previous_level: int, new_level: int) -> bool:
    """True if moving between the two levels crossed into a higher stage"""
    return stage_for(new_level) > stage_for(previous_level)
