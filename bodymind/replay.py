"""
Replay a JSON-lines event log through the engine and print the result

Each line is one JSON object with a "type":

    {"type": "timezone", "user_id": "u1", "timezone": "Europe/Stockholm"}
    {"type": "completion", "ref": "c1", "user_id": "u1", "habit_id": "run",
     "sub_category": "training", "points": 60,
     "timestamp": "2025-01-15T08:00:00+00:00", "details": {"km": 5}}
    {"type": "delete", "user_id": "u1", "ref": "c1"}
    {"type": "biometrics", "user_id": "u1", "date": "2025-01-15", "strain": 12.5}
    {"type": "weights", "user_id": "u1", "preset": "athlete"}

"ref" names a completion so a later "delete" line can point at it. Lines
that fail validation are logged and skipped.

Usage:
    bodymind-replay events.jsonl --now 2025-01-20T12:00:00+00:00
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from bodymind import config
from bodymind.exceptions import BodyMindError
from bodymind.gamification.streak_system import format_streak_display
from bodymind.services.container import init_container
from bodymind.utils.datetime_helpers import ensure_utc, now_utc, parse_user_date

logger = logging.getLogger(__name__)


async def apply_line(service, entry: Dict[str, Any], refs: Dict[str, str]) -> None:
    """Apply one decoded log entry"""
    kind = entry.get("type", "completion")
    user_id = entry["user_id"]

    if kind == "timezone":
        await service.set_user_timezone(user_id, entry["timezone"])
    elif kind == "completion":
        result = await service.record_completion(
            user_id=user_id,
            habit_id=entry["habit_id"],
            sub_category=entry["sub_category"],
            points=entry.get("points", 0),
            timestamp=datetime.fromisoformat(entry["timestamp"]),
            details=entry.get("details"),
        )
        if entry.get("ref"):
            refs[entry["ref"]] = result["event"].id
    elif kind == "delete":
        event_id = refs.get(entry.get("ref"), entry.get("event_id"))
        await service.delete_completion(user_id, event_id)
    elif kind == "biometrics":
        readings = {k: v for k, v in entry.items() if k not in ("type", "user_id", "date")}
        await service.record_biometrics(user_id, parse_user_date(entry["date"]), readings)
    elif kind == "weights":
        result = await service.update_weights(
            user_id, entry["preset"], entry.get("body"), entry.get("mind")
        )
        for error in result.errors:
            logger.warning(f"Weights rejected for {user_id}: {error.field}: {error.message}")
    else:
        raise ValueError(f"Unknown entry type '{kind}'")


async def replay(path: Path) -> Dict[str, Any]:
    """
    Replay a log file into a fresh in-memory store.

    Returns:
        {
            'applied': int,
            'skipped': int,
            'users': [str],
            'service': CompletionService,
        }
    """
    container = init_container()
    service = container.completion_service
    refs: Dict[str, str] = {}
    users: List[str] = []
    applied = skipped = 0

    with path.open(encoding="utf-8") as handle:
        for line_no, line in enumerate(handle, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                entry = json.loads(line)
                await apply_line(service, entry, refs)
            except (BodyMindError, ValueError, KeyError, TypeError) as e:
                skipped += 1
                logger.warning(f"Line {line_no} skipped: {e}")
                continue

            applied += 1
            if entry["user_id"] not in users:
                users.append(entry["user_id"])
            # Keep recomputes in log order
            await service.dispatcher.drain()

    logger.info(f"Replayed {applied} entries from {path} ({skipped} skipped)")
    return {"applied": applied, "skipped": skipped, "users": users, "service": service}


async def render_user(service, user_id: str, now: datetime) -> str:
    lines = [f"=== {user_id} ===", ""]

    for view in await service.get_companions(user_id, now):
        lines.append(
            f"{view.name} the {view.species} ({view.category}): "
            f"level {view.level} {view.stage_name}, {view.experience} XP, "
            f"health {view.health} ({view.mood})"
            + (" ⚠️ needs attention" if view.needs_attention else "")
        )

    lines.append("")
    lines.append(format_streak_display(await service.get_streaks(user_id, now)))

    history = await service.get_score_history(user_id, days=7, now=now)
    summary = history.summary
    lines.append("")
    lines.append(
        f"Last {summary.total_days} days: body {summary.average_body}, mind {summary.average_mind}, "
        f"balance {summary.average_balance}, perfect days {summary.perfect_days}"
    )

    achievements = await service.get_achievements(user_id)
    if achievements:
        lines.append(f"Achievements: {', '.join(achievements)}")

    return "\n".join(lines)


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Replay a JSON-lines completion log through the engine")
    parser.add_argument("path", type=Path, help="JSON-lines event log")
    parser.add_argument("--now", help="Evaluate views at this ISO-8601 instant (default: current time)")
    parser.add_argument("--user", help="Only print this user")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, args.log_level.upper(), logging.INFO)
    )

    try:
        config.validate_config()
    except BodyMindError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    now = ensure_utc(datetime.fromisoformat(args.now)) if args.now else now_utc()
    result = await replay(args.path)

    users = [args.user] if args.user else result["users"]
    for user_id in users:
        print(await render_user(result["service"], user_id, now))
        print()

    return 1 if result["skipped"] else 0


def run() -> None:
    """Console script entry point"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
