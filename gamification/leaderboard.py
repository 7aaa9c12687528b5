"""Leaderboard pages and per-day activity summaries."""
import math
import time
from datetime import datetime, time as dt_time
from typing import Any
from zoneinfo import ZoneInfo

from config import settings
from db import dal
from gamification.awards import local_date, needs_daily_reset

MAX_PAGE_SIZE = 100


def leaderboard_page(handle: str | None = None, limit: int = 20, skip: int = 0) -> dict[str, Any]:
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    skip = max(0, skip)
    entries, total = dal.get_leaderboard(handle, limit=limit, skip=skip)
    return {
        "entries": entries,
        "pagination": {
            "total": total,
            "limit": limit,
            "skip": skip,
            "pages": math.ceil(total / limit),
        },
    }


def daily_summary(handle: str, now: int | None = None) -> list[dict[str, Any]]:
    """Group a user's entries by calendar day, newest day first, flagging today and the best day."""
    now = int(time.time()) if now is None else now
    today = local_date(now)
    days: dict[str, dict[str, Any]] = {}
    for entry in dal.get_leaderboard_entries(handle):
        key = local_date(entry["date"]).isoformat()
        day = days.setdefault(key, {"date": key, "total_xp": 0, "entries": []})
        day["total_xp"] += entry.get("xp_gained", 0)
        day["entries"].append(entry)

    best = max(days.values(), key=lambda d: d["total_xp"], default=None)
    out = sorted(days.values(), key=lambda d: d["date"], reverse=True)
    for day in out:
        day["is_today"] = day["date"] == today.isoformat()
        day["is_highest"] = best is not None and best["total_xp"] > 0 and day["date"] == best["date"]
    return out


def start_of_day(now: int) -> int:
    tz = ZoneInfo(settings.USER_TIMEZONE)
    midnight = datetime.combine(local_date(now), dt_time.min, tzinfo=tz)
    return int(midnight.timestamp())


def daily_activity(handle: str, now: int | None = None) -> dict[str, int]:
    """Problems solved and XP earned today, from the leaderboard log."""
    now = int(time.time()) if now is None else now
    entries = dal.get_leaderboard_entries(handle, from_ts=start_of_day(now))
    return {
        "problemsSolved": len(entries),
        "xpEarned": sum(e.get("xp_gained", 0) for e in entries),
    }


def current_daily_xp(user: dict, now: int | None = None) -> int:
    """Daily XP as it reads now: a counter last reset on an earlier day is 0."""
    now = int(time.time()) if now is None else now
    if needs_daily_reset(user.get("last_xp_reset"), now):
        return 0
    return user.get("daily_xp", 0)
