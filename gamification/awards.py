"""XP awards: division/index lookup, assistance deductions, daily reset and the single XP update path."""
import math
import time
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from config import settings
from config.gamification import ASSISTANCE_DEDUCTIONS, XP_TABLE
from db import dal
from gamification.ranks import title_for
from integrations.codeforces import CodeforcesAPI
from utils.errors import BadRequestError, NotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)

_DIVISIONS = ("Div. 1", "Div. 2", "Div. 3", "Div. 4")


def local_date(ts: int, tz_name: str | None = None) -> date:
    return datetime.fromtimestamp(ts, ZoneInfo(tz_name or settings.USER_TIMEZONE)).date()


def needs_daily_reset(last_reset: int | None, now: int, tz_name: str | None = None) -> bool:
    if last_reset is None:
        return True
    return local_date(last_reset, tz_name) != local_date(now, tz_name)


def contest_division(contest_name: str | None) -> str | None:
    """First of "Div. 1".."Div. 4" mentioned in the contest name."""
    if not contest_name:
        return None
    for division in _DIVISIONS:
        if division in contest_name:
            return division
    return None


def base_xp(division: str | None, index: str) -> int:
    if not division or not index:
        return 0
    return XP_TABLE.get(f"{division}{index}", 0)


def apply_deduction(xp: int, assistance: str = "none") -> int:
    """Deduct the assistance percentage, rounding the deduction up.

    A deducted award never drops below 1 XP.
    """
    if assistance not in ASSISTANCE_DEDUCTIONS:
        raise BadRequestError(f"Unknown assistance level '{assistance}'")
    deduction = math.ceil(xp * ASSISTANCE_DEDUCTIONS[assistance] / 100)
    if deduction <= 0:
        return xp
    return max(1, xp - deduction)


def apply_xp(
    handle: str,
    experience: int = 0,
    problems_solved: int = 0,
    problem_id: str | None = None,
    problem_name: str | None = None,
    contest_id: int | None = None,
    now: int | None = None,
) -> dict:
    """Apply an XP delta (award or spend) and a solved-count delta to a user.

    Positive deltas count toward daily XP, resetting it first on a new calendar day.
    Negative deltas only apply while the balance covers them.
    A leaderboard entry is appended when problem_id and problem_name are given.
    """
    user = dal.get_user(handle)
    if not user:
        raise NotFoundError("User not found")
    now = int(time.time()) if now is None else now

    inc: dict[str, int] = {}
    set_fields: dict[str, Any] = {}
    if problems_solved:
        inc["total_problems_solved"] = problems_solved

    if experience > 0:
        inc["experience"] = experience
        if needs_daily_reset(user.get("last_xp_reset"), now):
            set_fields["daily_xp"] = experience
            set_fields["last_xp_reset"] = now
        else:
            inc["daily_xp"] = experience
        updated = dal.update_user(handle, inc=inc, set_fields=set_fields)
    elif experience < 0:
        inc["experience"] = experience
        updated = dal.update_user(handle, inc=inc, min_experience=-experience)
        if updated is None:
            raise BadRequestError("Insufficient XP")
    else:
        updated = dal.update_user(handle, inc=inc)
    if updated is None:
        raise NotFoundError("User not found")

    title = title_for(updated["experience"])
    if title != updated.get("title"):
        updated = dal.update_user(handle, set_fields={"title": title}) or {**updated, "title": title}
    if updated["experience"] > updated.get("max_experience", 0):
        dal.raise_max_experience(handle, updated["experience"])
        updated["max_experience"] = updated["experience"]

    if problem_id and problem_name:
        dal.add_leaderboard_entry(
            handle=handle,
            xp_gained=experience,
            problem_id=problem_id,
            problem_name=problem_name,
            contest_id=contest_id,
            date=now,
        )
    logger.info("XP %+d for %s -> %s (%s)", experience, handle, updated["experience"], updated["title"])
    return updated


def complete_assigned_problem(handle: str, assistance: str = "none") -> dict[str, Any]:
    """Verify the assigned problem is accepted on Codeforces, award its XP and clear the assignment."""
    if assistance not in ASSISTANCE_DEDUCTIONS:
        raise BadRequestError(f"Unknown assistance level '{assistance}'")
    problem = dal.get_assigned_problem(handle)
    if not problem:
        raise NotFoundError("No problem assigned")

    contest_id = problem["contest_id"]
    index = problem["index"]
    if f"{contest_id}-{index}" not in CodeforcesAPI.solved_keys(handle):
        raise BadRequestError("Problem not solved yet")

    contest = CodeforcesAPI.contest_standings(contest_id).get("contest") or {}
    base = base_xp(contest_division(contest.get("name")), index)
    xp = apply_deduction(base, assistance)

    # Concurrent completions race here; only one removes the assignment.
    taken = dal.take_assigned_problem(handle)
    if not taken:
        raise NotFoundError("No problem assigned")

    user = apply_xp(
        handle,
        experience=xp,
        problems_solved=1,
        problem_id=f"{contest_id}{index}",
        problem_name=taken.get("name") or f"{contest_id}{index}",
        contest_id=contest_id,
    )
    return {"base_xp": base, "xp_awarded": xp, "problem": taken, "user": user}
