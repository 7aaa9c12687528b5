"""Pick the next unsolved Codeforces problem for a handle by scanning finished contests."""
from typing import Any

from config.gamification import DIVISION_PROBLEM_INDICES
from db import dal
from integrations.codeforces import CodeforcesAPI, get_finished_contests
from utils.logging import get_logger

logger = get_logger(__name__)


def selector_division(contest_name: str) -> int | None:
    """Division whose problems are eligible, by "Div. N" in the name (2, 3, 4 tried in order)."""
    for div in DIVISION_PROBLEM_INDICES:
        if f"Div. {div}" in contest_name:
            return div
    return None


def find_unsolved_problem(handle: str, contests: list[dict] | None = None) -> dict[str, Any] | None:
    """Return the first eligible problem the user has not solved, or None.

    Contests are scanned one at a time in source order. Any Codeforces failure aborts the scan.
    """
    if contests is None:
        contests = get_finished_contests()
    solved: set[str] | None = None

    for contest in contests:
        div = selector_division(contest.get("name", ""))
        if div is None:
            logger.debug("Skipping contest %s, no eligible division", contest.get("id"))
            continue

        indices = DIVISION_PROBLEM_INDICES[div]
        standings = CodeforcesAPI.contest_standings(contest["id"])
        candidates = [p for p in standings.get("problems", []) if p.get("index") in indices]

        if solved is None:
            solved = CodeforcesAPI.solved_keys(handle)
            logger.info("%s has %s accepted problems", handle, len(solved))

        for p in candidates:
            if f"{p.get('contestId')}-{p.get('index')}" not in solved:
                logger.info("Next problem for %s: %s%s %s", handle, p.get("contestId"), p.get("index"), p.get("name"))
                return p

    logger.info("No unsolved problem found for %s", handle)
    return None


def assign_next_problem(handle: str) -> dict | None:
    """Return the user's assigned problem, selecting and storing a new one if none is assigned."""
    dal.get_or_create_user(handle)
    existing = dal.get_assigned_problem(handle)
    if existing:
        return existing
    problem = find_unsolved_problem(handle)
    if problem is None:
        return None
    doc, _ = dal.store_problem(handle, problem)
    return doc
