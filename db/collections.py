"""Collection accessors and document shape helpers. Use get_db()[name] for raw access."""
import time

from pymongo.collection import Collection
from pymongo.database import Database

from config.gamification import DEFAULT_THEME_ID, QUEST_DEFAULT_REWARD, RANK_THRESHOLDS
from db.client import get_db


def _coll(db: Database, name: str) -> Collection:
    return db[name]


def users_collection() -> Collection:
    return _coll(get_db(), "users")


def problems_collection() -> Collection:
    return _coll(get_db(), "problems")


def leaderboard_collection() -> Collection:
    return _coll(get_db(), "leaderboard")


def quests_collection() -> Collection:
    return _coll(get_db(), "quests")


# --- Document helpers (for consistent keys) ---
def user_doc(handle: str, now: int | None = None) -> dict:
    now = int(time.time()) if now is None else now
    return {
        "handle": handle,
        "title": RANK_THRESHOLDS[0][1],
        "experience": 0,
        "max_experience": 0,
        "total_problems_solved": 0,
        "current_problem": None,
        "daily_xp": 0,
        "last_xp_reset": now,
        "owned_themes": [DEFAULT_THEME_ID],
        "active_theme": DEFAULT_THEME_ID,
        "created_at": now,
    }


def problem_doc(problem: dict, assigned_to: str) -> dict:
    """Build a stored problem from a Codeforces problem object (camelCase keys) or our own shape."""
    return {
        "contest_id": int(problem.get("contestId", problem.get("contest_id", 0)) or 0),
        "index": str(problem.get("index", "")),
        "name": problem.get("name", ""),
        "type": problem.get("type"),
        "points": problem.get("points"),
        "rating": problem.get("rating"),
        "tags": list(problem.get("tags") or []),
        "assigned_to": assigned_to,
        "assigned_at": int(time.time()),
    }


def leaderboard_entry_doc(
    handle: str,
    xp_gained: int,
    problem_id: str,
    problem_name: str,
    contest_id: int | None = None,
    display_name: str | None = None,
    date: int | None = None,
) -> dict:
    return {
        "handle": handle,
        "display_name": display_name or handle,
        "xp_gained": xp_gained,
        "problem_id": problem_id,
        "problem_name": problem_name,
        "contest_id": contest_id,
        "date": int(time.time()) if date is None else date,
    }


def quest_doc(
    user_handle: str,
    title: str,
    description: str = "",
    xp_reward: int = QUEST_DEFAULT_REWARD,
) -> dict:
    return {
        "user_handle": user_handle,
        "title": title,
        "description": description,
        "xp_reward": xp_reward,
        "completed": False,
        "completed_at": None,
        "created_at": int(time.time()),
    }
