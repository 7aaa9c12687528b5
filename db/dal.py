"""Data access layer: users, assigned problems, leaderboard entries, side quests."""
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from db.collections import (
    leaderboard_collection,
    leaderboard_entry_doc,
    problem_doc,
    problems_collection,
    quest_doc,
    quests_collection,
    user_doc,
    users_collection,
)


def _serialize_doc(doc: dict | None) -> dict | None:
    """Convert MongoDB ObjectId fields to strings so FastAPI can JSON-serialize them."""
    if doc is None:
        return None
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    return out


def _serialize_docs(docs: list[dict]) -> list[dict]:
    """Convert a list of MongoDB documents for JSON serialization."""
    return [_serialize_doc(d) for d in docs]


def _oid(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


# --- Users ---
def get_user(handle: str) -> dict | None:
    return _serialize_doc(users_collection().find_one({"handle": handle}))


def create_user(handle: str) -> dict | None:
    """Insert a new user. Returns None if the handle is already registered."""
    doc = user_doc(handle)
    try:
        r = users_collection().insert_one(doc)
    except DuplicateKeyError:
        return None
    doc["_id"] = str(r.inserted_id)
    return doc


def get_or_create_user(handle: str) -> dict:
    doc = get_user(handle)
    if doc:
        return doc
    return create_user(handle) or get_user(handle)


def delete_user(handle: str) -> bool:
    """Delete the user with their assigned problem and quests. Leaderboard history is kept."""
    r = users_collection().delete_one({"handle": handle})
    if r.deleted_count == 0:
        return False
    problems_collection().delete_many({"assigned_to": handle})
    quests_collection().delete_many({"user_handle": handle})
    return True


def update_user(
    handle: str,
    inc: dict[str, int] | None = None,
    set_fields: dict[str, Any] | None = None,
    min_experience: int | None = None,
) -> dict | None:
    """Apply $inc/$set to one user in a single atomic update and return the updated document.

    With min_experience, the update only matches while experience >= min_experience.
    Returns None when no document matched.
    """
    query: dict[str, Any] = {"handle": handle}
    if min_experience is not None:
        query["experience"] = {"$gte": min_experience}
    update: dict[str, Any] = {}
    if inc:
        update["$inc"] = inc
    if set_fields:
        update["$set"] = set_fields
    if not update:
        return get_user(handle) if min_experience is None else None
    doc = users_collection().find_one_and_update(query, update, return_document=ReturnDocument.AFTER)
    return _serialize_doc(doc)


def raise_max_experience(handle: str, experience: int) -> None:
    users_collection().update_one(
        {"handle": handle, "max_experience": {"$lt": experience}},
        {"$set": {"max_experience": experience}},
    )


def add_owned_theme(handle: str, theme_id: str, activate: bool = True) -> dict | None:
    update: dict[str, Any] = {"$addToSet": {"owned_themes": theme_id}}
    if activate:
        update["$set"] = {"active_theme": theme_id}
    doc = users_collection().find_one_and_update({"handle": handle}, update, return_document=ReturnDocument.AFTER)
    return _serialize_doc(doc)


# --- Assigned problems ---
def get_assigned_problem(handle: str) -> dict | None:
    return _serialize_doc(problems_collection().find_one({"assigned_to": handle}))


def store_problem(handle: str, problem: dict) -> tuple[dict, bool]:
    """Assign a problem to the user unless one is already assigned.

    Returns (problem, created). An existing assignment is returned unchanged.
    """
    existing = get_assigned_problem(handle)
    if existing:
        return existing, False
    doc = problem_doc(problem, assigned_to=handle)
    try:
        r = problems_collection().insert_one(doc)
    except DuplicateKeyError:
        # Lost a race with a concurrent assignment; keep the winner's problem.
        return get_assigned_problem(handle), False
    doc["_id"] = str(r.inserted_id)
    users_collection().update_one({"handle": handle}, {"$set": {"current_problem": doc["_id"]}})
    return doc, True


def take_assigned_problem(handle: str) -> dict | None:
    """Atomically remove and return the user's assigned problem. Only one caller gets it."""
    doc = problems_collection().find_one_and_delete({"assigned_to": handle})
    if doc is None:
        return None
    users_collection().update_one({"handle": handle}, {"$set": {"current_problem": None}})
    return _serialize_doc(doc)


def delete_assigned_problem(handle: str) -> bool:
    return take_assigned_problem(handle) is not None


# --- Leaderboard ---
def add_leaderboard_entry(
    handle: str,
    xp_gained: int,
    problem_id: str,
    problem_name: str,
    contest_id: int | None = None,
    date: int | None = None,
) -> dict:
    doc = leaderboard_entry_doc(
        handle=handle,
        xp_gained=xp_gained,
        problem_id=problem_id,
        problem_name=problem_name,
        contest_id=contest_id,
        date=date,
    )
    r = leaderboard_collection().insert_one(doc)
    doc["_id"] = str(r.inserted_id)
    return doc


def _leaderboard_query(handle: str | None, from_ts: int | None = None) -> dict:
    q: dict[str, Any] = {}
    if handle:
        q["handle"] = handle
    if from_ts is not None:
        q["date"] = {"$gte": from_ts}
    return q


def get_leaderboard(handle: str | None = None, limit: int = 20, skip: int = 0) -> tuple[list[dict], int]:
    """Newest first. Returns (page, total matching entries)."""
    q = _leaderboard_query(handle)
    coll = leaderboard_collection()
    total = coll.count_documents(q)
    cursor = coll.find(q).sort([("date", DESCENDING), ("_id", DESCENDING)]).skip(skip).limit(limit)
    return _serialize_docs(list(cursor)), total


def get_leaderboard_entries(handle: str, from_ts: int | None = None) -> list[dict]:
    q = _leaderboard_query(handle, from_ts)
    cursor = leaderboard_collection().find(q).sort([("date", DESCENDING), ("_id", DESCENDING)])
    return _serialize_docs(list(cursor))


# --- Quests ---
def list_quests(handle: str) -> list[dict]:
    cursor = quests_collection().find({"user_handle": handle}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
    return _serialize_docs(list(cursor))


def add_quest(handle: str, title: str, description: str, xp_reward: int) -> dict:
    doc = quest_doc(handle, title=title, description=description, xp_reward=xp_reward)
    r = quests_collection().insert_one(doc)
    doc["_id"] = str(r.inserted_id)
    return doc


def get_quest(handle: str, quest_id: str) -> dict | None:
    oid = _oid(quest_id)
    if oid is None:
        return None
    return _serialize_doc(quests_collection().find_one({"_id": oid, "user_handle": handle}))


def update_quest(handle: str, quest_id: str, fields: dict[str, Any]) -> dict | None:
    """Edit an open quest. Returns None if it does not exist or is already completed."""
    oid = _oid(quest_id)
    if oid is None:
        return None
    doc = quests_collection().find_one_and_update(
        {"_id": oid, "user_handle": handle, "completed": False},
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )
    return _serialize_doc(doc)


def mark_quest_completed(handle: str, quest_id: str, completed_at: int) -> dict | None:
    """Flip completed false->true once. Returns None if missing or already completed."""
    oid = _oid(quest_id)
    if oid is None:
        return None
    doc = quests_collection().find_one_and_update(
        {"_id": oid, "user_handle": handle, "completed": False},
        {"$set": {"completed": True, "completed_at": completed_at}},
        return_document=ReturnDocument.AFTER,
    )
    return _serialize_doc(doc)


def delete_quest(handle: str, quest_id: str) -> bool:
    oid = _oid(quest_id)
    if oid is None:
        return False
    return quests_collection().delete_one({"_id": oid, "user_handle": handle}).deleted_count > 0
