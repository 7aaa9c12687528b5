from db.client import get_db
from db.collections import (
    leaderboard_collection,
    problems_collection,
    quests_collection,
    users_collection,
)

__all__ = [
    "get_db",
    "users_collection",
    "problems_collection",
    "leaderboard_collection",
    "quests_collection",
]
