"""Side quests: user-authored tasks that pay a chosen XP reward once."""
import time
from typing import Any

from config.gamification import QUEST_DEFAULT_REWARD, QUEST_MIN_REWARD
from db import dal
from gamification.awards import apply_xp
from utils.errors import BadRequestError, NotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)


def _clean_title(title: str | None) -> str:
    title = (title or "").strip()
    if not title:
        raise BadRequestError("Quest title is required")
    return title


def _check_reward(xp_reward: int) -> int:
    if xp_reward < QUEST_MIN_REWARD:
        raise BadRequestError(f"XP reward must be at least {QUEST_MIN_REWARD}")
    return xp_reward


def _require_user(handle: str) -> None:
    if not dal.get_user(handle):
        raise NotFoundError("User not found")


def list_quests(handle: str) -> list[dict]:
    _require_user(handle)
    return dal.list_quests(handle)


def create_quest(handle: str, title: str | None, description: str | None = None, xp_reward: int | None = None) -> dict:
    _require_user(handle)
    reward = _check_reward(QUEST_DEFAULT_REWARD if xp_reward is None else xp_reward)
    return dal.add_quest(handle, _clean_title(title), (description or "").strip(), reward)


def update_quest(
    handle: str,
    quest_id: str,
    title: str | None = None,
    description: str | None = None,
    xp_reward: int | None = None,
) -> dict:
    fields: dict[str, Any] = {}
    if title is not None:
        fields["title"] = _clean_title(title)
    if description is not None:
        fields["description"] = description.strip()
    if xp_reward is not None:
        fields["xp_reward"] = _check_reward(xp_reward)
    quest = dal.get_quest(handle, quest_id)
    if not quest:
        raise NotFoundError("Quest not found")
    if quest.get("completed"):
        raise BadRequestError("Quest already completed")
    if not fields:
        return quest
    updated = dal.update_quest(handle, quest_id, fields)
    if not updated:
        raise BadRequestError("Quest already completed")
    return updated


def complete_quest(handle: str, quest_id: str) -> dict[str, Any]:
    """Mark the quest done and pay its reward. A second completion is rejected without XP."""
    quest = dal.get_quest(handle, quest_id)
    if not quest:
        raise NotFoundError("Quest not found")
    completed = dal.mark_quest_completed(handle, quest_id, completed_at=int(time.time()))
    if not completed:
        raise BadRequestError("Quest already completed")
    user = apply_xp(handle, experience=completed["xp_reward"])
    logger.info("Quest %s completed by %s (+%s XP)", quest_id, handle, completed["xp_reward"])
    return {"quest": completed, "user": user}


def delete_quest(handle: str, quest_id: str) -> None:
    if not dal.delete_quest(handle, quest_id):
        raise NotFoundError("Quest not found")
