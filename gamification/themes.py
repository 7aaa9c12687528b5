"""Theme store: buy cosmetic themes with XP and switch between owned ones."""
from typing import Any

from config.gamification import DEFAULT_THEME_ID, THEME_SWITCH_FEE_PERCENT, THEMES
from db import dal
from gamification.awards import apply_xp
from utils.errors import BadRequestError, NotFoundError
from utils.logging import get_logger

logger = get_logger(__name__)


def get_theme(theme_id: str) -> dict:
    for theme in THEMES:
        if theme["id"] == theme_id:
            return theme
    raise NotFoundError("Theme not found")


def switch_cost(theme: dict) -> int:
    if theme["id"] == DEFAULT_THEME_ID:
        return 0
    return theme["cost"] * THEME_SWITCH_FEE_PERCENT // 100


def _user(handle: str) -> dict:
    user = dal.get_user(handle)
    if not user:
        raise NotFoundError("User not found")
    return user


def theme_state(handle: str) -> dict[str, Any]:
    user = _user(handle)
    return {
        "owned": user.get("owned_themes") or [DEFAULT_THEME_ID],
        "active": user.get("active_theme") or DEFAULT_THEME_ID,
        "experience": user.get("experience", 0),
    }


def purchase_theme(handle: str, theme_id: str) -> dict[str, Any]:
    theme = get_theme(theme_id)
    user = _user(handle)
    if theme_id in (user.get("owned_themes") or [DEFAULT_THEME_ID]):
        raise BadRequestError("Theme already owned")
    if user.get("experience", 0) < theme["cost"]:
        raise BadRequestError("Insufficient XP")
    if theme["cost"]:
        apply_xp(handle, experience=-theme["cost"])
    dal.add_owned_theme(handle, theme_id)
    logger.info("%s purchased theme %s for %s XP", handle, theme_id, theme["cost"])
    return {**theme_state(handle), "message": f"Purchased and applied {theme['name']}", "spent": theme["cost"]}


def switch_theme(handle: str, theme_id: str) -> dict[str, Any]:
    theme = get_theme(theme_id)
    user = _user(handle)
    if theme_id not in (user.get("owned_themes") or [DEFAULT_THEME_ID]):
        raise BadRequestError("Theme not owned")
    fee = switch_cost(theme)
    if user.get("experience", 0) < fee:
        raise BadRequestError("Insufficient XP")
    if fee:
        apply_xp(handle, experience=-fee)
    dal.update_user(handle, set_fields={"active_theme": theme_id})
    logger.info("%s switched to theme %s (fee %s XP)", handle, theme_id, fee)
    return {**theme_state(handle), "message": f"Switched to {theme['name']}", "spent": fee}
