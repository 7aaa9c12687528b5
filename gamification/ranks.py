"""Rank titles from cumulative XP."""
from typing import Any

from config.gamification import RANK_THRESHOLDS


def title_for(experience: int) -> str:
    """Highest threshold title not exceeding experience."""
    title = RANK_THRESHOLDS[0][1]
    for threshold, name in RANK_THRESHOLDS:
        if experience >= threshold:
            title = name
        else:
            break
    return title


def rank_progress(experience: int, max_experience: int = 0) -> dict[str, Any]:
    """Current title, the next one and how far away it is.

    peak_title is the permanent floor reached by the high-water mark.
    """
    next_threshold = None
    next_title = None
    for threshold, name in RANK_THRESHOLDS:
        if threshold > experience:
            next_threshold, next_title = threshold, name
            break
    return {
        "title": title_for(experience),
        "peak_title": title_for(max(experience, max_experience)),
        "next_title": next_title,
        "next_threshold": next_threshold,
        "xp_to_next": None if next_threshold is None else next_threshold - experience,
    }
