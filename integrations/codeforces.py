"""Codeforces official API client. Rate limit: 1 request per CODEFORCES_MIN_INTERVAL seconds."""
import threading
import time
from typing import Any

import requests

from config import settings
from utils.errors import UpstreamError
from utils.logging import get_logger

logger = get_logger(__name__)

_last_request_time = 0.0
_rate_lock = threading.Lock()


def _rate_limit() -> None:
    global _last_request_time
    with _rate_lock:
        now = time.time()
        elapsed = now - _last_request_time
        if elapsed < settings.CODEFORCES_MIN_INTERVAL:
            time.sleep(settings.CODEFORCES_MIN_INTERVAL - elapsed)
        _last_request_time = time.time()


def _request(method: str, params: dict[str, str | int] | None = None) -> dict[str, Any]:
    """Call an API method and return the JSON body untouched."""
    _rate_limit()
    url = f"{settings.CODEFORCES_API_BASE}/{method}"
    try:
        r = requests.get(url, params=params or {}, timeout=settings.CODEFORCES_TIMEOUT)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Codeforces API %s failed: %s", method, e)
        raise UpstreamError() from e


def _get(method: str, params: dict[str, str | int] | None = None) -> Any:
    data = _request(method, params)
    if data.get("status") != "OK":
        logger.warning("Codeforces API %s returned %s: %s", method, data.get("status"), data.get("comment"))
        raise UpstreamError(data.get("comment") or "Codeforces API error")
    return data.get("result", data)


class CodeforcesAPI:
    @staticmethod
    def contest_list(gym: bool = False) -> list[dict]:
        return _get("contest.list", {"gym": "true" if gym else "false"})

    @staticmethod
    def contest_standings(contest_id: int, handles: str | None = None, count: int = 1) -> dict:
        """Standings of a contest; the result also carries the `contest` and its `problems`."""
        params: dict = {"contestId": contest_id, "from": 1, "count": count, "showUnofficial": "false"}
        if handles:
            params["handles"] = handles
        return _get("contest.standings", params)

    @staticmethod
    def user_status(handle: str, from_index: int = 1, count: int | None = None) -> list[dict]:
        """Submissions of a user, newest first. count=None returns the full history."""
        params: dict = {"handle": handle}
        if count is not None:
            params.update({"from": from_index, "count": count})
        return _get("user.status", params)

    @staticmethod
    def solved_keys(handle: str) -> set[str]:
        """Accepted submissions as a set of "{contestId}-{index}" keys."""
        return {
            f"{s.get('contestId')}-{(s.get('problem') or {}).get('index')}"
            for s in CodeforcesAPI.user_status(handle)
            if s.get("verdict") == "OK"
        }


# --- Verbatim passthroughs for the /proxy routes ---
def raw_contest_list() -> dict[str, Any]:
    return _request("contest.list")


def raw_user_status(handle: str) -> dict[str, Any]:
    return _request("user.status", {"handle": handle})


def raw_contest_standings(contest_id: int | str) -> dict[str, Any]:
    return _request(
        "contest.standings",
        {"contestId": contest_id, "from": 1, "count": 1, "showUnofficial": "false"},
    )


def get_finished_contests() -> list[dict]:
    """Finished non-gym contests, in the order the API lists them (newest first)."""
    return [c for c in CodeforcesAPI.contest_list(gym=False) if c.get("phase") == "FINISHED"]
