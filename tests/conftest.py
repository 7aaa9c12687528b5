import os

import mongomock
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("USER_TIMEZONE", "UTC")

import db.client  # noqa: E402
from config import settings  # noqa: E402
from integrations.codeforces import CodeforcesAPI  # noqa: E402
from utils.errors import UpstreamError  # noqa: E402

# 2023-11-14 22:13:20 UTC
DAY_ONE = 1_700_000_000
DAY_ONE_LATER = DAY_ONE + 600
DAY_TWO = DAY_ONE + 2 * 3600


@pytest.fixture(autouse=True)
def mongo(monkeypatch):
    """Every test gets a fresh in-memory MongoDB."""
    monkeypatch.setattr(settings, "CODEFORCES_MIN_INTERVAL", 0.0)
    monkeypatch.setattr(settings, "USER_TIMEZONE", "UTC")
    monkeypatch.setattr(db.client, "_client", mongomock.MongoClient())
    db.client.ensure_indexes()
    yield db.client.get_db()


@pytest.fixture
def client():
    from api.main import app

    with TestClient(app) as c:
        yield c


class FakeCodeforces:
    """In-memory stand-in for the Codeforces API methods the app calls."""

    def __init__(self):
        self.contests: list[dict] = []
        self.problems: dict[int, list[dict]] = {}
        self.accepted: dict[str, list[tuple[int, str]]] = {}
        self.calls: list[str] = []
        self.fail = False

    def add_contest(self, contest_id: int, name: str, indices: list[str], phase: str = "FINISHED") -> None:
        self.contests.append({"id": contest_id, "name": name, "phase": phase})
        self.problems[contest_id] = [
            {"contestId": contest_id, "index": i, "name": f"Problem {contest_id}{i}", "tags": ["math"], "rating": 1500}
            for i in indices
        ]

    def solve(self, handle: str, contest_id: int, index: str) -> None:
        self.accepted.setdefault(handle, []).append((contest_id, index))

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise UpstreamError()

    def contest_list(self, gym: bool = False) -> list[dict]:
        self._check("contest.list")
        return list(self.contests)

    def contest_standings(self, contest_id: int, handles: str | None = None, count: int = 1) -> dict:
        self._check("contest.standings")
        contest = next(c for c in self.contests if c["id"] == contest_id)
        return {"contest": contest, "problems": self.problems[contest_id], "rows": []}

    def user_status(self, handle: str, from_index: int = 1, count: int | None = None) -> list[dict]:
        self._check("user.status")
        subs = [
            {"contestId": cid, "problem": {"contestId": cid, "index": idx}, "verdict": "OK"}
            for cid, idx in self.accepted.get(handle, [])
        ]
        subs.append({"contestId": 1, "problem": {"contestId": 1, "index": "A"}, "verdict": "WRONG_ANSWER"})
        return subs


@pytest.fixture
def fake_cf(monkeypatch):
    fake = FakeCodeforces()
    monkeypatch.setattr(CodeforcesAPI, "contest_list", staticmethod(fake.contest_list))
    monkeypatch.setattr(CodeforcesAPI, "contest_standings", staticmethod(fake.contest_standings))
    monkeypatch.setattr(CodeforcesAPI, "user_status", staticmethod(fake.user_status))
    return fake
