import pytest

from integrations import codeforces
from utils.errors import UpstreamError

PROBLEM = {"contestId": 1700, "index": "C", "name": "Cookies", "rating": 1400, "tags": ["greedy"]}


def test_store_problem_keeps_single_assignment(client):
    resp = client.post("/api/storeProblem", json={"handle": "u1", "problem": PROBLEM})
    assert resp.status_code == 200
    first = resp.json()["problem"]
    assert first["assigned_to"] == "u1"
    assert client.get("/api/users/u1").json()["current_problem"] == first["_id"]

    other = {**PROBLEM, "index": "D", "name": "Dominoes"}
    resp = client.post("/api/storeProblem", json={"handle": "u1", "problem": other})
    assert resp.json()["message"] == "Problem already assigned"
    assert resp.json()["problem"] == first


def test_store_problem_validates_input(client):
    assert client.post("/api/storeProblem", json={"problem": PROBLEM}).status_code == 400
    assert client.post("/api/storeProblem", json={"handle": "u1"}).status_code == 400
    resp = client.post("/api/storeProblem", json={"handle": "u1", "problem": {"name": "x"}})
    assert resp.status_code == 400


@pytest.mark.parametrize("problem", [
    {"contestId": "abc", "index": "C"},
    {"contestId": 1700, "index": 5},
    {"contestId": 1700, "index": "  "},
    {"contestId": None, "index": "C"},
])
def test_store_problem_rejects_malformed_problem(client, problem):
    resp = client.post("/api/storeProblem", json={"handle": "u1", "problem": problem})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Problem must include contestId and index"}
    assert client.get("/api/getStoredProblem", params={"handle": "u1"}).status_code == 404


def test_get_and_delete_stored_problem(client):
    assert client.get("/api/getStoredProblem", params={"handle": "u1"}).status_code == 404
    client.post("/api/storeProblem", json={"handle": "u1", "problem": PROBLEM})

    resp = client.get("/api/getStoredProblem", params={"handle": "u1"})
    assert resp.json()["problem"]["name"] == "Cookies"

    assert client.delete("/api/deleteProblem", params={"handle": "u1"}).status_code == 200
    assert client.delete("/api/deleteProblem", params={"handle": "u1"}).status_code == 404
    assert client.get("/api/getStoredProblem").status_code == 400


def test_assign_problem(client, fake_cf):
    fake_cf.add_contest(1901, "Codeforces Round 913 (Div. 3)", ["A", "D", "E"])
    resp = client.post("/api/assignProblem", json={"handle": "u1"})
    assert resp.status_code == 200
    assert resp.json()["problem"]["index"] == "D"


def test_assign_problem_none_left(client, fake_cf):
    fake_cf.add_contest(1901, "Codeforces Round 913 (Div. 1)", ["A", "D"])
    resp = client.post("/api/assignProblem", json={"handle": "u1"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "No unsolved problem found"


def test_assign_problem_upstream_failure(client, fake_cf):
    fake_cf.fail = True
    resp = client.post("/api/assignProblem", json={"handle": "u1"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch Codeforces data"}


def test_mark_solved_awards_and_assigns_next(client, fake_cf):
    fake_cf.add_contest(1902, "Codeforces Round 914 (Div. 2)", ["A", "C", "D"])
    client.post("/api/assignProblem", json={"handle": "u1"})
    fake_cf.solve("u1", 1902, "C")

    resp = client.post("/api/markSolved", json={"handle": "u1"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["xp_awarded"] == 20
    assert body["user"]["experience"] == 20
    assert body["user"]["total_problems_solved"] == 1
    assert body["next_problem"]["index"] == "D"
    board = client.get("/api/leaderboard", params={"handle": "u1"}).json()
    assert board["pagination"]["total"] == 1
    assert board["entries"][0]["xp_gained"] == 20


def test_mark_solved_with_editorial_deduction(client, fake_cf):
    fake_cf.add_contest(1902, "Codeforces Round 914 (Div. 2)", ["D"])
    client.post("/api/assignProblem", json={"handle": "u1"})
    fake_cf.solve("u1", 1902, "D")

    body = client.post("/api/markSolved", json={"handle": "u1", "assistance": "editorial"}).json()

    assert body["base_xp"] == 15
    assert body["xp_awarded"] == 6
    assert body["next_problem"] is None


def test_mark_solved_before_accepted(client, fake_cf):
    fake_cf.add_contest(1902, "Codeforces Round 914 (Div. 2)", ["C"])
    client.post("/api/assignProblem", json={"handle": "u1"})
    resp = client.post("/api/markSolved", json={"handle": "u1"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Problem not solved yet"


def test_proxy_passthrough(client, monkeypatch):
    payload = {"status": "OK", "result": [{"id": 1, "name": "Round", "phase": "FINISHED"}]}
    monkeypatch.setattr(codeforces, "raw_contest_list", lambda: payload)
    assert client.get("/proxy/codeforces/getcontests").json() == payload


def test_proxy_requires_params(client):
    assert client.get("/proxy/codeforces/getSubmissions").json() == {"error": "Missing 'handle' parameter"}
    assert client.get("/proxy/codeforces/getStandings").status_code == 400


def test_proxy_upstream_failure(client, monkeypatch):
    def boom(handle):
        raise UpstreamError()

    monkeypatch.setattr(codeforces, "raw_user_status", boom)
    resp = client.get("/proxy/codeforces/getSubmissions", params={"handle": "u1"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch submissions"}
