import pytest


@pytest.fixture
def user(client):
    client.post("/api/users", json={"handle": "u1"})
    return "u1"


def _give_xp(client, amount):
    client.put("/api/users/u1/update", json={"experience": amount})


def test_catalog_lists_switch_costs(client):
    catalog = {t["id"]: t for t in client.get("/api/themes").json()}
    assert catalog["default"]["cost"] == 0
    assert catalog["default"]["switch_cost"] == 0
    assert catalog["heroes_journey"]["switch_cost"] == 10
    assert catalog["pixel_kingdom"]["switch_cost"] == 15


def test_new_user_owns_default(client, user):
    state = client.get("/api/users/u1/themes").json()
    assert state == {"owned": ["default"], "active": "default", "experience": 0}


def test_purchase_with_insufficient_xp_changes_nothing(client, user):
    _give_xp(client, 80)
    resp = client.post("/api/users/u1/themes/heroes_journey/purchase")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Insufficient XP"
    state = client.get("/api/users/u1/themes").json()
    assert state == {"owned": ["default"], "active": "default", "experience": 80}


def test_purchase_deducts_and_activates(client, user):
    _give_xp(client, 260)
    resp = client.post("/api/users/u1/themes/heroes_journey/purchase")
    assert resp.status_code == 200
    body = resp.json()
    assert body["spent"] == 100
    assert body["experience"] == 160
    assert body["active"] == "heroes_journey"
    assert "heroes_journey" in body["owned"]

    user = client.get("/api/users/u1").json()
    assert user["title"] == "Newbie"
    assert user["max_experience"] == 260

    again = client.post("/api/users/u1/themes/heroes_journey/purchase")
    assert again.status_code == 400


def test_switching_fees(client, user):
    _give_xp(client, 150)
    client.post("/api/users/u1/themes/heroes_journey/purchase")

    resp = client.post("/api/users/u1/themes/default/switch")
    assert resp.json()["spent"] == 0
    assert resp.json()["experience"] == 50

    resp = client.post("/api/users/u1/themes/heroes_journey/switch")
    assert resp.json()["spent"] == 10
    assert resp.json()["experience"] == 40
    assert resp.json()["active"] == "heroes_journey"


def test_switch_requires_ownership(client, user):
    _give_xp(client, 500)
    resp = client.post("/api/users/u1/themes/dark_overlord/switch")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Theme not owned"


def test_unknown_theme(client, user):
    assert client.post("/api/users/u1/themes/neon/purchase").status_code == 404
