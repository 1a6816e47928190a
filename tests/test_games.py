from datetime import datetime

from database_init import db
from models.game import Game

GAME = {
    "url": "space-run",
    "title": "Space Run",
    "desc": "Run through space",
    "category": "action",
    "game_url": "https://games.example.com/space-run",
    "game_icon": ["https://cdn.example.com/icon.png"],
    "game_developer": "Orbit Studio",
    "game_publish_year": 2020,
    "game_controls": {"keyboard": True},
}


def _seed_games():
    db.session.add_all(
        [
            Game(url="a", title="Alpha", category="puzzle", game_developer="Zed", game_publish_year=2019, is_featured=True),
            Game(url="b", title="Beta", category="action", game_developer="Orbit Studio", game_publish_year=2021),
            Game(url="c", title="Gamma", category="action", game_developer="Acme", game_publish_year=2015),
        ]
    )
    db.session.commit()


def test_create_game_fills_default_controls(client, login):
    login("editor")

    resp = client.post("/api/admin/games", json=GAME)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["game_controls"] == {"keyboard": True, "mouse": False, "touch": False}
    assert data["game_icon"] == ["https://cdn.example.com/icon.png"]
    assert data["game_thumb"] == []


def test_create_game_validation(client, login):
    login("editor")
    bad = {
        **GAME,
        "game_url": "nope",
        "game_publish_year": 1970,
        "game_controls": {"joystick": True},
        "game_icon": [1, 2],
    }

    resp = client.post("/api/admin/games", json=bad)

    assert resp.status_code == 400
    assert set(resp.get_json()["details"]) == {
        "game_url",
        "game_publish_year",
        "game_controls",
        "game_icon",
    }


def test_publish_year_upper_bound_is_current_year(client, login):
    login("editor")
    resp = client.post(
        "/api/admin/games", json={**GAME, "game_publish_year": datetime.utcnow().year + 1}
    )
    assert resp.status_code == 400


def test_duplicate_slug_conflict(client, login):
    login("editor")
    assert client.post("/api/admin/games", json=GAME).status_code == 201
    assert client.post("/api/admin/games", json=GAME).status_code == 409


def test_update_merges_controls(client, login):
    login("editor")
    created = client.post("/api/admin/games", json=GAME).get_json()["data"]

    resp = client.put(
        f"/api/admin/games/{created['id']}",
        json={"game_controls": {"touch": True}, "is_featured": True},
    )

    data = resp.get_json()["data"]
    assert data["game_controls"] == {"keyboard": True, "mouse": False, "touch": True}
    assert data["is_featured"] is True
    assert data["title"] == "Space Run"


def test_filters_endpoint(client, login):
    login("viewer")
    _seed_games()

    data = client.get("/api/admin/games/filters").get_json()["data"]

    assert data == {
        "categories": ["action", "puzzle"],
        "developers": ["Acme", "Orbit Studio", "Zed"],
        "years": [2021, 2019, 2015],
    }


def test_admin_list_default_limit_and_search(client, login):
    login("viewer")
    _seed_games()

    resp = client.get("/api/admin/games?search=orbit").get_json()

    assert [g["title"] for g in resp["data"]] == ["Beta"]
    assert resp["pagination"]["limit"] == 10


def test_public_games_sorting_and_filters(client):
    _seed_games()

    by_year = client.get("/api/games?sort=publish_year").get_json()
    action = client.get("/api/games?category=action&sort=title").get_json()
    featured = client.get("/api/games?isFeatured=1").get_json()
    by_dev = client.get("/api/games?developer=orbit").get_json()

    assert [g["title"] for g in by_year["data"]] == ["Gamma", "Alpha", "Beta"]
    assert [g["title"] for g in action["data"]] == ["Beta", "Gamma"]
    assert [g["title"] for g in featured["data"]] == ["Alpha"]
    assert [g["title"] for g in by_dev["data"]] == ["Beta"]


def test_public_games_rejects_unknown_sort(client):
    resp = client.get("/api/games?sort=game_developer")
    assert resp.status_code == 400


def test_public_games_is_rate_limited_and_cors_enabled(client):
    resp = client.get("/api/games", headers={"Origin": "https://site.example"})
    assert resp.status_code == 200
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert resp.headers["X-RateLimit-Limit"] == "1000"
