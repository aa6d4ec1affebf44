from __future__ import annotations

from fastapi.testclient import TestClient

from popdarts.main import app
from popdarts.store import get_store


def _client_with_match() -> TestClient:
    get_store().clear()
    client = TestClient(app)
    r = client.post(
        "/match/start",
        json={"player1": {"name": "Ana", "color": "blue"}, "player2": {"name": "Ben"}},
    )
    assert r.status_code == 200, r.text
    return client


def test_root_redirects_browsers_to_docs() -> None:
    client = TestClient(app)
    r = client.get("/", headers={"accept": "text/html"}, follow_redirects=False)
    assert r.status_code in {302, 307}, r.text
    assert r.headers["location"] == "/docs"


def test_start_requires_both_names() -> None:
    get_store().clear()
    client = TestClient(app)
    r = client.post("/match/start", json={"player1": {"name": "Ana"}, "player2": {"name": ""}})
    assert r.status_code == 422, r.text


def test_no_match_is_404() -> None:
    get_store().clear()
    r = TestClient(app).get("/match")
    assert r.status_code == 404, r.text


def test_shot_catalog() -> None:
    r = TestClient(app).get("/shots")
    assert r.status_code == 200, r.text
    by_id = {s["id"]: s for s in r.json()}
    assert by_id["inch-worm"]["points"] == 11
    assert by_id["tower"]["unique_per_round"] is True


def test_enter_preview_and_submit_round() -> None:
    client = _client_with_match()

    assert client.post("/match/input/tap", json={"player": 1, "dart_index": 2}).status_code == 200
    assert client.post("/match/input/tap", json={"player": 2, "dart_index": 0}).status_code == 200

    r = client.post("/match/round", json={})
    assert r.status_code == 422, r.text  # closest missing

    r = client.post("/match/input/closest", json={"player": 1})
    assert r.status_code == 200, r.text

    r = client.get("/match/input/preview")
    assert r.status_code == 200, r.text
    assert r.json()["p1_breakdown"] == [3, 1, 1]
    assert r.json()["net_score"] == 4

    r = client.post("/match/round", json={})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["player1_score"] == 4
    assert body["history"][0]["winner"] == 1
    assert (body["history"][0]["player1_score_after"], body["history"][0]["player2_score_after"]) == (4, 0)
    assert body["pending"]["closest"] is None


def test_second_tower_is_rejected() -> None:
    client = _client_with_match()
    r = client.post("/match/input/modifier", json={"player": 1, "dart_index": 0, "modifier": "tower"})
    assert r.status_code == 200, r.text
    r = client.post("/match/input/modifier", json={"player": 2, "dart_index": 0, "modifier": "tower"})
    assert r.status_code == 422, r.text


def test_wash_confirmation() -> None:
    client = _client_with_match()
    r = client.post("/match/round", json={})
    assert r.status_code == 409, r.text

    r = client.post("/match/round", json={"confirm_wash": True})
    assert r.status_code == 200, r.text
    assert r.json()["first_thrower"] == 2
    assert r.json()["history"][0]["washed"] is True
    assert r.json()["history"][0]["player1_score_after"] == 0


def test_edit_last_round_and_stats() -> None:
    client = _client_with_match()
    client.post("/match/input/tap", json={"player": 1, "dart_index": 0})
    client.post("/match/input/tap", json={"player": 2, "dart_index": 0})
    client.post("/match/input/tap", json={"player": 2, "dart_index": 0})
    r = client.post("/match/round", json={})
    assert r.status_code == 200, r.text
    assert r.json()["player1_score"] == 1

    r = client.put(
        "/match/rounds/last",
        json={
            "darts": {
                "player1": [{"status": "missed"}] * 3,
                "player2": [
                    {"status": "landed", "modifier": "tower"},
                    {"status": "landed", "modifier": "wiggle-nobber", "target": {"player": 2, "index": 0}},
                    {"status": "missed"},
                ],
            }
        },
    )
    assert r.status_code == 200, r.text
    assert (r.json()["player1_score"], r.json()["player2_score"]) == (0, 15)

    r = client.get("/match/stats")
    assert r.status_code == 200, r.text
    assert r.json()["player_2"]["specialty_shots"]["tower"] == 1
    assert r.json()["player_2"]["rounds_won"] == 1

    r = client.get("/match/summary")
    assert r.status_code == 409, r.text


def test_start_rejects_bye_flag_on_players() -> None:
    get_store().clear()
    client = TestClient(app)
    r = client.post(
        "/match/start",
        json={"player1": {"name": "Ana", "is_bye": True}, "player2": {"name": "Ben"}},
    )
    assert r.status_code == 422, r.text

    r = client.post("/match/start", json={"player1": {"name": "Ana"}, "player2": {"name": "Ben"}})
    assert r.status_code == 200, r.text
    assert r.json()["players"][0]["is_bye"] is False
