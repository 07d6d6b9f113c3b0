from __future__ import annotations

from fastapi.testclient import TestClient

from src.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app())


def test_undo_without_moves_is_noop() -> None:
    client = _client()
    r = client.post("/api/games")
    game_id = r.json()["game_id"]
    start = r.json()["placement"]

    r_undo = client.post(f"/api/games/{game_id}/undo")
    assert r_undo.status_code == 200
    assert r_undo.json()["placement"] == start
    assert r_undo.json()["side_to_move"] == "w"


def test_undo_restores_prior_state() -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]
    before = client.get(f"/api/games/{game_id}/state").json()

    for mv in ("e2e4", "d7d5", "e4d5"):
        r_move = client.post(f"/api/games/{game_id}/move", json={"move": mv})
        assert r_move.json()["applied"] is True
    assert client.get(f"/api/games/{game_id}/state").json()["captures"] == ["p"]

    for _ in range(3):
        r_undo = client.post(f"/api/games/{game_id}/undo")
        assert r_undo.status_code == 200
    assert r_undo.json() == before
    assert r_undo.json()["last_move"] is None
    assert r_undo.json()["move_history"] == []
