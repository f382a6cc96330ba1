from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from luckydraw.core.settings import Settings
from luckydraw.features.reels import ReelManager, create_reel_router
from luckydraw.features.reels.router import MAX_PRESENTATION_LENGTH
from luckydraw.web.app import create_app

BASE = "/api/v1/reels"


def _client(settings: Settings | None = None) -> tuple[TestClient, ReelManager]:
    manager = ReelManager()
    app = FastAPI()
    app.include_router(create_reel_router(manager, settings or Settings(step_seconds=0.0)))
    return TestClient(app), manager


def test_create_and_draw_until_empty():
    client, manager = _client()

    response = client.post(BASE, json={"candidates": ["Alice", "Bob", "Carol"], "presentation_length": 5})
    assert response.status_code == 201
    reel = response.json()
    rid = reel["reel_id"]
    assert reel["candidates"] == ["Alice", "Bob", "Carol"]
    assert reel["presentation_length"] == 5
    assert reel["remove_winner"] is True

    winners = []
    for expected_length in (5, 4, 4):
        r = client.post(f"{BASE}/{rid}/draw")
        assert r.status_code == 200
        data = r.json()
        assert data["ok"] is True
        assert len(data["sequence"]) == expected_length
        assert data["winner"] == data["sequence"][-1]
        winners.append(data["winner"])

    assert sorted(winners) == ["Alice", "Bob", "Carol"]

    r = client.post(f"{BASE}/{rid}/draw")
    assert r.status_code == 422
    assert r.json()["error"] == "empty_pool"
    assert r.json()["ok"] is False

    state = client.get(f"{BASE}/{rid}").json()
    assert state["remaining"] == 0
    assert [w["winner"] for w in state["winners"]] == winners
    assert manager.reel_ids() == [rid]


def test_create_uses_settings_defaults_and_coerces_strings():
    client, manager = _client(Settings(presentation_length=7, remove_winner=False, step_seconds=0.0))
    reel = client.post(BASE, json={"candidates": ["a", "b"], "presentation_length": "", "seed": "12"}).json()
    assert reel["presentation_length"] == 7
    assert reel["remove_winner"] is False
    assert manager._reels[reel["reel_id"]].config.seed == 12


def test_candidates_removal_reset_and_delete():
    client, _ = _client()
    rid = client.post(BASE, json={}).json()["reel_id"]

    r = client.put(f"{BASE}/{rid}/candidates", json={"candidates": ["A", "A", "B"], "allow_duplicates": True})
    assert r.status_code == 200
    assert r.json()["candidates"] == ["A", "A", "B"]

    r = client.put(f"{BASE}/{rid}/removal", json={"remove_winner": False})
    assert r.json()["remove_winner"] is False
    client.post(f"{BASE}/{rid}/draw")
    assert client.get(f"{BASE}/{rid}").json()["remaining"] == 3

    client.put(f"{BASE}/{rid}/removal", json={"remove_winner": True})
    client.post(f"{BASE}/{rid}/draw")
    assert client.get(f"{BASE}/{rid}").json()["remaining"] == 2

    r = client.post(f"{BASE}/{rid}/reset")
    assert r.json()["candidates"] == ["A", "A", "B"]
    assert r.json()["winners"] == []

    assert client.delete(f"{BASE}/{rid}").status_code == 204
    assert client.get(f"{BASE}/{rid}").status_code == 404


def test_unknown_reel_returns_404():
    client, _ = _client()
    assert client.get(f"{BASE}/nope").status_code == 404
    assert client.post(f"{BASE}/nope/draw").status_code == 404
    assert client.put(f"{BASE}/nope/candidates", json={"candidates": []}).status_code == 404
    assert client.put(f"{BASE}/nope/removal", json={"remove_winner": True}).status_code == 404
    assert client.post(f"{BASE}/nope/reset").status_code == 404
    assert client.delete(f"{BASE}/nope").status_code == 404


def test_web_app_health_and_reels():
    client = TestClient(create_app(Settings(step_seconds=0.0)))
    assert client.get("/healthz").json() == {"status": "ok"}
    rid = client.post(BASE, json={"candidates": ["solo"]}).json()["reel_id"]
    data = client.post(f"{BASE}/{rid}/draw").json()
    assert data["winner"] == "solo"


def test_create_rejects_out_of_range_lengths():
    client, manager = _client()
    for body in (
        {"candidates": ["a"], "presentation_length": 3_000_000},
        {"candidates": ["a"], "presentation_length": MAX_PRESENTATION_LENGTH + 1},
        {"candidates": ["a"], "presentation_length": 0},
        {"candidates": ["a"], "presentation_length": -5},
        {"candidates": ["a"], "step_seconds": -0.5},
    ):
        assert client.post(BASE, json=body).status_code == 422
    assert manager.reel_ids() == []

    reel = client.post(BASE, json={"candidates": ["a"], "presentation_length": MAX_PRESENTATION_LENGTH})
    assert reel.status_code == 201
    data = client.post(f"{BASE}/{reel.json()['reel_id']}/draw").json()
    assert len(data["sequence"]) == MAX_PRESENTATION_LENGTH
