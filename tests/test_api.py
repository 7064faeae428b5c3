"""Tests for the diagnostics HTTP API."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from soft_targeting.api.app import create_app
from soft_targeting.config import SandboxConfig


@pytest.fixture
def client():
    app = create_app(SandboxConfig(enemy_count=5, max_steps=60), autostart=False)
    with TestClient(app) as c:
        yield c


class TestState:

    def test_initial_state(self, client):
        resp = client.get("/api/v1/state")
        assert resp.status_code == 200
        data = resp.json()
        assert data["step"] == 0
        assert data["running"] is False
        assert data["lock"]["active"] is True
        assert data["lock"]["phase"] == "active_unlocked"
        assert data["agent"] is not None
        assert any(a["kind"] == "enemy" for a in data["actors"])

    def test_step_advances_and_evaluates(self, client):
        resp = client.post("/api/v1/control/step", params={"count": 30})
        assert resp.status_code == 200
        assert resp.json()["step"] == 30

        lock = client.get("/api/v1/state").json()["lock"]
        assert lock["evaluations"] >= 9

    def test_events_feed(self, client):
        client.post("/api/v1/control/step", params={"count": 60})
        events = client.get("/api/v1/events", params={"since": 0}).json()
        assert isinstance(events, list)
        for e in events:
            assert e["kind"] in ("found", "lost")

    def test_reset(self, client):
        client.post("/api/v1/control/step", params={"count": 5})
        resp = client.post("/api/v1/control/reset")
        assert resp.json()["step"] == 0


class TestControl:

    def test_deactivate_and_activate(self, client):
        client.post("/api/v1/control/deactivate")
        lock = client.get("/api/v1/state").json()["lock"]
        assert lock["active"] is False
        assert lock["paused"] is True

        client.post("/api/v1/control/step", params={"count": 30})
        assert client.get("/api/v1/state").json()["lock"]["evaluations"] == 0

        client.post("/api/v1/control/activate")
        assert client.get("/api/v1/state").json()["lock"]["active"] is True

    def test_pause_when_not_running(self, client):
        assert client.post("/api/v1/control/pause").json()["status"] == "error"

    def test_unknown_action(self, client):
        assert client.post("/api/v1/control/explode").status_code == 422

    def test_facing(self, client):
        resp = client.post("/api/v1/agent/facing", json={"yaw": 90.0, "pitch": -10.0})
        assert resp.status_code == 200
        state = client.get("/api/v1/state").json()
        assert state["agent"]["yaw"] == pytest.approx(90.0)
        assert state["camera"]["pitch"] == pytest.approx(-10.0)

    def test_facing_pitch_out_of_range(self, client):
        assert client.post("/api/v1/agent/facing", json={"yaw": 0.0, "pitch": 120.0}).status_code == 422


class TestConfig:

    def test_get_config(self, client):
        data = client.get("/api/v1/config").json()
        assert data["search_radius"] == 1000.0
        assert data["target_tag"] == "Target"
        assert data["target_trace_channel"] == "pawn"

    def test_patch_updates(self, client):
        resp = client.patch("/api/v1/config", json={"search_radius": 1500.0, "distance_weight": 0.5})
        assert resp.status_code == 200
        assert resp.json()["search_radius"] == 1500.0
        assert client.get("/api/v1/config").json()["distance_weight"] == 0.5

    def test_patch_rejects_out_of_domain(self, client):
        resp = client.patch("/api/v1/config", json={"camera_direction_weight": 3.0})
        assert resp.status_code == 422
        assert "camera_direction_weight" in resp.json()["detail"]
        assert client.get("/api/v1/config").json()["camera_direction_weight"] == 1.0

    def test_empty_patch_is_noop(self, client):
        assert client.patch("/api/v1/config", json={}).status_code == 200
