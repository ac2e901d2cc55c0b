"""Test VIP Fiesta API endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vipfiesta.app.main import create_app
from vipfiesta.app.routers import match_router

pytestmark = pytest.mark.integration


@pytest.fixture
def mode(make_mode):
    return make_mode()


@pytest.fixture
def client(mode):
    """Create test client around a running match."""
    return TestClient(create_app(mode))


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "operational"
        assert data["system"] == "VIP Fiesta"
        assert data["started"] is True
        assert data["ended"] is False


class TestMatchEndpoints:
    def test_state(self, client, mode):
        data = client.get("/api/match/state").json()
        assert data["target_vip_kills"] == 3
        assert data["team_vips"] == {str(t): v for t, v in mode.state.team_vips.items()}

    def test_standings(self, client, mode):
        mode.on_player_died(mode.state.vip_of(2), 1)
        data = client.get("/api/match/standings").json()
        assert data[0] == {"team_id": 1, "vip_kills": 1, "rank": 1}
        assert [s["rank"] for s in data] == [1, 2, 3]

    def test_scoreboard(self, client, mode):
        data = client.get("/api/match/scoreboard").json()
        assert len(data) == len(mode.state.players)
        keys = [row["sort_key"] for row in data]
        assert keys == sorted(keys)

    def test_panel(self, client):
        data = client.get("/api/match/players/4/panel").json()
        assert len(data) == 3
        assert any(e["is_viewer_team"] for e in data)

    def test_hud(self, client, mode):
        vip = mode.state.vip_of(1)
        data = client.get(f"/api/match/players/{vip}/hud").json()
        assert data["is_vip"] is True
        assert data["selecting_new_vip"] is False

    def test_unknown_player(self, client):
        assert client.get("/api/match/players/999/hud").status_code == 404
        assert client.get("/api/match/players/999/panel").status_code == 404


class TestWithoutMode:
    def test_returns_503(self):
        app = FastAPI()
        app.include_router(match_router)
        response = TestClient(app).get("/api/match/state")
        assert response.status_code == 503

    def test_headless_default(self):
        client = TestClient(create_app())
        assert client.get("/api/match/standings").json() == []

    def test_headless_state_before_start(self):
        data = TestClient(create_app()).get("/api/match/state").json()
        assert data["started"] is False
        assert data["remaining_time"] is None
