"""Tests for the arena control API."""

from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi import FastAPI, WebSocketDisconnect
from fastapi.testclient import TestClient

from tankarena.api.main import create_app
from tankarena.api.router import router
from tankarena.comms.event_bus import EventBus
from tankarena.host import ArenaHost
from tankarena.simulation.engine import ArenaEngine
from tankarena.simulation.movement import spawn_tank

pytestmark = pytest.mark.unit


@pytest.fixture
def host(cfg) -> ArenaHost:
    return ArenaHost(ArenaEngine(event_bus=EventBus(), seed=1, cfg=cfg), cfg=cfg)


@pytest.fixture
def app(host: ArenaHost) -> FastAPI:
    test_app = FastAPI()
    test_app.include_router(router)
    test_app.state.arena_host = host
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestState:
    def test_state(self, client: TestClient) -> None:
        resp = client.get("/api/arena/state")
        assert resp.status_code == 200
        data = resp.json()
        assert data["current_round"] == 1
        assert data["phase"] == "active"
        assert len(data["tanks"]) == 2

    def test_mirror(self, client: TestClient) -> None:
        data = client.get("/api/arena/mirror").json()
        assert "phase" not in data
        assert data["scores"] == [0, 0]

    def test_maps(self, client: TestClient) -> None:
        maps = client.get("/api/arena/maps").json()
        assert [m["id"] for m in maps] == [1, 2, 3, 4, 5]

    def test_no_host_is_503(self) -> None:
        bare = FastAPI()
        bare.include_router(router)
        resp = TestClient(bare).get("/api/arena/state")
        assert resp.status_code == 503


class TestLifecycle:
    def test_pause_and_resume(self, client: TestClient, host: ArenaHost) -> None:
        assert client.post("/api/arena/pause").json() == {"status": "paused"}
        assert host.state.is_paused
        assert client.post("/api/arena/resume").json() == {"status": "running"}
        assert not host.state.is_paused

    def test_pause_after_match_over(self, client: TestClient, host: ArenaHost) -> None:
        host.engine.load_state(replace(host.state, game_over=True))
        assert client.post("/api/arena/pause").status_code == 400

    def test_restart(self, client: TestClient, host: ArenaHost) -> None:
        resp = client.post("/api/arena/restart", json={"map_id": 5, "rounds_to_win": 2})
        assert resp.json() == {"status": "restarted", "map_id": 5, "rounds_to_win": 2}
        assert host.state.current_map == 5

    def test_restart_rejects_zero_rounds(self, client: TestClient) -> None:
        resp = client.post("/api/arena/restart", json={"rounds_to_win": 0})
        assert resp.status_code == 422


class TestControlsAndCheats:
    def test_controls(self, client: TestClient, host: ArenaHost) -> None:
        resp = client.post("/api/arena/controls", json={"pressed": ["w", " ", "x"]})
        assert resp.json() == {"held": [" ", "w"]}
        resp = client.post("/api/arena/controls", json={"released": [" "]})
        assert resp.json() == {"held": ["w"]}
        host.step()
        assert host.state.tank(1).position[0] > 100.0

    def test_cheats_round_trip(self, client: TestClient, host: ArenaHost) -> None:
        assert client.get("/api/arena/cheats").json()["enabled"] is False
        body = {"enabled": True, "player_id": 2, "god_mode": True}
        resp = client.put("/api/arena/cheats", json=body)
        assert resp.status_code == 200
        assert resp.json()["god_mode"] is True
        assert host.cheats.targets(2)

    def test_cheats_bad_player(self, client: TestClient) -> None:
        resp = client.put("/api/arena/cheats", json={"enabled": True, "player_id": 7})
        assert resp.status_code == 422


class TestRemoteTank:
    def test_apply(self, client: TestClient, host: ArenaHost) -> None:
        resp = client.post(
            "/api/arena/remote-tank",
            json={"id": 2, "position": {"x": 640.0, "y": 200.0}, "rotation": 1.0},
        )
        assert resp.status_code == 200
        assert resp.json()["position"] == {"x": 640.0, "y": 200.0}
        assert host.state.tank(2).rotation == 1.0

    def test_invalid(self, client: TestClient) -> None:
        resp = client.post("/api/arena/remote-tank", json={"id": 9})
        assert resp.status_code == 400


class TestEventStream:
    def test_relays_engine_events(
        self, client: TestClient, host: ArenaHost, make_state, cfg
    ) -> None:
        target = replace(spawn_tank(1, cfg), position=(160.0, 300.0))
        host.engine.load_state(make_state(tanks=(spawn_tank(0, cfg), target)))
        with client.websocket_connect("/api/arena/events") as ws:
            assert ws.receive_json() == {"type": "connected"}
            host.press(" ")
            for _ in range(5):
                host.step(1.0 / 60)
            first = ws.receive_json()
            second = ws.receive_json()
        assert first["type"] == "tank_destroyed"
        assert first["data"]["tank_id"] == 2
        assert second == {"type": "score_changed", "data": {"scores": [1, 0]}}

    def test_closed_without_a_bus(self, cfg) -> None:
        bare = FastAPI()
        bare.include_router(router)
        bare.state.arena_host = ArenaHost(ArenaEngine(cfg=cfg), cfg=cfg)
        with pytest.raises(WebSocketDisconnect):
            with TestClient(bare).websocket_connect("/api/arena/events"):
                pass


class TestAppFactory:
    def test_served_host_publishes_events(self) -> None:
        app = create_app(start_loop=False)
        host = app.state.arena_host
        assert host.event_bus is not None
        assert host.engine.event_bus is host.event_bus

    def test_health(self, host: ArenaHost) -> None:
        app = create_app(host=host, start_loop=False)
        with TestClient(app) as client:
            data = client.get("/health").json()
        assert data["status"] == "ok"
        assert not host.running
