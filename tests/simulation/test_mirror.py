"""Unit tests for the network mirror wire models."""

from __future__ import annotations

from dataclasses import replace

import pytest
from pydantic import ValidationError

from tankarena.simulation.entities import ActivePowerUp, PowerUp, PowerUpType, Projectile
from tankarena.simulation.match import new_game_state
from tankarena.simulation.mirror import SnapshotPayload, TankPayload, snapshot_payload
from tankarena.simulation.movement import spawn_tank

pytestmark = pytest.mark.unit


class TestTankPayload:
    def test_tank_survives_the_wire(self, cfg):
        tank = replace(
            spawn_tank(1, cfg),
            last_shot=1.25,
            active_powerups=(ActivePowerUp(PowerUpType.SHIELD, 9.0),),
            has_shield=True,
        )
        assert TankPayload.from_tank(tank).to_tank() == tank

    def test_minimal_payload_gets_defaults(self):
        tank = TankPayload.model_validate({"id": 1, "position": {"x": 5, "y": 6}}).to_tank()
        assert tank.position == (5.0, 6.0)
        assert tank.is_alive
        assert tank.active_powerups == ()

    @pytest.mark.parametrize("bad", [
        {"id": 0, "position": {"x": 0, "y": 0}},
        {"id": 1},
        {"id": 1, "position": {"x": 0, "y": 0}, "active_powerups": [{"type": "laser", "expires_at": 1}]},
    ])
    def test_rejects_invalid(self, bad):
        with pytest.raises(ValidationError):
            TankPayload.model_validate(bad)


class TestSnapshotPayload:
    def test_fields(self, cfg):
        state = replace(
            new_game_state(2, cfg=cfg),
            projectiles=(Projectile(
                projectile_id=4, position=(10.0, 20.0), velocity=(8.0, 0.0),
                owner_id=2, created_at=1.0, damage=100.0,
            ),),
            powerups=(PowerUp(
                powerup_id=1, powerup_type=PowerUpType.TELEPORT,
                position=(300.0, 200.0), created_at=0.5, duration=8.0,
            ),),
            scores=(2, 3),
            is_paused=True,
        )
        payload = snapshot_payload(state)
        assert set(payload) == {
            "tanks", "projectiles", "power_ups", "walls", "scores", "round_wins",
            "current_round", "current_map", "is_paused", "game_over", "winner",
        }
        assert payload["scores"] == [2, 3]
        assert payload["is_paused"] is True
        assert payload["current_map"] == 2
        assert payload["projectiles"][0]["owner_id"] == 2
        assert payload["power_ups"][0]["type"] == "teleport"
        assert len(payload["walls"]) == len(state.walls)

    def test_payload_validates_back(self, cfg):
        payload = snapshot_payload(new_game_state(cfg=cfg))
        parsed = SnapshotPayload.model_validate(payload)
        assert [t.id for t in parsed.tanks] == [1, 2]
