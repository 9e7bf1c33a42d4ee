"""Unit tests for power-up spawning, pickup and timed effects."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from tankarena.simulation.entities import ActivePowerUp, PowerUp, PowerUpType, Wall
from tankarena.simulation.maps import get_map_walls
from tankarena.simulation.movement import spawn_tank
from tankarena.simulation.powerups import PowerUpManager, consume_shield, refresh_effects

pytestmark = pytest.mark.unit


def _powerup(kind=PowerUpType.SPEED, position=(129.0, 300.0), created_at=0.0, powerup_id=0):
    return PowerUp(
        powerup_id=powerup_id, powerup_type=kind, position=position,
        created_at=created_at, duration=8.0,
    )


@pytest.fixture
def manager(rng, cfg):
    return PowerUpManager(rng, cfg)


class TestSpawn:
    def test_respects_clearances(self, manager, cfg):
        walls = get_map_walls(1, cfg)
        tanks = (spawn_tank(0, cfg), spawn_tank(1, cfg))
        floor = ()
        for i in range(cfg.max_powerups):
            p = manager.spawn(walls, tanks, floor, float(i))
            assert p is not None
            x, y = p.position
            assert 80 <= x <= 920 and 80 <= y <= 520
            for w in walls:
                inside = w.x - 20 <= x <= w.right + 20 and w.y - 20 <= y <= w.bottom + 20
                assert not inside
            for t in tanks:
                assert math.hypot(x - t.position[0], y - t.position[1]) >= 80
            for other in floor:
                assert math.hypot(x - other.position[0], y - other.position[1]) >= 60
            assert p.duration == cfg.powerup_duration
            floor = floor + (p,)
        assert len({p.powerup_id for p in floor}) == cfg.max_powerups

    def test_cap(self, manager, cfg):
        floor = tuple(_powerup(powerup_id=i) for i in range(3))
        assert manager.spawn((), (), floor, 0.0) is None

    def test_no_free_spot(self, manager, cfg):
        blocked = (Wall(wall_id=0, x=0, y=0, width=1000, height=600),)
        assert manager.spawn(blocked, (), (), 0.0) is None

    def test_destroyed_walls_do_not_block(self, manager, cfg):
        rubble = (Wall(wall_id=0, x=0, y=0, width=1000, height=600, destructible=True, health=0),)
        assert manager.spawn(rubble, (), (), 0.0) is not None

    def test_expire(self, manager):
        floor = (_powerup(created_at=0.0),)
        assert manager.expire(floor, 14.999) == floor
        assert manager.expire(floor, 15.0) == ()


class TestPickup:
    def test_radius(self, manager, cfg):
        tank = spawn_tank(0, cfg)
        assert manager.check_pickup(tank, _powerup(position=(129.0, 300.0)))
        assert not manager.check_pickup(tank, _powerup(position=(130.0, 300.0)))

    def test_dead_tank_cannot_collect(self, manager, cfg):
        tank = replace(spawn_tank(0, cfg), is_alive=False)
        assert not manager.check_pickup(tank, _powerup())

    def test_collect_removes_from_floor(self, manager, cfg):
        tanks = (spawn_tank(0, cfg), spawn_tank(1, cfg))
        near = _powerup(PowerUpType.DAMAGE_BOOST, powerup_id=1)
        far = _powerup(position=(500.0, 100.0), powerup_id=2)
        updated, floor, collected = manager.collect(tanks, (near, far), 1.0)
        assert floor == (far,)
        assert collected == [(1, near)]
        assert updated[0].damage_multiplier == 2.0
        assert updated[1] is tanks[1]


class TestEffects:
    def test_speed_entry_and_multiplier(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.SPEED), 2.0)
        assert tank.active_powerups == (ActivePowerUp(PowerUpType.SPEED, 10.0),)
        assert tank.speed_multiplier == 2.0

    def test_rapid_fire(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.RAPID_FIRE), 0.0)
        assert tank.fire_rate_multiplier == 3.0

    def test_shield(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.SHIELD), 0.0)
        assert tank.has_shield
        tank = consume_shield(tank)
        assert not tank.has_shield
        assert tank.active_powerups == ()

    def test_teleport_moves_without_entry(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.TELEPORT), 0.0)
        assert tank.active_powerups == ()
        x, y = tank.position
        assert 100 <= x <= 900
        assert 100 <= y <= 500

    def test_stacking_does_not_compound(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.SPEED), 0.0)
        tank = manager.apply(tank, _powerup(PowerUpType.SPEED), 1.0)
        assert tank.speed_multiplier == 2.0
        assert len(tank.active_powerups) == 2

    def test_effect_ends_on_expiry(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.DAMAGE_BOOST), 0.0)
        assert refresh_effects(tank, 7.999, cfg).damage_multiplier == 2.0
        expired = refresh_effects(tank, 8.0, cfg)
        assert expired.damage_multiplier == 1.0
        assert expired.active_powerups == ()

    def test_shield_expires_too(self, manager, cfg):
        tank = manager.apply(spawn_tank(0, cfg), _powerup(PowerUpType.SHIELD), 0.0)
        assert not refresh_effects(tank, 8.0, cfg).has_shield
