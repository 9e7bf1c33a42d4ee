"""Power-up lifecycle — spawn, expiry, pickup, and effect application.

Power-ups are placed by rejection sampling: a random point inside the
spawn margin is accepted only if it keeps clear of live walls, both tanks
and every existing power-up.  After ``powerup_spawn_attempts`` rejected
candidates the cycle produces nothing.

Collected effects live on the tank as ActivePowerUp entries with an
absolute expiry time.  The tank's multipliers are never edited directly;
``refresh_effects()`` recomputes them from whichever entries are still
active, so stacking two of the same type changes nothing but the expiry.

    shield        one absorbed hit (flag + timed entry)
    speed         2x movement
    rapid_fire    3x fire rate
    damage_boost  2x damage
    teleport      one-shot relocation, no timed entry
"""

from __future__ import annotations

import itertools
import math
import random
from dataclasses import replace
from typing import Iterable, Sequence

from loguru import logger

from tankarena.config import Settings, settings as default_settings

from .entities import ActivePowerUp, PowerUp, PowerUpType, Tank, Wall

POWERUP_TYPES: tuple[PowerUpType, ...] = tuple(PowerUpType)


def refresh_effects(tank: Tank, now: float, cfg: Settings | None = None) -> Tank:
    """Drop expired effects and re-derive multipliers and the shield flag."""
    cfg = cfg or default_settings
    active = tuple(p for p in tank.active_powerups if p.is_active(now))
    kinds = {p.powerup_type for p in active}
    return replace(
        tank,
        active_powerups=active,
        speed_multiplier=cfg.speed_boost_multiplier if PowerUpType.SPEED in kinds else 1.0,
        fire_rate_multiplier=(
            cfg.rapid_fire_multiplier if PowerUpType.RAPID_FIRE in kinds else 1.0
        ),
        damage_multiplier=(
            cfg.damage_boost_multiplier if PowerUpType.DAMAGE_BOOST in kinds else 1.0
        ),
        has_shield=PowerUpType.SHIELD in kinds,
    )


def consume_shield(tank: Tank) -> Tank:
    """Clear the shield flag and its timed entry after absorbing a hit."""
    return replace(
        tank,
        has_shield=False,
        active_powerups=tuple(
            p for p in tank.active_powerups if p.powerup_type is not PowerUpType.SHIELD
        ),
    )


class PowerUpManager:
    """Spawns, expires and hands out power-ups for one simulation."""

    def __init__(self, rng: random.Random | None = None, cfg: Settings | None = None) -> None:
        self._rng = rng or random.Random()
        self._cfg = cfg or default_settings
        self._ids = itertools.count()

    # ------------------------------------------------------------------
    # Spawn / expiry
    # ------------------------------------------------------------------

    def spawn(
        self,
        walls: Iterable[Wall],
        tanks: Iterable[Tank],
        existing: Sequence[PowerUp],
        now: float,
    ) -> PowerUp | None:
        """Try to place one new power-up.  Returns None if none fits."""
        cfg = self._cfg
        if len(existing) >= cfg.max_powerups:
            return None

        powerup_type = self._rng.choice(POWERUP_TYPES)
        live_walls = [w for w in walls if not w.is_destroyed]
        tanks = list(tanks)
        margin = cfg.powerup_spawn_margin

        for _ in range(cfg.powerup_spawn_attempts):
            x = margin + self._rng.random() * (cfg.arena_width - 2 * margin)
            y = margin + self._rng.random() * (cfg.arena_height - 2 * margin)
            if self._is_clear((x, y), live_walls, tanks, existing):
                powerup = PowerUp(
                    powerup_id=next(self._ids),
                    powerup_type=powerup_type,
                    position=(x, y),
                    created_at=now,
                    duration=cfg.powerup_duration,
                )
                logger.debug(
                    f"Power-up {powerup.powerup_id} ({powerup_type.value}) "
                    f"spawned at ({x:.0f}, {y:.0f})"
                )
                return powerup

        logger.debug("Power-up spawn found no free spot this cycle")
        return None

    def _is_clear(
        self,
        point: tuple[float, float],
        walls: Sequence[Wall],
        tanks: Sequence[Tank],
        existing: Sequence[PowerUp],
    ) -> bool:
        cfg = self._cfg
        x, y = point
        buf = cfg.powerup_wall_buffer
        for wall in walls:
            if wall.x - buf <= x <= wall.right + buf and wall.y - buf <= y <= wall.bottom + buf:
                return False
        for tank in tanks:
            if math.hypot(x - tank.position[0], y - tank.position[1]) < cfg.powerup_tank_clearance:
                return False
        for other in existing:
            if math.hypot(x - other.position[0], y - other.position[1]) < cfg.powerup_spacing:
                return False
        return True

    def expire(self, powerups: Iterable[PowerUp], now: float) -> tuple[PowerUp, ...]:
        """Remove power-ups that have been lying around too long."""
        lifetime = self._cfg.powerup_lifetime
        return tuple(p for p in powerups if now - p.created_at < lifetime)

    # ------------------------------------------------------------------
    # Pickup / apply
    # ------------------------------------------------------------------

    def check_pickup(self, tank: Tank, powerup: PowerUp) -> bool:
        if not tank.is_alive:
            return False
        dist = math.hypot(
            tank.position[0] - powerup.position[0],
            tank.position[1] - powerup.position[1],
        )
        return dist < self._cfg.tank_radius + self._cfg.powerup_radius

    def apply(self, tank: Tank, powerup: PowerUp, now: float) -> Tank:
        """Give *powerup*'s effect to *tank*."""
        if powerup.powerup_type is PowerUpType.TELEPORT:
            cfg = self._cfg
            margin = cfg.teleport_margin
            position = (
                margin + self._rng.random() * (cfg.arena_width - 2 * margin),
                margin + self._rng.random() * (cfg.arena_height - 2 * margin),
            )
            return replace(tank, position=position)

        entry = ActivePowerUp(powerup.powerup_type, now + powerup.duration)
        tank = replace(tank, active_powerups=tank.active_powerups + (entry,))
        return refresh_effects(tank, now, self._cfg)

    def collect(
        self,
        tanks: Sequence[Tank],
        powerups: Sequence[PowerUp],
        now: float,
    ) -> tuple[list[Tank], tuple[PowerUp, ...], list[tuple[int, PowerUp]]]:
        """Resolve pickups for every living tank.

        Returns the updated tanks, the power-ups still on the floor, and
        ``(tank_id, powerup)`` pairs for each pickup.
        """
        remaining = list(powerups)
        collected: list[tuple[int, PowerUp]] = []
        updated: list[Tank] = []
        for tank in tanks:
            if tank.is_alive:
                for i in range(len(remaining) - 1, -1, -1):
                    if self.check_pickup(tank, remaining[i]):
                        powerup = remaining.pop(i)
                        tank = self.apply(tank, powerup, now)
                        collected.append((tank.tank_id, powerup))
                        logger.debug(
                            f"Tank {tank.tank_id} picked up {powerup.powerup_type.value}"
                        )
            updated.append(tank)
        return updated, tuple(remaining), collected
