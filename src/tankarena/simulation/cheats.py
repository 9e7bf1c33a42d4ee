"""Admin overrides and effective stat resolution.

AdminCheats is configuration handed in by the host each tick.  It is
already authorized (no password checks here) and never stored in
GameState.  Every resolver asks ``resolve_effective_stats()`` for a tank's
final numbers instead of checking overrides inline.

Precedence, per stat:
    admin override  >  power-up effect  >  base value

So a tank holding a speed power-up while the super-speed override targets
it moves at the admin multiplier, not admin x power-up.
"""

from __future__ import annotations

from dataclasses import dataclass

from tankarena.config import Settings, settings as default_settings

from .entities import Tank


@dataclass(frozen=True)
class AdminCheats:
    """Per-player rule overrides.  Read-only input to the resolvers."""

    enabled: bool = False
    player_id: int = 0
    god_mode: bool = False
    instant_kill: bool = False
    unlimited_bounces: bool = False
    super_speed: bool = False
    rapid_fire: bool = False

    def targets(self, player_id: int) -> bool:
        return self.enabled and self.player_id == player_id

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "player_id": self.player_id,
            "god_mode": self.god_mode,
            "instant_kill": self.instant_kill,
            "unlimited_bounces": self.unlimited_bounces,
            "super_speed": self.super_speed,
            "rapid_fire": self.rapid_fire,
        }


NO_CHEATS = AdminCheats()


@dataclass(frozen=True)
class EffectiveStats:
    """Final per-tick numbers for one tank after overrides and power-ups."""

    speed_multiplier: float
    fire_rate_multiplier: float
    damage: float
    bounce_cap: int
    god_mode: bool
    unlimited_bounces: bool

    def shot_cooldown(self, base_cooldown: float) -> float:
        return base_cooldown / self.fire_rate_multiplier


def resolve_effective_stats(
    tank: Tank,
    cheats: AdminCheats | None = None,
    cfg: Settings | None = None,
) -> EffectiveStats:
    """Combine base values, the tank's derived multipliers and any override.

    The tank's multipliers must already be re-derived for the current tick
    (see ``powerups.refresh_effects``).
    """
    cfg = cfg or default_settings
    cheats = cheats or NO_CHEATS
    mine = cheats.targets(tank.tank_id)

    speed = cfg.admin_speed_multiplier if mine and cheats.super_speed else tank.speed_multiplier
    fire_rate = (
        cfg.admin_fire_rate_multiplier if mine and cheats.rapid_fire
        else tank.fire_rate_multiplier
    )
    if mine and cheats.instant_kill:
        damage = cfg.admin_instant_kill_damage
    else:
        damage = cfg.base_damage * tank.damage_multiplier
    unlimited = mine and cheats.unlimited_bounces
    bounce_cap = cfg.admin_bounce_cap if unlimited else cfg.max_bounces

    return EffectiveStats(
        speed_multiplier=speed,
        fire_rate_multiplier=fire_rate,
        damage=damage,
        bounce_cap=bounce_cap,
        god_mode=mine and cheats.god_mode,
        unlimited_bounces=unlimited,
    )
