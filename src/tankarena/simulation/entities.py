"""Entity model — value records for everything that lives in the arena.

All records are frozen dataclasses.  Resolvers never mutate a record in
place; they build the next version with ``dataclasses.replace`` so a
published GameState snapshot can be handed to readers (renderer, network
mirror) without copying.

Coordinate convention:
    +X = right, +Y = down (screen space), rotation in radians with 0
    pointing along +X.  Positions and velocities are ``(x, y)`` tuples.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

Vec2 = tuple[float, float]

# Wall health sentinel for walls that can never be damaged
INDESTRUCTIBLE = -1


class PowerUpType(str, Enum):
    """The fixed set of power-up kinds."""
    SHIELD = "shield"
    SPEED = "speed"
    RAPID_FIRE = "rapid_fire"
    DAMAGE_BOOST = "damage_boost"
    TELEPORT = "teleport"


class MatchPhase(str, Enum):
    """Round/match progression state."""
    ACTIVE = "active"
    ROUND_TRANSITION = "round_transition"
    MATCH_OVER = "match_over"


@dataclass(frozen=True)
class ActivePowerUp:
    """A timed effect held by a tank until ``expires_at``."""

    powerup_type: PowerUpType
    expires_at: float

    def is_active(self, now: float) -> bool:
        return self.expires_at > now

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.powerup_type.value, "expires_at": self.expires_at}


@dataclass(frozen=True)
class Tank:
    """A player-controlled tank.

    ``tank_id`` is the player identity (1 or 2).  The multipliers and
    ``has_shield`` are derived from ``active_powerups`` every tick and are
    stored only so the snapshot carries them for rendering.
    """

    tank_id: int
    position: Vec2
    rotation: float = 0.0
    turret_rotation: float = 0.0
    velocity: Vec2 = (0.0, 0.0)
    health: int = 100
    max_health: int = 100
    is_alive: bool = True
    respawn_timer: float = 0.0
    last_shot: float | None = None
    active_powerups: tuple[ActivePowerUp, ...] = ()
    speed_multiplier: float = 1.0
    fire_rate_multiplier: float = 1.0
    damage_multiplier: float = 1.0
    has_shield: bool = False

    @property
    def player_index(self) -> int:
        return self.tank_id - 1

    def has_effect(self, powerup_type: PowerUpType) -> bool:
        return any(p.powerup_type is powerup_type for p in self.active_powerups)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.tank_id,
            "position": {"x": self.position[0], "y": self.position[1]},
            "rotation": self.rotation,
            "turret_rotation": self.turret_rotation,
            "velocity": {"x": self.velocity[0], "y": self.velocity[1]},
            "health": self.health,
            "max_health": self.max_health,
            "is_alive": self.is_alive,
            "respawn_timer": self.respawn_timer,
            "last_shot": self.last_shot,
            "active_powerups": [p.to_dict() for p in self.active_powerups],
            "speed_multiplier": self.speed_multiplier,
            "fire_rate_multiplier": self.fire_rate_multiplier,
            "damage_multiplier": self.damage_multiplier,
            "has_shield": self.has_shield,
        }


@dataclass(frozen=True)
class Projectile:
    """A fired round in flight."""

    projectile_id: int
    position: Vec2
    velocity: Vec2
    owner_id: int
    created_at: float
    damage: float
    bounces: int = 0
    max_bounces: int = 3

    def __post_init__(self) -> None:
        if self.velocity[0] == 0 and self.velocity[1] == 0:
            raise ValueError(f"Projectile {self.projectile_id} has zero velocity")

    def age(self, now: float) -> float:
        return now - self.created_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.projectile_id,
            "position": {"x": self.position[0], "y": self.position[1]},
            "velocity": {"x": self.velocity[0], "y": self.velocity[1]},
            "owner_id": self.owner_id,
            "bounces": self.bounces,
            "max_bounces": self.max_bounces,
            "created_at": self.created_at,
            "damage": self.damage,
        }


@dataclass(frozen=True)
class Wall:
    """Axis-aligned wall rectangle.

    ``health`` is INDESTRUCTIBLE (-1) for walls that never take damage and
    0 once a destructible wall is destroyed; destroyed walls take no part in
    collision.  ``wall_id`` is the wall's index within its map and is how a
    projectile impact is correlated back to the wall.
    """

    wall_id: int
    x: float
    y: float
    width: float
    height: float
    destructible: bool = False
    health: int = INDESTRUCTIBLE

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Wall {self.wall_id} has degenerate size {self.width}x{self.height}"
            )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_destroyed(self) -> bool:
        return self.health == 0

    @property
    def is_damageable(self) -> bool:
        return self.destructible and self.health > 0

    def contains(self, point: Vec2) -> bool:
        return self.x <= point[0] <= self.right and self.y <= point[1] <= self.bottom

    def closest_point(self, point: Vec2) -> Vec2:
        return (
            max(self.x, min(point[0], self.right)),
            max(self.y, min(point[1], self.bottom)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.wall_id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "destructible": self.destructible,
            "health": self.health,
        }


@dataclass(frozen=True)
class PowerUp:
    """A pickup lying on the arena floor.

    ``duration`` is the lifetime of the effect once collected; the pickup
    itself vanishes after ``Settings.powerup_lifetime`` regardless.
    """

    powerup_id: int
    powerup_type: PowerUpType
    position: Vec2
    created_at: float
    duration: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.powerup_id,
            "type": self.powerup_type.value,
            "position": {"x": self.position[0], "y": self.position[1]},
            "created_at": self.created_at,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class GameState:
    """Aggregate arena snapshot produced by one simulation tick.

    ``clock`` is simulation time in seconds.  ``round_reset_at`` is set
    while a round transition is pending and holds the clock value at which
    the next round starts.
    """

    tanks: tuple[Tank, Tank]
    walls: tuple[Wall, ...]
    projectiles: tuple[Projectile, ...] = ()
    powerups: tuple[PowerUp, ...] = ()
    scores: tuple[int, int] = (0, 0)
    round_wins: tuple[int, int] = (0, 0)
    current_round: int = 1
    rounds_to_win: int = 3
    current_map: int = 1
    is_paused: bool = False
    game_over: bool = False
    winner: int | None = None
    phase: MatchPhase = MatchPhase.ACTIVE
    round_reset_at: float | None = None
    clock: float = 0.0
    last_powerup_spawn: float = 0.0

    def tank(self, tank_id: int) -> Tank:
        for t in self.tanks:
            if t.tank_id == tank_id:
                return t
        raise KeyError(f"No tank with id {tank_id}")

    def live_walls(self) -> tuple[Wall, ...]:
        return tuple(w for w in self.walls if not w.is_destroyed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tanks": [t.to_dict() for t in self.tanks],
            "projectiles": [p.to_dict() for p in self.projectiles],
            "walls": [w.to_dict() for w in self.walls],
            "power_ups": [p.to_dict() for p in self.powerups],
            "scores": list(self.scores),
            "round_wins": list(self.round_wins),
            "current_round": self.current_round,
            "rounds_to_win": self.rounds_to_win,
            "current_map": self.current_map,
            "is_paused": self.is_paused,
            "game_over": self.game_over,
            "winner": self.winner,
            "phase": self.phase.value,
            "round_reset_at": self.round_reset_at,
            "clock": self.clock,
        }
