"""Network mirror boundary — wire models for snapshot replication.

The realtime mirror itself lives outside the core.  These pydantic models
define what it sends and receives:

  - ``SnapshotPayload.from_state(state)`` serialises the parts of a
    GameState a remote peer needs (tanks, projectiles, power-ups, walls,
    scores, pause flag).
  - ``TankPayload`` validates an incoming remote tank and converts it back
    into a Tank, which the engine can drop into its authoritative state.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .entities import ActivePowerUp, GameState, PowerUp, PowerUpType, Projectile, Tank, Wall


class Vector(BaseModel):
    x: float
    y: float

    @classmethod
    def of(cls, v: tuple[float, float]) -> "Vector":
        return cls(x=v[0], y=v[1])

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class ActivePowerUpPayload(BaseModel):
    type: PowerUpType
    expires_at: float


class TankPayload(BaseModel):
    id: int = Field(ge=1, le=2)
    position: Vector
    rotation: float = 0.0
    turret_rotation: float = 0.0
    velocity: Vector = Field(default_factory=lambda: Vector(x=0.0, y=0.0))
    health: int = 100
    max_health: int = 100
    is_alive: bool = True
    respawn_timer: float = 0.0
    last_shot: float | None = None
    active_powerups: list[ActivePowerUpPayload] = Field(default_factory=list)
    speed_multiplier: float = 1.0
    fire_rate_multiplier: float = 1.0
    damage_multiplier: float = 1.0
    has_shield: bool = False

    @classmethod
    def from_tank(cls, tank: Tank) -> "TankPayload":
        return cls.model_validate(tank.to_dict())

    def to_tank(self) -> Tank:
        return Tank(
            tank_id=self.id,
            position=self.position.as_tuple(),
            rotation=self.rotation,
            turret_rotation=self.turret_rotation,
            velocity=self.velocity.as_tuple(),
            health=self.health,
            max_health=self.max_health,
            is_alive=self.is_alive,
            respawn_timer=self.respawn_timer,
            last_shot=self.last_shot,
            active_powerups=tuple(
                ActivePowerUp(p.type, p.expires_at) for p in self.active_powerups
            ),
            speed_multiplier=self.speed_multiplier,
            fire_rate_multiplier=self.fire_rate_multiplier,
            damage_multiplier=self.damage_multiplier,
            has_shield=self.has_shield,
        )


class ProjectilePayload(BaseModel):
    id: int
    position: Vector
    velocity: Vector
    owner_id: int
    bounces: int
    max_bounces: int
    created_at: float
    damage: float

    @classmethod
    def from_projectile(cls, p: Projectile) -> "ProjectilePayload":
        return cls.model_validate(p.to_dict())


class WallPayload(BaseModel):
    id: int
    x: float
    y: float
    width: float
    height: float
    destructible: bool
    health: int

    @classmethod
    def from_wall(cls, w: Wall) -> "WallPayload":
        return cls.model_validate(w.to_dict())


class PowerUpPayload(BaseModel):
    id: int
    type: PowerUpType
    position: Vector
    created_at: float
    duration: float

    @classmethod
    def from_powerup(cls, p: PowerUp) -> "PowerUpPayload":
        return cls.model_validate(p.to_dict())


class SnapshotPayload(BaseModel):
    tanks: list[TankPayload]
    projectiles: list[ProjectilePayload]
    power_ups: list[PowerUpPayload]
    walls: list[WallPayload]
    scores: list[int]
    round_wins: list[int]
    current_round: int
    current_map: int
    is_paused: bool
    game_over: bool
    winner: int | None = None

    @classmethod
    def from_state(cls, state: GameState) -> "SnapshotPayload":
        return cls(
            tanks=[TankPayload.from_tank(t) for t in state.tanks],
            projectiles=[ProjectilePayload.from_projectile(p) for p in state.projectiles],
            power_ups=[PowerUpPayload.from_powerup(p) for p in state.powerups],
            walls=[WallPayload.from_wall(w) for w in state.walls],
            scores=list(state.scores),
            round_wins=list(state.round_wins),
            current_round=state.current_round,
            current_map=state.current_map,
            is_paused=state.is_paused,
            game_over=state.game_over,
            winner=state.winner,
        )


def snapshot_payload(state: GameState) -> dict:
    """JSON-ready mirror payload for *state*."""
    return SnapshotPayload.from_state(state).model_dump(mode="json")
