"""Movement & collision — turns control intent into tank motion.

Each tick a living tank:
  1. re-derives its power-up multipliers (expired effects dropped),
  2. turns by a fixed angular step for left/right,
  3. moves forward (+1) or backward (-0.6) along its facing,
  4. is pushed out of every live wall it overlaps,
  5. is pushed half the overlap away from the other tank.

Wall correction is positional only: the tank is moved out along the
separating axis by exactly the penetration depth and keeps its velocity.

Tank-tank correction only moves the tank being resolved.  The other tank
gets its own half when it is resolved, using this tank's position from the
previous tick, so a head-on collision settles over a couple of ticks
rather than in one.

Dead tanks do not move; their respawn countdown runs down instead.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import AbstractSet, Iterable

from tankarena.config import Settings, settings as default_settings

from .cheats import AdminCheats, resolve_effective_stats
from .controls import controls_for
from .entities import Tank, Vec2, Wall
from .powerups import refresh_effects


def spawn_position(player_index: int, cfg: Settings | None = None) -> tuple[Vec2, float]:
    """Spawn point and facing for a side: player 0 left facing right, player 1 right facing left."""
    cfg = cfg or default_settings
    y = cfg.arena_height / 2
    if player_index == 0:
        return (cfg.spawn_inset, y), 0.0
    return (cfg.arena_width - cfg.spawn_inset, y), math.pi


def spawn_tank(player_index: int, cfg: Settings | None = None) -> Tank:
    """Create a fresh tank for player index 0 or 1."""
    cfg = cfg or default_settings
    position, rotation = spawn_position(player_index, cfg)
    return Tank(
        tank_id=player_index + 1,
        position=position,
        rotation=rotation,
        turret_rotation=rotation,
        health=cfg.tank_max_health,
        max_health=cfg.tank_max_health,
    )


def respawn_tank(tank: Tank, player_index: int, cfg: Settings | None = None) -> Tank:
    """Bring a destroyed tank back at its side's spawn point with nothing active."""
    cfg = cfg or default_settings
    position, rotation = spawn_position(player_index, cfg)
    return replace(
        tank,
        position=position,
        rotation=rotation,
        turret_rotation=rotation,
        velocity=(0.0, 0.0),
        health=tank.max_health,
        is_alive=True,
        respawn_timer=0.0,
        active_powerups=(),
        speed_multiplier=1.0,
        fire_rate_multiplier=1.0,
        damage_multiplier=1.0,
        has_shield=False,
    )


def tick_respawn(tank: Tank, player_index: int, dt: float, cfg: Settings | None = None) -> Tank:
    """Run down a dead tank's respawn countdown, respawning when it runs out."""
    if tank.is_alive:
        return tank
    remaining = tank.respawn_timer - dt
    if remaining <= 0:
        return respawn_tank(tank, player_index, cfg)
    return replace(tank, respawn_timer=remaining)


def push_out_of_wall(position: Vec2, radius: float, wall: Wall) -> Vec2:
    """Move a circle of *radius* at *position* so it no longer overlaps *wall*."""
    cx, cy = wall.closest_point(position)
    dx = position[0] - cx
    dy = position[1] - cy
    dist = math.hypot(dx, dy)

    if dist >= radius:
        return position

    if dist > 0:
        overlap = radius - dist
        return (position[0] + dx / dist * overlap, position[1] + dy / dist * overlap)

    # Centre is inside the rectangle: leave through the nearest edge
    x, y = position
    exits = (
        (x - wall.x, (wall.x - radius, y)),
        (wall.right - x, (wall.right + radius, y)),
        (y - wall.y, (x, wall.y - radius)),
        (wall.bottom - y, (x, wall.bottom + radius)),
    )
    return min(exits, key=lambda e: e[0])[1]


def _clamp_to_arena(position: Vec2, radius: float, cfg: Settings) -> Vec2:
    return (
        min(max(position[0], radius), cfg.arena_width - radius),
        min(max(position[1], radius), cfg.arena_height - radius),
    )


def move_tank(
    tank: Tank,
    active: AbstractSet[str],
    player_index: int,
    walls: Iterable[Wall],
    other: Tank,
    now: float,
    cheats: AdminCheats | None = None,
    cfg: Settings | None = None,
) -> Tank:
    """Advance one living tank by one tick of control input."""
    cfg = cfg or default_settings
    if not tank.is_alive:
        return tank

    tank = refresh_effects(tank, now, cfg)
    stats = resolve_effective_stats(tank, cheats, cfg)
    controls = controls_for(player_index)

    rotation = tank.rotation
    if controls.left in active:
        rotation -= cfg.rotation_speed
    if controls.right in active:
        rotation += cfg.rotation_speed

    direction = 0.0
    if controls.up in active:
        direction = 1.0
    if controls.down in active:
        direction = -cfg.reverse_factor

    step = cfg.tank_speed * direction * stats.speed_multiplier
    velocity = (math.cos(rotation) * step, math.sin(rotation) * step)
    position = (tank.position[0] + velocity[0], tank.position[1] + velocity[1])

    radius = cfg.tank_radius
    for wall in walls:
        if wall.is_destroyed:
            continue
        position = push_out_of_wall(position, radius, wall)

    if other.is_alive:
        dx = position[0] - other.position[0]
        dy = position[1] - other.position[1]
        dist = math.hypot(dx, dy)
        min_dist = cfg.tank_size
        if dist < min_dist:
            overlap = (min_dist - dist) * 0.5
            angle = math.atan2(dy, dx)
            position = (
                position[0] + math.cos(angle) * overlap,
                position[1] + math.sin(angle) * overlap,
            )

    return replace(
        tank,
        position=_clamp_to_arena(position, radius, cfg),
        rotation=rotation,
        turret_rotation=rotation,
        velocity=velocity,
    )
