"""Projectile ballistics — flight, wall bounces and wall damage.

A projectile moves by its velocity once per tick.  If the new position
lands inside a live wall, the edges crossed between the previous and the
new position decide which velocity component flips (both on a corner
hit), and the projectile is nudged just outside the wall so it cannot get
stuck.  A projectile that was already inside the wall (fired point-blank)
crossed no edge: it keeps its heading and the impact still counts as a
bounce, so it burns through its cap instead of turning back on its owner.
Only the first wall hit in a tick counts, so a projectile damages
at most one wall per tick.

Each impact adds a bounce.  The impact that takes a projectile past its
bounce cap destroys it and does not damage the wall.  Owners under the
unlimited-bounce override ignore the cap completely.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import AbstractSet, Sequence

from loguru import logger

from tankarena.config import Settings, settings as default_settings

from .entities import Projectile, Wall


@dataclass(frozen=True)
class BallisticsResult:
    """Outcome of one projectile step.

    ``projectile`` is None when the projectile expired or was destroyed.
    ``wall_id`` names the damageable wall hit this tick, if any.
    """

    projectile: Projectile | None
    wall_id: int | None = None


def _reflect_axis(prev: float, new: float, low: float, high: float) -> bool:
    """True if the segment prev->new crossed into [low, high] through an edge."""
    return (prev < low <= new) or (prev > high >= new)


def update_projectile(
    projectile: Projectile,
    walls: Sequence[Wall],
    now: float,
    unlimited_bounces: bool = False,
    cfg: Settings | None = None,
) -> BallisticsResult:
    """Advance *projectile* by one tick against *walls*."""
    cfg = cfg or default_settings
    if projectile.age(now) > cfg.projectile_lifetime:
        return BallisticsResult(None)

    px, py = projectile.position
    vx, vy = projectile.velocity
    nx, ny = px + vx, py + vy

    for wall in walls:
        if wall.is_destroyed or not wall.contains((nx, ny)):
            continue

        hit_x = _reflect_axis(px, nx, wall.x, wall.right)
        hit_y = _reflect_axis(py, ny, wall.y, wall.bottom)

        # Only crossed edges reflect; a projectile already inside keeps going
        nudge = cfg.bounce_nudge
        if hit_x:
            nx = wall.x - nudge if px < wall.x else wall.right + nudge
            vx = -vx
        if hit_y:
            ny = wall.y - nudge if py < wall.y else wall.bottom + nudge
            vy = -vy

        bounces = projectile.bounces + 1
        if not unlimited_bounces and bounces > projectile.max_bounces:
            return BallisticsResult(None)

        return BallisticsResult(
            replace(projectile, position=(nx, ny), velocity=(vx, vy), bounces=bounces),
            wall.wall_id if wall.is_damageable else None,
        )

    return BallisticsResult(replace(projectile, position=(nx, ny)))


def damage_wall(walls: Sequence[Wall], wall_id: int) -> tuple[Wall, ...]:
    """Return *walls* with one point of damage applied to *wall_id*."""
    updated = list(walls)
    for i, wall in enumerate(updated):
        if wall.wall_id == wall_id:
            if wall.is_damageable:
                updated[i] = replace(wall, health=wall.health - 1)
            break
    return tuple(updated)


def advance_projectiles(
    projectiles: Sequence[Projectile],
    walls: Sequence[Wall],
    now: float,
    unlimited_owners: AbstractSet[int] = frozenset(),
    cfg: Settings | None = None,
) -> tuple[tuple[Projectile, ...], tuple[Wall, ...], list[int]]:
    """Step every projectile, applying wall damage as impacts happen.

    Returns the surviving projectiles, the updated walls, and the ids of
    walls damaged this tick (one entry per impact).
    """
    survivors: list[Projectile] = []
    damaged: list[int] = []
    for projectile in projectiles:
        result = update_projectile(
            projectile, walls, now,
            unlimited_bounces=projectile.owner_id in unlimited_owners,
            cfg=cfg,
        )
        if result.wall_id is not None:
            walls = damage_wall(walls, result.wall_id)
            damaged.append(result.wall_id)
            logger.debug(f"Projectile {projectile.projectile_id} damaged wall {result.wall_id}")
        if result.projectile is not None:
            survivors.append(result.projectile)
    return tuple(survivors), tuple(walls), damaged
