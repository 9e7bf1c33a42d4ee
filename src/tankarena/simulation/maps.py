"""Static wall layouts for each arena map.

Layouts are expressed relative to the arena size so they follow the
configured ``arena_width``/``arena_height``.  Every map shares the four
indestructible border walls.  ``get_map_walls()`` builds brand-new Wall
records on every call, so damage taken in one round never carries over
into the next.

Usage:
    walls = get_map_walls(2)
    names = list_maps()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from loguru import logger

from tankarena.config import Settings, settings as default_settings

from .entities import INDESTRUCTIBLE, Wall

# (x, y, width, height, destructible, health)
WallSpec = tuple[float, float, float, float, bool, int]
Layout = Callable[[float, float, float], list[WallSpec]]

_SOLID = INDESTRUCTIBLE


def _border(w: float, h: float, t: float) -> list[WallSpec]:
    return [
        (0, 0, w, t, False, _SOLID),
        (0, h - t, w, t, False, _SOLID),
        (0, 0, t, h, False, _SOLID),
        (w - t, 0, t, h, False, _SOLID),
    ]


def _classic_arena(w: float, h: float, t: float) -> list[WallSpec]:
    return _border(w, h, t) + [
        # Center obstacles
        (w / 2 - 60, 100, 120, 30, True, 3),
        (w / 2 - 60, h - 130, 120, 30, True, 3),
        (w / 2 - 15, h / 2 - 80, 30, 160, True, 3),
        # Side obstacles
        (200, 150, 30, 120, True, 2),
        (200, h - 270, 30, 120, True, 2),
        (w - 230, 150, 30, 120, True, 2),
        (w - 230, h - 270, 30, 120, True, 2),
        # Corner blocks
        (80, 80, 50, 50, False, _SOLID),
        (w - 130, 80, 50, 50, False, _SOLID),
        (80, h - 130, 50, 50, False, _SOLID),
        (w - 130, h - 130, 50, 50, False, _SOLID),
    ]


def _maze_runner(w: float, h: float, t: float) -> list[WallSpec]:
    return _border(w, h, t) + [
        (150, 120, 250, 25, False, _SOLID),
        (w - 400, 120, 250, 25, False, _SOLID),
        (150, h - 145, 250, 25, False, _SOLID),
        (w - 400, h - 145, 250, 25, False, _SOLID),
        (300, 220, 25, 160, True, 2),
        (w - 325, 220, 25, 160, True, 2),
        # Center cross
        (w / 2 - 100, h / 2 - 12, 200, 25, True, 3),
        (w / 2 - 12, h / 2 - 100, 25, 200, True, 3),
    ]


def _fortress(w: float, h: float, t: float) -> list[WallSpec]:
    return _border(w, h, t) + [
        # Left fortress
        (100, h / 2 - 100, 150, 25, False, _SOLID),
        (100, h / 2 + 75, 150, 25, False, _SOLID),
        (225, h / 2 - 100, 25, 75, True, 2),
        (225, h / 2 + 25, 25, 75, True, 2),
        # Right fortress
        (w - 250, h / 2 - 100, 150, 25, False, _SOLID),
        (w - 250, h / 2 + 75, 150, 25, False, _SOLID),
        (w - 250, h / 2 - 100, 25, 75, True, 2),
        (w - 250, h / 2 + 25, 25, 75, True, 2),
        # Center pillars
        (w / 2 - 60, 80, 40, 40, False, _SOLID),
        (w / 2 + 20, 80, 40, 40, False, _SOLID),
        (w / 2 - 60, h - 120, 40, 40, False, _SOLID),
        (w / 2 + 20, h - 120, 40, 40, False, _SOLID),
    ]


def _open_field(w: float, h: float, t: float) -> list[WallSpec]:
    return _border(w, h, t) + [
        (200, 200, 40, 40, True, 1),
        (w - 240, 200, 40, 40, True, 1),
        (200, h - 240, 40, 40, True, 1),
        (w - 240, h - 240, 40, 40, True, 1),
        (w / 2 - 20, h / 2 - 20, 40, 40, True, 2),
        # Corner barricades
        (80, 80, 60, 20, False, _SOLID),
        (80, 80, 20, 60, False, _SOLID),
        (w - 140, 80, 60, 20, False, _SOLID),
        (w - 100, 80, 20, 60, False, _SOLID),
        (80, h - 100, 60, 20, False, _SOLID),
        (80, h - 140, 20, 60, False, _SOLID),
        (w - 140, h - 100, 60, 20, False, _SOLID),
        (w - 100, h - 140, 20, 60, False, _SOLID),
    ]


def _corridors(w: float, h: float, t: float) -> list[WallSpec]:
    return _border(w, h, t) + [
        (t, h / 3, w / 3, 25, False, _SOLID),
        (w - w / 3 - t, h / 3, w / 3, 25, False, _SOLID),
        (t, 2 * h / 3, w / 3, 25, False, _SOLID),
        (w - w / 3 - t, 2 * h / 3, w / 3, 25, False, _SOLID),
        # Vertical connectors
        (w / 3, t, 25, h / 3 - t, True, 3),
        (2 * w / 3, t, 25, h / 3 - t, True, 3),
        (w / 3, 2 * h / 3, 25, h / 3 - t, True, 3),
        (2 * w / 3, 2 * h / 3, 25, h / 3 - t, True, 3),
    ]


@dataclass(frozen=True)
class MapConfig:
    """A named arena layout."""

    map_id: int
    name: str
    layout: Layout

    def build_walls(self, cfg: Settings) -> tuple[Wall, ...]:
        specs = self.layout(cfg.arena_width, cfg.arena_height, cfg.wall_thickness)
        return tuple(
            Wall(
                wall_id=i, x=x, y=y, width=width, height=height,
                destructible=destructible, health=health,
            )
            for i, (x, y, width, height, destructible, health) in enumerate(specs)
        )


MAPS: tuple[MapConfig, ...] = (
    MapConfig(1, "Classic Arena", _classic_arena),
    MapConfig(2, "Maze Runner", _maze_runner),
    MapConfig(3, "Fortress", _fortress),
    MapConfig(4, "Open Field", _open_field),
    MapConfig(5, "Corridors", _corridors),
)


def get_map(map_id: int) -> MapConfig:
    """Look up a map by id, falling back to the first map."""
    for m in MAPS:
        if m.map_id == map_id:
            return m
    logger.debug(f"Unknown map id {map_id}, using {MAPS[0].name}")
    return MAPS[0]


def get_map_walls(map_id: int, cfg: Settings | None = None) -> tuple[Wall, ...]:
    """Return a fresh set of full-health walls for *map_id*."""
    return get_map(map_id).build_walls(cfg or default_settings)


def list_maps() -> list[dict]:
    """Return ``[{"id": ..., "name": ...}, ...]`` for every map."""
    return [{"id": m.map_id, "name": m.name} for m in MAPS]
