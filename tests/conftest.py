"""Shared fixtures for arena tests."""

from __future__ import annotations

import random

import pytest

from tankarena.config import Settings
from tankarena.simulation.entities import GameState, Tank, Wall
from tankarena.simulation.maps import get_map_walls
from tankarena.simulation.movement import spawn_tank


@pytest.fixture
def cfg() -> Settings:
    """Default settings, ignoring any .env file in the working directory."""
    return Settings(_env_file=None)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def border_walls(cfg) -> tuple[Wall, ...]:
    """Just the four outer walls of the arena."""
    return get_map_walls(1, cfg)[:4]


@pytest.fixture
def make_state(cfg):
    """Factory for GameStates with spawn-position tanks and no walls by default."""

    def _make(
        tanks: tuple[Tank, Tank] | None = None,
        walls: tuple[Wall, ...] = (),
        **kwargs,
    ) -> GameState:
        if tanks is None:
            tanks = (spawn_tank(0, cfg), spawn_tank(1, cfg))
        return GameState(tanks=tanks, walls=walls, **kwargs)

    return _make
