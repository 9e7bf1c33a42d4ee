"""Which control codes drive which tank.

The host delivers the set of currently held codes each tick.  Codes that
belong to neither map are simply ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet


@dataclass(frozen=True)
class Controls:
    up: str
    down: str
    left: str
    right: str
    shoot: str

    def codes(self) -> tuple[str, ...]:
        return (self.up, self.down, self.left, self.right, self.shoot)


PLAYER1_CONTROLS = Controls(up="w", down="s", left="a", right="d", shoot=" ")
PLAYER2_CONTROLS = Controls(
    up="ArrowUp", down="ArrowDown", left="ArrowLeft", right="ArrowRight", shoot="Enter",
)

PLAYER_CONTROLS: tuple[Controls, Controls] = (PLAYER1_CONTROLS, PLAYER2_CONTROLS)

ALL_CODES = frozenset(PLAYER1_CONTROLS.codes() + PLAYER2_CONTROLS.codes())


def controls_for(player_index: int) -> Controls:
    """Control map for player index 0 or 1."""
    return PLAYER_CONTROLS[0] if player_index == 0 else PLAYER_CONTROLS[1]


def wants_to_fire(active: AbstractSet[str], player_index: int) -> bool:
    return controls_for(player_index).shoot in active
