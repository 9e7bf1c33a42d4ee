"""Round and match progression.

    ACTIVE --round won--> ROUND_TRANSITION --delay elapsed--> ACTIVE (round+1)
    ACTIVE --match won--> MATCH_OVER (terminal)

A round transition is not a timer.  It is the ``round_reset_at`` clock
value stored on GameState; the tick checks it and applies the reset
itself, so a reset can never land in the middle of a tick and two resets
can never be pending at once.
"""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from tankarena.config import Settings, settings as default_settings

from .entities import GameState, MatchPhase
from .maps import get_map_walls
from .movement import spawn_tank


def new_game_state(
    map_id: int | None = None,
    rounds_to_win: int | None = None,
    cfg: Settings | None = None,
) -> GameState:
    """Build the opening state of a match."""
    cfg = cfg or default_settings
    map_id = cfg.default_map if map_id is None else map_id
    return GameState(
        tanks=(spawn_tank(0, cfg), spawn_tank(1, cfg)),
        walls=get_map_walls(map_id, cfg),
        rounds_to_win=cfg.rounds_to_win if rounds_to_win is None else rounds_to_win,
        current_map=map_id,
    )


def reset_round(
    state: GameState,
    next_map: int | None = None,
    cfg: Settings | None = None,
) -> GameState:
    """Start the next round: fresh tanks and walls, scores zeroed.

    Round wins, the clock and the rounds-to-win target carry over.
    """
    cfg = cfg or default_settings
    map_id = state.current_map if next_map is None else next_map
    return replace(
        state,
        tanks=(spawn_tank(0, cfg), spawn_tank(1, cfg)),
        walls=get_map_walls(map_id, cfg),
        projectiles=(),
        powerups=(),
        scores=(0, 0),
        current_map=map_id,
        current_round=state.current_round + 1,
        phase=MatchPhase.ACTIVE,
        round_reset_at=None,
    )


def schedule_round_transition(state: GameState, now: float, cfg: Settings | None = None) -> GameState:
    """Mark the round as won and due to reset after the transition delay."""
    cfg = cfg or default_settings
    if state.phase is not MatchPhase.ACTIVE:
        return state
    return replace(
        state,
        phase=MatchPhase.ROUND_TRANSITION,
        round_reset_at=now + cfg.round_transition_delay,
    )


def end_match(state: GameState, winner: int) -> GameState:
    """Freeze the match with *winner* (player id)."""
    logger.info(f"Match over: player {winner} wins {list(state.round_wins)}")
    return replace(
        state,
        phase=MatchPhase.MATCH_OVER,
        game_over=True,
        winner=winner,
        projectiles=(),
        round_reset_at=None,
    )


def transition_due(state: GameState, now: float) -> bool:
    return (
        state.phase is MatchPhase.ROUND_TRANSITION
        and state.round_reset_at is not None
        and now >= state.round_reset_at
    )
