"""ArenaEngine — the single-writer tick that advances a match.

Architecture
------------
The engine exclusively owns the current GameState.  The host calls
``tick(active_codes, dt, cheats)`` once per frame; the whole tick runs
synchronously and publishes one new frozen snapshot:

  0. paused or match over -> nothing changes, the clock does not advance
  1. clock += dt; apply a due round reset
  2. power-up spawn cycle (once the interval has passed), then expiry
  3. movement & collision for living tanks (against last tick's tanks),
     respawn countdown for dead ones
  4. power-up pickups against the moved tanks
  5. firing from the shoot controls
  6. ballistics for old + new projectiles, wall damage
  7. projectile-tank hits, scoring, round/match progression

Admin overrides (AdminCheats) are passed in per tick and never stored in
GameState.  Randomness (power-up placement, teleport) comes from one
``random.Random`` per engine, and projectile/power-up ids come from
per-engine counters, so two engines never interfere and a seeded engine
replays identically.

Events are published on the optional EventBus as they happen and are
also returned in the TickResult.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import AbstractSet, TYPE_CHECKING

from loguru import logger

from tankarena.config import Settings, settings as default_settings

from .ballistics import advance_projectiles
from .cheats import AdminCheats, resolve_effective_stats
from .combat import CombatResolver
from .controls import wants_to_fire
from .entities import GameState, MatchPhase, Tank
from .match import new_game_state, reset_round, transition_due
from .mirror import TankPayload, snapshot_payload
from .movement import move_tank, tick_respawn
from .powerups import PowerUpManager

if TYPE_CHECKING:
    from tankarena.comms.event_bus import EventBus


@dataclass(frozen=True)
class TickResult:
    """The snapshot a tick produced and the events it raised."""

    state: GameState
    events: list[dict] = field(default_factory=list)


class ArenaEngine:
    """Runs one two-player match, one tick at a time."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        map_id: int | None = None,
        rounds_to_win: int | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
        cfg: Settings | None = None,
    ) -> None:
        self._cfg = cfg or default_settings
        self._event_bus = event_bus
        self._rng = rng if rng is not None else random.Random(seed)
        self._events: list[dict] = []
        self.powerups = PowerUpManager(self._rng, self._cfg)
        self.combat = CombatResolver(self._emit, self._cfg)
        self._state = new_game_state(map_id, rounds_to_win, self._cfg)
        logger.info(
            f"Arena engine ready: map {self._state.current_map}, "
            f"first to {self._state.rounds_to_win} rounds"
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        """The latest published snapshot (frozen, safe to share)."""
        return self._state

    @property
    def event_bus(self) -> EventBus | None:
        return self._event_bus

    def snapshot(self) -> dict:
        """Full JSON-ready view of the current state."""
        return self._state.to_dict()

    def mirror_payload(self) -> dict:
        """The subset of state replicated to a remote peer."""
        return snapshot_payload(self._state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def pause(self) -> None:
        self._state = replace(self._state, is_paused=True)

    def resume(self) -> None:
        self._state = replace(self._state, is_paused=False)

    def restart(self, map_id: int | None = None, rounds_to_win: int | None = None) -> GameState:
        """Throw the current match away and start a fresh one."""
        map_id = self._state.current_map if map_id is None else map_id
        rounds = self._state.rounds_to_win if rounds_to_win is None else rounds_to_win
        self._state = new_game_state(map_id, rounds, self._cfg)
        logger.info(f"Match restarted on map {map_id}")
        return self._state

    def load_state(self, state: GameState) -> None:
        """Install *state* as the authoritative snapshot (replay, mirror host)."""
        self._state = state

    def apply_remote_tank(self, payload: TankPayload | dict) -> Tank:
        """Replace the matching tank with state received from a remote peer."""
        if not isinstance(payload, TankPayload):
            payload = TankPayload.model_validate(payload)
        tank = payload.to_tank()
        ids = [t.tank_id for t in self._state.tanks]
        if tank.tank_id not in ids:
            logger.warning(f"Remote tank for unknown player {tank.tank_id}")
            raise KeyError(f"No tank with id {tank.tank_id}")
        self._state = replace(
            self._state,
            tanks=tuple(tank if t.tank_id == tank.tank_id else t for t in self._state.tanks),
        )
        return tank

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(
        self,
        active: AbstractSet[str],
        dt: float,
        cheats: AdminCheats | None = None,
    ) -> TickResult:
        """Advance the match by *dt* seconds of held controls *active*."""
        self._events = []
        state = self._state
        if state.is_paused or state.phase is MatchPhase.MATCH_OVER:
            return TickResult(state, [])

        cfg = self._cfg
        now = state.clock + dt
        state = replace(state, clock=now)

        if transition_due(state, now):
            state = reset_round(state, cfg=cfg)
            logger.info(f"Round {state.current_round} begins on map {state.current_map}")
            self._emit("round_reset", {"round": state.current_round, "map_id": state.current_map})

        state = self._powerup_cycle(state, now)

        # Movement resolves against the other tank as it was last tick
        previous = state.tanks
        tanks = []
        for i, tank in enumerate(previous):
            if tank.is_alive:
                tanks.append(move_tank(
                    tank, active, i, state.walls, previous[1 - i], now, cheats, cfg,
                ))
            else:
                tanks.append(tick_respawn(tank, i, dt, cfg))

        tanks, floor, collected = self.powerups.collect(tanks, state.powerups, now)
        for tank_id, powerup in collected:
            self._emit("powerup_collected", {
                "tank_id": tank_id,
                "powerup_id": powerup.powerup_id,
                "type": powerup.powerup_type.value,
            })

        firing = [wants_to_fire(active, i) for i in range(len(tanks))]
        tanks, fired = self.combat.fire_all(tanks, firing, now, cheats)

        unlimited = {
            t.tank_id for t in tanks
            if resolve_effective_stats(t, cheats, cfg).unlimited_bounces
        }
        projectiles, walls, damaged = advance_projectiles(
            state.projectiles + tuple(fired), state.walls, now, unlimited, cfg,
        )
        for wall_id in damaged:
            health = next(w.health for w in walls if w.wall_id == wall_id)
            self._emit("wall_damaged", {"wall_id": wall_id, "health": health})

        state = replace(
            state,
            tanks=tuple(tanks),
            powerups=floor,
            projectiles=projectiles,
            walls=walls,
        )
        state = self.combat.resolve_hits(state, now, cheats)

        self._state = state
        return TickResult(state, list(self._events))

    def _powerup_cycle(self, state: GameState, now: float) -> GameState:
        floor = state.powerups
        if now - state.last_powerup_spawn > self._cfg.powerup_spawn_interval:
            powerup = self.powerups.spawn(state.walls, state.tanks, floor, now)
            if powerup is not None:
                floor = floor + (powerup,)
                self._emit("powerup_spawned", powerup.to_dict())
            state = replace(state, last_powerup_spawn=now)
        return replace(state, powerups=self.powerups.expire(floor, now))

    def _emit(self, event_type: str, data: dict) -> None:
        self._events.append({"type": event_type, "data": data})
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)
