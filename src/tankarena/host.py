"""ArenaHost — headless frame loop around an ArenaEngine.

The host plays the part of the browser frame callback: it keeps the set of
held control codes and the admin overrides, and calls ``engine.tick()`` at
``tick_rate`` Hz on a daemon thread.  Everything that touches the engine
goes through one lock, so the engine only ever has one writer.

``step(dt)`` runs a single tick without the thread and is what tests and
the API use.  Gameplay events go out on the engine's EventBus, which the
host creates when it builds its own engine.
"""

from __future__ import annotations

import threading
import time

from loguru import logger

from tankarena.comms.event_bus import EventBus
from tankarena.config import Settings, settings as default_settings
from tankarena.simulation.cheats import AdminCheats, NO_CHEATS
from tankarena.simulation.controls import ALL_CODES
from tankarena.simulation.engine import ArenaEngine, TickResult
from tankarena.simulation.entities import GameState, Tank


class ArenaHost:
    """Owns the engine, its inputs and the tick thread."""

    def __init__(
        self,
        engine: ArenaEngine | None = None,
        cfg: Settings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._cfg = cfg or default_settings
        if engine is None:
            engine = ArenaEngine(event_bus=event_bus or EventBus(), cfg=self._cfg)
        self.engine = engine
        self._lock = threading.Lock()
        self._held: set[str] = set()
        self._cheats: AdminCheats = NO_CHEATS
        self._running = False
        self._thread: threading.Thread | None = None

    # -- Inputs -------------------------------------------------------------

    def press(self, *codes: str) -> None:
        """Mark control codes as held.  Codes outside both control maps are dropped."""
        with self._lock:
            self._held.update(c for c in codes if c in ALL_CODES)

    def release(self, *codes: str) -> None:
        with self._lock:
            self._held.difference_update(codes)

    def release_all(self) -> None:
        with self._lock:
            self._held.clear()

    @property
    def held(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._held)

    @property
    def cheats(self) -> AdminCheats:
        return self._cheats

    def set_cheats(self, cheats: AdminCheats) -> None:
        with self._lock:
            self._cheats = cheats
        if cheats.enabled:
            logger.info(f"Admin overrides enabled for player {cheats.player_id}")

    # -- Engine access ------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self.engine.state

    @property
    def event_bus(self) -> EventBus | None:
        """Bus the engine publishes gameplay events on."""
        return self.engine.event_bus

    def pause(self) -> None:
        with self._lock:
            self.engine.pause()

    def resume(self) -> None:
        with self._lock:
            self.engine.resume()

    def restart(self, map_id: int | None = None, rounds_to_win: int | None = None) -> GameState:
        with self._lock:
            self._held.clear()
            return self.engine.restart(map_id, rounds_to_win)

    def apply_remote_tank(self, payload: dict) -> Tank:
        with self._lock:
            return self.engine.apply_remote_tank(payload)

    def step(self, dt: float | None = None) -> TickResult:
        """Run one tick with the currently held controls."""
        dt = 1.0 / self._cfg.tick_rate if dt is None else dt
        with self._lock:
            return self.engine.tick(frozenset(self._held), dt, self._cheats)

    # -- Thread -------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._tick_loop, name="arena-tick", daemon=True)
        self._thread.start()
        logger.info(f"Arena host started at {self._cfg.tick_rate:g} Hz")

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info("Arena host stopped")

    def _tick_loop(self) -> None:
        period = 1.0 / self._cfg.tick_rate
        last = time.monotonic()
        while self._running:
            time.sleep(period)
            now = time.monotonic()
            self.step(now - last)
            last = now
