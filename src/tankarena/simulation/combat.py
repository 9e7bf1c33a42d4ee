"""CombatResolver — firing, projectile-tank hits, scoring and round wins.

Architecture
------------
  1. ``fire()`` creates a Projectile at the turret tip when the tank's
     cooldown (divided by its effective fire-rate multiplier) has elapsed.
     Damage and bounce cap come from the tank's EffectiveStats, so admin
     overrides are already folded in.

  2. ``resolve_hits()`` tests every live projectile against each tank in
     order and stops at the first tank it overlaps:

       god mode on the tank   -> projectile gone, tank untouched
       tank has a shield      -> shield consumed, projectile gone
       otherwise              -> tank destroyed (damage is all-or-nothing)

     A projectile cannot hit its owner until it has bounced at least once.

  3. A kill scores a point for the projectile's owner.  Reaching
     ``win_score`` wins the round; reaching ``rounds_to_win`` round wins
     ends the match.  While a round transition is pending, hits still
     resolve but no longer score.

Events emitted: ``score_changed``, ``round_won``, ``match_over``,
``tank_destroyed``, ``shield_absorbed``.
"""

from __future__ import annotations

import itertools
import math
from dataclasses import replace
from typing import Callable, Sequence

from loguru import logger

from tankarena.config import Settings, settings as default_settings

from .cheats import AdminCheats, EffectiveStats, resolve_effective_stats
from .entities import GameState, MatchPhase, Projectile, Tank
from .match import end_match, schedule_round_transition
from .powerups import consume_shield

Emit = Callable[[str, dict], None]


def _no_emit(event_type: str, data: dict) -> None:
    pass


class CombatResolver:
    """Creates projectiles and resolves the hits they score."""

    def __init__(self, emit: Emit | None = None, cfg: Settings | None = None) -> None:
        self._emit = emit or _no_emit
        self._cfg = cfg or default_settings
        self._ids = itertools.count()

    # ------------------------------------------------------------------
    # Firing
    # ------------------------------------------------------------------

    def can_fire(self, tank: Tank, now: float, stats: EffectiveStats) -> bool:
        if not tank.is_alive:
            return False
        if tank.last_shot is None:
            return True
        return now - tank.last_shot >= stats.shot_cooldown(self._cfg.shoot_cooldown)

    def fire(self, tank: Tank, now: float, stats: EffectiveStats) -> Projectile | None:
        """Fire from *tank*'s turret.  Returns None while on cooldown."""
        if not self.can_fire(tank, now, stats):
            return None

        cfg = self._cfg
        aim = tank.turret_rotation
        barrel = cfg.barrel_length
        return Projectile(
            projectile_id=next(self._ids),
            position=(
                tank.position[0] + math.cos(aim) * barrel,
                tank.position[1] + math.sin(aim) * barrel,
            ),
            velocity=(
                math.cos(aim) * cfg.projectile_speed,
                math.sin(aim) * cfg.projectile_speed,
            ),
            owner_id=tank.tank_id,
            created_at=now,
            damage=stats.damage,
            max_bounces=stats.bounce_cap,
        )

    def fire_all(
        self,
        tanks: Sequence[Tank],
        firing: Sequence[bool],
        now: float,
        cheats: AdminCheats | None = None,
    ) -> tuple[list[Tank], list[Projectile]]:
        """Fire for every tank whose shoot control is held."""
        updated = list(tanks)
        fired: list[Projectile] = []
        for i, tank in enumerate(tanks):
            if not firing[i]:
                continue
            stats = resolve_effective_stats(tank, cheats, self._cfg)
            projectile = self.fire(tank, now, stats)
            if projectile is not None:
                fired.append(projectile)
                updated[i] = replace(tank, last_shot=now)
        return updated, fired

    # ------------------------------------------------------------------
    # Hits
    # ------------------------------------------------------------------

    def check_hit(self, projectile: Projectile, tank: Tank) -> bool:
        if not tank.is_alive:
            return False
        if projectile.owner_id == tank.tank_id and projectile.bounces == 0:
            return False
        dist = math.hypot(
            projectile.position[0] - tank.position[0],
            projectile.position[1] - tank.position[1],
        )
        return dist < self._cfg.tank_radius + self._cfg.projectile_size

    def resolve_hits(
        self,
        state: GameState,
        now: float,
        cheats: AdminCheats | None = None,
    ) -> GameState:
        """Reconcile projectile-tank contacts and update scores/round state."""
        if state.phase is MatchPhase.MATCH_OVER:
            return state

        cfg = self._cfg
        tanks = list(state.tanks)
        survivors: list[Projectile] = []

        for projectile in state.projectiles:
            hit_index = next(
                (i for i, t in enumerate(tanks) if self.check_hit(projectile, t)),
                None,
            )
            if hit_index is None:
                survivors.append(projectile)
                continue

            target = tanks[hit_index]
            if resolve_effective_stats(target, cheats, cfg).god_mode:
                continue

            if target.has_shield:
                tanks[hit_index] = consume_shield(target)
                logger.debug(f"Tank {target.tank_id} shield absorbed projectile {projectile.projectile_id}")
                self._emit("shield_absorbed", {
                    "tank_id": target.tank_id,
                    "projectile_id": projectile.projectile_id,
                })
                continue

            tanks[hit_index] = replace(
                target,
                health=0,
                is_alive=False,
                respawn_timer=cfg.respawn_time,
            )
            logger.debug(f"Tank {target.tank_id} destroyed by player {projectile.owner_id}")
            self._emit("tank_destroyed", {
                "tank_id": target.tank_id,
                "shooter_id": projectile.owner_id,
                "position": {"x": target.position[0], "y": target.position[1]},
            })

            state = replace(state, tanks=tuple(tanks))
            state = self._score_kill(state, projectile.owner_id, now)
            if state.phase is MatchPhase.MATCH_OVER:
                return state

        return replace(state, tanks=tuple(tanks), projectiles=tuple(survivors))

    def _score_kill(self, state: GameState, shooter_id: int, now: float) -> GameState:
        if state.phase is not MatchPhase.ACTIVE:
            return state

        shooter = shooter_id - 1
        scores = list(state.scores)
        scores[shooter] += 1
        state = replace(state, scores=tuple(scores))
        self._emit("score_changed", {"scores": scores})

        if scores[shooter] < self._cfg.win_score:
            return state

        round_wins = list(state.round_wins)
        round_wins[shooter] += 1
        state = replace(state, round_wins=tuple(round_wins))
        logger.info(f"Player {shooter_id} wins round {state.current_round}")
        self._emit("round_won", {
            "player_index": shooter,
            "round": state.current_round,
            "round_wins": round_wins,
        })

        if round_wins[shooter] >= state.rounds_to_win:
            state = end_match(state, shooter_id)
            self._emit("match_over", {"winner": shooter_id, "round_wins": round_wins})
            return state

        return schedule_round_transition(state, now, self._cfg)
