"""Arena entities, resolvers and the tick engine."""
from .ballistics import BallisticsResult, advance_projectiles, damage_wall, update_projectile
from .cheats import AdminCheats, EffectiveStats, NO_CHEATS, resolve_effective_stats
from .combat import CombatResolver
from .controls import ALL_CODES, PLAYER1_CONTROLS, PLAYER2_CONTROLS, PLAYER_CONTROLS, Controls, controls_for
from .engine import ArenaEngine, TickResult
from .entities import (
    INDESTRUCTIBLE,
    ActivePowerUp,
    GameState,
    MatchPhase,
    PowerUp,
    PowerUpType,
    Projectile,
    Tank,
    Wall,
)
from .maps import MAPS, MapConfig, get_map, get_map_walls, list_maps
from .match import end_match, new_game_state, reset_round, schedule_round_transition, transition_due
from .mirror import SnapshotPayload, TankPayload, snapshot_payload
from .movement import move_tank, push_out_of_wall, respawn_tank, spawn_tank, tick_respawn
from .powerups import PowerUpManager, consume_shield, refresh_effects

__all__ = [
    "ALL_CODES",
    "ActivePowerUp",
    "AdminCheats",
    "ArenaEngine",
    "BallisticsResult",
    "CombatResolver",
    "Controls",
    "EffectiveStats",
    "GameState",
    "INDESTRUCTIBLE",
    "MAPS",
    "MapConfig",
    "MatchPhase",
    "NO_CHEATS",
    "PLAYER1_CONTROLS",
    "PLAYER2_CONTROLS",
    "PLAYER_CONTROLS",
    "PowerUp",
    "PowerUpManager",
    "PowerUpType",
    "Projectile",
    "SnapshotPayload",
    "Tank",
    "TankPayload",
    "TickResult",
    "Wall",
    "advance_projectiles",
    "consume_shield",
    "controls_for",
    "damage_wall",
    "end_match",
    "get_map",
    "get_map_walls",
    "list_maps",
    "move_tank",
    "new_game_state",
    "push_out_of_wall",
    "refresh_effects",
    "reset_round",
    "resolve_effective_stats",
    "respawn_tank",
    "schedule_round_transition",
    "snapshot_payload",
    "spawn_tank",
    "tick_respawn",
    "transition_due",
    "update_projectile",
]
