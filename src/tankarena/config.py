"""Configuration management using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Arena settings loaded from environment variables (``TANKARENA_*``)."""

    model_config = SettingsConfigDict(
        env_prefix="TANKARENA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Arena geometry
    arena_width: float = Field(1000.0, gt=0)
    arena_height: float = Field(600.0, gt=0)
    wall_thickness: float = Field(20.0, gt=0)

    # Tanks (movement values are per tick)
    tank_size: float = Field(30.0, gt=0)
    tank_speed: float = Field(3.0, gt=0)
    rotation_speed: float = 0.05
    reverse_factor: float = 0.6
    tank_max_health: int = Field(100, gt=0)
    spawn_inset: float = 100.0
    respawn_time: float = Field(2.0, ge=0)  # seconds

    # Projectiles
    projectile_speed: float = Field(8.0, gt=0)
    projectile_size: float = Field(5.0, gt=0)
    barrel_factor: float = 0.8  # barrel length as a fraction of tank_size
    shoot_cooldown: float = Field(0.5, ge=0)  # seconds
    max_bounces: int = Field(3, ge=0)
    projectile_lifetime: float = Field(5.0, gt=0)  # seconds
    base_damage: float = 100.0
    bounce_nudge: float = 1.0

    # Power-ups
    powerup_spawn_interval: float = Field(5.0, gt=0)
    powerup_duration: float = Field(8.0, gt=0)  # effect lifetime once applied
    powerup_lifetime: float = Field(15.0, gt=0)  # time on the arena floor
    max_powerups: int = Field(3, ge=0)
    powerup_radius: float = 15.0
    powerup_spawn_attempts: int = Field(50, gt=0)
    powerup_spawn_margin: float = 80.0
    powerup_wall_buffer: float = 20.0
    powerup_tank_clearance: float = 80.0
    powerup_spacing: float = 60.0
    teleport_margin: float = 100.0
    speed_boost_multiplier: float = 2.0
    rapid_fire_multiplier: float = 3.0
    damage_boost_multiplier: float = 2.0

    # Scoring
    win_score: int = Field(5, ge=1)
    rounds_to_win: int = Field(3, ge=1)
    round_transition_delay: float = Field(2.0, ge=0)  # seconds
    default_map: int = 1

    # Admin overrides
    admin_speed_multiplier: float = 3.0
    admin_fire_rate_multiplier: float = 10.0
    admin_instant_kill_damage: float = 1000.0
    admin_bounce_cap: int = 999

    # Host loop / API
    host: str = "127.0.0.1"
    port: int = 8000
    tick_rate: float = Field(60.0, gt=0)  # Hz
    api_prefix: str = "/api/arena"
    log_level: str = "INFO"

    @property
    def tank_radius(self) -> float:
        return self.tank_size / 2

    @property
    def barrel_length(self) -> float:
        return self.tank_size * self.barrel_factor


# Global settings instance
settings = Settings()
