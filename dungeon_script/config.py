"""Engine configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration for a script run."""

    # Pacing (seconds the scheduler suspends around each statement)
    step_delay: float = 0.8
    settle_delay: float = 0.4

    # Macro expansion
    max_repeat: int = 20

    # Evaluation guards
    max_loop_iterations: int = 1000
    max_statement_steps: int = 10000

    # Grid used when a world carries no explicit size
    default_grid_width: int = 12
    default_grid_height: int = 10

    # Queries
    detection_range: int = 3

    # Hunger (Gauntlet)
    food_decay_per_second: int = 1
    starvation_damage_per_second: int = 5
    food_warning_threshold: int = 20
    critical_health_threshold: int = 25

    # Generators
    generator_default_health: int = 50
    generator_default_rate: float = 15.0
    generator_default_type: str = "grunt"
    generator_hit_damage: int = 25
    generator_destroy_score: int = 100
    spawned_enemy_health: int = 20
    spawned_enemy_damage: int = 10

    # Specials & potions
    special_duration: float = 5.0
    fireball_damage: int = 30
    rapid_shot_damage: int = 15
    potion_default_effect: str = "invincibility"
    potion_default_duration: float = 10.0

    # RNG
    seed: int = 42

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"


def instant(config: EngineConfig | None = None) -> EngineConfig:
    """Return *config* (or the defaults) with all pacing delays removed."""
    return replace(config or EngineConfig(), step_delay=0.0, settle_delay=0.0)
