"""Core data models and world representation."""

from dungeon_script.core.enums import (
    CharacterClass,
    CollectibleType,
    Direction,
    Domain,
    EnemyBehavior,
    EnemyType,
    ObstacleType,
    PowerUpType,
    RunStatus,
)
from dungeon_script.core.models import Character, Collectible, Enemy, Generator, Obstacle, Vector2
from dungeon_script.core.effects import PowerUp
from dungeon_script.core.world_state import WorldState
from dungeon_script.core.levels import Level, get_level
from dungeon_script.core.snapshot import Frame, FrameRecorder

__all__ = [
    "Character",
    "CharacterClass",
    "Collectible",
    "CollectibleType",
    "Direction",
    "Domain",
    "Enemy",
    "EnemyBehavior",
    "EnemyType",
    "Frame",
    "FrameRecorder",
    "Generator",
    "Level",
    "Obstacle",
    "ObstacleType",
    "PowerUp",
    "PowerUpType",
    "RunStatus",
    "Vector2",
    "WorldState",
    "get_level",
]
