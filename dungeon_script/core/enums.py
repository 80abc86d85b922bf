"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class CharacterClass(str, Enum):
    """Hero classes.  Each one carries its own damage and special ability."""

    WARRIOR = "warrior"
    VALKYRIE = "valkyrie"
    WIZARD = "wizard"
    ELF = "elf"


@unique
class Direction(str, Enum):
    """Facing directions, named the way scripts spell them."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@unique
class EnemyType(str, Enum):
    GRUNT = "grunt"
    GHOST = "ghost"
    DEMON = "demon"
    SORCERER = "sorcerer"
    LOBBER = "lobber"
    DEATH = "death"          # Undefeatable; only avoided
    ORC = "orc"
    SKELETON = "skeleton"
    DRAGON = "dragon"


@unique
class EnemyBehavior(str, Enum):
    CHASE = "chase"
    SHOOT = "shoot"
    TELEPORT = "teleport"
    PATROL = "patrol"


@unique
class CollectibleType(str, Enum):
    GEM = "gem"
    HEART = "heart"
    KEY = "key"
    COIN = "coin"
    FOOD = "food"
    POTION = "potion"
    TREASURE = "treasure"


@unique
class ObstacleType(str, Enum):
    WALL = "wall"
    SPIKE = "spike"
    FIRE = "fire"
    POISON = "poison"
    ACID = "acid"
    IT = "it"                # Tags the hero: every enemy targets them
    GENERATOR = "generator"


@unique
class PowerUpType(str, Enum):
    INVINCIBILITY = "invincibility"
    SPEED = "speed"
    POWER = "power"
    SHOT = "shot"
    MAGIC = "magic"


@unique
class RunStatus(str, Enum):
    """Scheduler lifecycle: idle -> running -> (completed | failed)."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    SPAWN = 0
    PATTERN = 1
