"""Core data models: Vector2, Character, Enemy, Collectible, Obstacle, Generator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dungeon_script.core.enums import (
    CharacterClass,
    CollectibleType,
    Direction,
    EnemyBehavior,
    EnemyType,
    ObstacleType,
    PowerUpType,
)


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer grid coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def chebyshev(self, other: Vector2) -> int:
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def neighbors(self) -> list[Vector2]:
        """Orthogonal neighbours in spawn-preference order: right, left, down, up."""
        return [
            Vector2(self.x + 1, self.y),
            Vector2(self.x - 1, self.y),
            Vector2(self.x, self.y + 1),
            Vector2(self.x, self.y - 1),
        ]

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Facing direction -> unit step on the grid (y grows downward)
DIRECTION_OFFSETS: dict[Direction, Vector2] = {
    Direction.UP: Vector2(0, -1),
    Direction.DOWN: Vector2(0, 1),
    Direction.LEFT: Vector2(-1, 0),
    Direction.RIGHT: Vector2(1, 0),
}


def as_position(value: Any) -> Vector2:
    """Coerce a script-supplied target into a Vector2.

    Accepts a Vector2, anything with a ``position`` attribute, a mapping
    with ``x``/``y`` keys, or a 2-item sequence.
    """
    if isinstance(value, Vector2):
        return value
    if hasattr(value, "position") and isinstance(value.position, Vector2):
        return value.position
    if isinstance(value, dict) and "x" in value and "y" in value:
        return Vector2(int(value["x"]), int(value["y"]))
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Vector2(int(value[0]), int(value[1]))
    raise TypeError(f"cannot use {value!r} as a position")


@dataclass(slots=True)
class Character:
    """The hero.  Owned by the WorldState; only commands and the resolver mutate it."""

    position: Vector2
    name: str = "Hero"
    hero_class: CharacterClass = CharacterClass.WARRIOR
    health: int = 100
    max_health: int = 100
    food: int | None = None          # Gauntlet only
    max_food: int | None = None
    gems: int = 0
    has_key: bool = False
    direction: Direction = Direction.RIGHT
    level: int = 1
    experience: int = 0
    special_power: str | None = None

    @property
    def alive(self) -> bool:
        return self.health > 0

    def copy(self) -> Character:
        return Character(
            position=self.position,
            name=self.name,
            hero_class=self.hero_class,
            health=self.health,
            max_health=self.max_health,
            food=self.food,
            max_food=self.max_food,
            gems=self.gems,
            has_key=self.has_key,
            direction=self.direction,
            level=self.level,
            experience=self.experience,
            special_power=self.special_power,
        )


@dataclass(slots=True)
class Enemy:
    """A hostile actor.  Defeat flips ``is_alive``; enemies are never removed."""

    id: str
    type: EnemyType
    position: Vector2
    health: int = 20
    max_health: int = 20
    damage: int = 10
    is_alive: bool = True
    speed: float = 1.0
    behavior: EnemyBehavior = EnemyBehavior.CHASE
    spawned_from_generator: bool = False
    generator_id: str | None = None

    @property
    def undefeatable(self) -> bool:
        return self.type == EnemyType.DEATH

    def copy(self) -> Enemy:
        return Enemy(
            id=self.id,
            type=self.type,
            position=self.position,
            health=self.health,
            max_health=self.max_health,
            damage=self.damage,
            is_alive=self.is_alive,
            speed=self.speed,
            behavior=self.behavior,
            spawned_from_generator=self.spawned_from_generator,
            generator_id=self.generator_id,
        )


@dataclass(slots=True)
class Collectible:
    """A pickup.  ``collected`` flips exactly once, when the hero steps on it.

    Potions stay in the list after pickup as inventory; ``consumed`` marks
    the ones already drunk.
    """

    id: str
    position: Vector2
    type: CollectibleType
    value: int = 0
    collected: bool = False
    effect: PowerUpType | None = None
    duration: float | None = None
    consumed: bool = False

    def copy(self) -> Collectible:
        return Collectible(
            id=self.id,
            position=self.position,
            type=self.type,
            value=self.value,
            collected=self.collected,
            effect=self.effect,
            duration=self.duration,
            consumed=self.consumed,
        )


@dataclass(slots=True)
class Obstacle:
    """A static cell feature: wall, hazard, tag, or generator."""

    position: Vector2
    type: ObstacleType
    damage: int | None = None
    generates_type: EnemyType | None = None
    generation_rate: float | None = None
    health: int | None = None

    @property
    def blocks_movement(self) -> bool:
        return self.type == ObstacleType.WALL

    @property
    def is_hazard(self) -> bool:
        return self.type not in (ObstacleType.WALL, ObstacleType.GENERATOR) and bool(self.damage)

    def copy(self) -> Obstacle:
        return Obstacle(
            position=self.position,
            type=self.type,
            damage=self.damage,
            generates_type=self.generates_type,
            generation_rate=self.generation_rate,
            health=self.health,
        )


@dataclass(slots=True)
class Generator:
    """Runtime spawner derived from a ``generator`` obstacle."""

    id: str
    position: Vector2
    type: EnemyType
    health: int
    max_health: int
    generation_rate: float          # seconds between spawns
    last_generated: float           # clock reading of the last spawn (or run start)
    is_active: bool = True
    spawned: int = 0

    def due(self, now: float) -> bool:
        return self.is_active and now - self.last_generated >= self.generation_rate

    def copy(self) -> Generator:
        return Generator(
            id=self.id,
            position=self.position,
            type=self.type,
            health=self.health,
            max_health=self.max_health,
            generation_rate=self.generation_rate,
            last_generated=self.last_generated,
            is_active=self.is_active,
            spawned=self.spawned,
        )
