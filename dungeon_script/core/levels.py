"""Level definitions and the built-in level catalog.

Each Level is a static template; ``WorldState.from_level`` deep-copies it
so a run never mutates the catalog.  Starter code and solutions are
written in the Python script dialect the engine evaluates.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dungeon_script.core.enums import (
    CharacterClass,
    CollectibleType as C,
    EnemyBehavior,
    EnemyType as E,
    ObstacleType as O,
    PowerUpType,
)
from dungeon_script.core.models import Character, Collectible, Enemy, Obstacle, Vector2


class LevelNotFoundError(KeyError):
    """Raised when a level id is not in the catalog."""


@dataclass(slots=True)
class Level:
    id: int
    name: str
    width: int
    height: int
    character: Character
    exit: Vector2
    rules: str = "basic"                    # "basic" | "gauntlet"
    description: str = ""
    enemies: list[Enemy] = field(default_factory=list)
    collectibles: list[Collectible] = field(default_factory=list)
    obstacles: list[Obstacle] = field(default_factory=list)
    objective: str = ""
    hints: list[str] = field(default_factory=list)
    starter_code: str = ""
    solution: str = ""
    time_limit: int | None = None


def _wall(x: int, y: int) -> Obstacle:
    return Obstacle(position=Vector2(x, y), type=O.WALL)


def _hazard(kind: O, x: int, y: int, damage: int) -> Obstacle:
    return Obstacle(position=Vector2(x, y), type=kind, damage=damage)


def _item(item_id: str, kind: C, x: int, y: int, value: int = 0, **extra) -> Collectible:
    return Collectible(id=item_id, position=Vector2(x, y), type=kind, value=value, **extra)


def _enemy(enemy_id: str, kind: E, x: int, y: int, health: int, damage: int, **extra) -> Enemy:
    return Enemy(
        id=enemy_id, type=kind, position=Vector2(x, y),
        health=health, max_health=health, damage=damage, **extra,
    )


# ---------------------------------------------------------------------------
# Basic dungeon lessons
# ---------------------------------------------------------------------------

BASIC_LEVELS: list[Level] = [
    Level(
        id=1,
        name="First Steps",
        description="Learn to move your hero through the dungeon",
        width=8,
        height=6,
        character=Character(position=Vector2(0, 0)),
        collectibles=[
            _item("gem1", C.GEM, 3, 2, 10),
            _item("gem2", C.GEM, 5, 1, 10),
        ],
        obstacles=[
            _wall(2, 1), _wall(2, 2), _wall(2, 3),
            _hazard(O.SPIKE, 4, 3, 20),
        ],
        exit=Vector2(7, 5),
        objective="Move to the exit and collect gems along the way",
        hints=[
            "Use hero.moveRight() to move right",
            "Gems are collected automatically when you step on them",
            "Repeat a command with a count: hero.moveRight(3) or hero.moveRight[3]",
        ],
        starter_code=(
            "// Move your hero to the exit!\n"
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
            "// Add more moves here...\n"
        ),
        solution=(
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
            "hero.moveUp()\n"
            "hero.moveRight(4)\n"
            "hero.moveDown(4)\n"
        ),
    ),
    Level(
        id=2,
        name="Combat Training",
        description="Learn to fight enemies and use loops",
        width=10,
        height=8,
        character=Character(position=Vector2(0, 0)),
        enemies=[
            _enemy("orc1", E.ORC, 3, 2, health=30, damage=15),
            _enemy("skeleton1", E.SKELETON, 6, 4, health=20, damage=10),
        ],
        collectibles=[
            _item("heart1", C.HEART, 1, 3, 25),
            _item("key1", C.KEY, 8, 1),
        ],
        obstacles=[
            _wall(2, 1), _wall(2, 2),
            _hazard(O.FIRE, 4, 5, 25), _hazard(O.FIRE, 5, 5, 25),
        ],
        exit=Vector2(9, 7),
        objective="Defeat enemies, collect the key, and reach the exit",
        hints=[
            "Use hero.attack() when next to an enemy",
            "A while loop keeps attacking until the enemy is defeated",
            "Check hero.health to monitor your health",
        ],
        starter_code=(
            "hero.moveDown(3)\n"
            "hero.moveRight(3)\n"
            "while hero.isEnemyNear():\n"
            "    hero.attack()\n"
            "# Add more code here...\n"
        ),
        solution=(
            "hero.moveDown(3)\n"
            "hero.moveRight(3)\n"
            "while hero.isEnemyNear():\n"
            "    hero.attack()\n"
            "hero.moveRight(3)\n"
            "while hero.isEnemyNear():\n"
            "    hero.attack()\n"
            "hero.moveRight(2)\n"
            "hero.moveUp(2)\n"
            "hero.moveRight()\n"
            "hero.moveDown(6)\n"
        ),
    ),
    Level(
        id=3,
        name="Advanced Tactics",
        description="Combine loops and repeat counts to beat the dragon",
        width=12,
        height=10,
        character=Character(position=Vector2(0, 0)),
        enemies=[
            _enemy("dragon1", E.DRAGON, 6, 5, health=50, damage=30),
            _enemy("orc1", E.ORC, 3, 7, health=30, damage=15),
            _enemy("orc2", E.ORC, 9, 2, health=30, damage=15),
        ],
        collectibles=[
            _item("gem1", C.GEM, 2, 3, 20),
            _item("gem2", C.GEM, 8, 8, 20),
            _item("heart1", C.HEART, 5, 1, 30),
            _item("key1", C.KEY, 10, 7),
        ],
        obstacles=[
            _wall(4, 2), _wall(4, 3), _wall(4, 4),
            _hazard(O.POISON, 7, 6, 20), _hazard(O.POISON, 8, 6, 20),
            _hazard(O.SPIKE, 1, 8, 15), _hazard(O.SPIKE, 2, 8, 15),
        ],
        exit=Vector2(11, 9),
        objective="Plan an efficient route and defeat the dragon",
        hints=[
            "for _ in range(2): repeats the indented commands",
            "Use hero.distanceTo(target) to measure how far something is",
            "Plan your path to avoid taking unnecessary damage",
        ],
        starter_code=(
            "for _ in range(2):\n"
            "    hero.moveRight()\n"
            "hero.moveDown(5)\n"
        ),
        solution=(
            "for _ in range(2):\n"
            "    hero.moveRight()\n"
            "hero.moveDown(5)\n"
            "hero.moveRight(3)\n"
            "while hero.isEnemyNear():\n"
            "    hero.attack()\n"
            "hero.moveDown(3)\n"
            "hero.moveRight(3)\n"
            "hero.moveUp()\n"
            "hero.moveRight(2)\n"
            "hero.moveDown(2)\n"
            "hero.moveRight()\n"
        ),
    ),
]


# ---------------------------------------------------------------------------
# Gauntlet levels
# ---------------------------------------------------------------------------

GAUNTLET_LEVELS: list[Level] = [
    Level(
        id=101,
        name="Dungeon Entrance",
        description="Your first steps into the Code Gauntlet",
        rules="gauntlet",
        width=10,
        height=8,
        character=Character(
            position=Vector2(0, 0), name="Coder", hero_class=CharacterClass.WARRIOR,
            food=100, max_food=100,
        ),
        enemies=[_enemy("grunt1", E.GRUNT, 5, 3, health=20, damage=10)],
        collectibles=[
            _item("food1", C.FOOD, 3, 2, 20),
            _item("key1", C.KEY, 7, 5),
            _item("coin1", C.COIN, 2, 6, 10),
        ],
        obstacles=[
            _wall(2, 1), _wall(2, 2), _wall(2, 3),
            _hazard(O.SPIKE, 4, 5, 10),
            Obstacle(position=Vector2(8, 2), type=O.GENERATOR),
        ],
        exit=Vector2(9, 7),
        objective="Collect the key, defeat the grunt, and reach the exit",
        hints=[
            "Use hero.attack() when next to an enemy",
            "Food restores the meter that drains over time",
            "Destroy generators to stop enemies from spawning",
        ],
        starter_code=(
            "# Your food drains over time, so move quickly!\n"
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
        ),
        solution=(
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
            "hero.moveRight()\n"
            "hero.moveDown()\n"
            "hero.attack()\n"
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
            "hero.moveRight(2)\n"
            "hero.moveDown(2)\n"
        ),
        time_limit=60,
    ),
    Level(
        id=102,
        name="Generator Room",
        description="Learn to destroy monster generators",
        rules="gauntlet",
        width=12,
        height=10,
        character=Character(
            position=Vector2(0, 0), name="Coder", hero_class=CharacterClass.WIZARD,
            food=80, max_food=100,
        ),
        enemies=[
            _enemy(
                "ghost1", E.GHOST, 5, 5, health=15, damage=8, speed=1.5,
                spawned_from_generator=True, generator_id="gen3",
            ),
            _enemy("grunt1", E.GRUNT, 8, 3, health=20, damage=10, behavior=EnemyBehavior.CHASE),
        ],
        collectibles=[
            _item("food1", C.FOOD, 3, 2, 30),
            _item(
                "potion1", C.POTION, 6, 7,
                effect=PowerUpType.INVINCIBILITY, duration=10,
            ),
            _item("key1", C.KEY, 10, 2),
        ],
        obstacles=[
            _wall(2, 1), _wall(2, 2), _wall(2, 3),
            Obstacle(position=Vector2(5, 2), type=O.GENERATOR, generates_type=E.GHOST, generation_rate=10),
            Obstacle(position=Vector2(9, 8), type=O.GENERATOR, generates_type=E.GRUNT, generation_rate=15),
            _hazard(O.FIRE, 7, 4, 15),
        ],
        exit=Vector2(11, 9),
        objective="Destroy the generators and collect the key to escape",
        hints=[
            "Generators keep spawning enemies until destroyed",
            "Attack a generator from a neighbouring cell",
            "Potions grant temporary special abilities",
        ],
        starter_code=(
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
        ),
        solution=(
            "hero.moveRight(3)\n"
            "hero.moveDown(2)\n"
            "hero.moveRight()\n"
            "hero.attack(2)\n"
            "hero.moveRight(3)\n"
            "hero.moveDown()\n"
            "while hero.isEnemyNear():\n"
            "    hero.attack()\n"
            "hero.moveUp()\n"
            "hero.moveRight(3)\n"
            "hero.moveDown(6)\n"
            "hero.attack(2)\n"
            "hero.moveDown()\n"
            "hero.moveRight()\n"
        ),
        time_limit=90,
    ),
]


LEVEL_CATALOG: dict[int, Level] = {lvl.id: lvl for lvl in BASIC_LEVELS + GAUNTLET_LEVELS}


def get_level(level_id: int) -> Level:
    """Look up a catalog level by id."""
    try:
        return LEVEL_CATALOG[level_id]
    except KeyError:
        raise LevelNotFoundError(level_id) from None
