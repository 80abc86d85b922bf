"""Mutable authoritative world state, only mutated by commands and the resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dungeon_script.core.effects import PowerUp
from dungeon_script.core.enums import CollectibleType, EnemyType, ObstacleType, PowerUpType
from dungeon_script.core.models import Character, Collectible, Enemy, Generator, Obstacle, Vector2

if TYPE_CHECKING:
    from dungeon_script.core.levels import Level


@dataclass(slots=True)
class WorldState:
    """The single source of truth for one script run.

    Enemies are an arena: defeated ones stay in the list with
    ``is_alive=False`` so indices and generator provenance stay stable.
    """

    character: Character
    exit: Vector2
    grid_width: int
    grid_height: int
    enemies: list[Enemy] = field(default_factory=list)
    collectibles: list[Collectible] = field(default_factory=list)
    obstacles: list[Obstacle] = field(default_factory=list)
    generators: list[Generator] = field(default_factory=list)
    power_ups: list[PowerUp] = field(default_factory=list)
    active_effects: list[PowerUpType] = field(default_factory=list)
    current_level: int = 0
    moves: int = 0
    score: int = 0
    time: int = 0
    keys: int = 0
    potions: int = 0
    it_tagged: bool = False
    is_running: bool = False
    is_complete: bool = False
    game_over: bool = False
    announcements: set[str] = field(default_factory=set)
    _serial: int = 0

    @classmethod
    def from_level(cls, level: Level) -> WorldState:
        """Build a fresh world from a level definition (deep-copied)."""
        return cls(
            character=level.character.copy(),
            exit=level.exit,
            grid_width=level.width,
            grid_height=level.height,
            enemies=[e.copy() for e in level.enemies],
            collectibles=[c.copy() for c in level.collectibles],
            obstacles=[o.copy() for o in level.obstacles],
            current_level=level.id,
        )

    # -- lifecycle --

    @property
    def terminal(self) -> bool:
        return self.game_over or self.is_complete

    def next_serial(self) -> int:
        self._serial += 1
        return self._serial

    # -- grid queries --

    def in_bounds(self, pos: Vector2) -> bool:
        return 0 <= pos.x < self.grid_width and 0 <= pos.y < self.grid_height

    def is_wall(self, pos: Vector2) -> bool:
        return any(o.position == pos and o.type == ObstacleType.WALL for o in self.obstacles)

    def obstacle_at(self, pos: Vector2) -> Obstacle | None:
        for obstacle in self.obstacles:
            if obstacle.position == pos:
                return obstacle
        return None

    def hazard_at(self, pos: Vector2) -> Obstacle | None:
        """Damaging non-wall, non-generator obstacle at *pos*, if any."""
        for obstacle in self.obstacles:
            if obstacle.position == pos and obstacle.is_hazard:
                return obstacle
        return None

    def collectible_at(self, pos: Vector2) -> Collectible | None:
        """Uncollected collectible at *pos*, if any."""
        for item in self.collectibles:
            if item.position == pos and not item.collected:
                return item
        return None

    # -- actors --

    def live_enemies(self) -> list[Enemy]:
        return [e for e in self.enemies if e.is_alive]

    def live_enemy_at(self, pos: Vector2) -> Enemy | None:
        for enemy in self.enemies:
            if enemy.is_alive and enemy.position == pos:
                return enemy
        return None

    def enemies_within(
        self,
        origin: Vector2,
        distance: int,
        enemy_type: EnemyType | None = None,
    ) -> list[Enemy]:
        """Live enemies within Manhattan *distance* of *origin*, optionally filtered by type."""
        return [
            e for e in self.enemies
            if e.is_alive
            and (enemy_type is None or e.type == enemy_type)
            and e.position.manhattan(origin) <= distance
        ]

    def active_generator_near(self, origin: Vector2, distance: int = 1) -> Generator | None:
        for gen in self.generators:
            if gen.is_active and gen.position.chebyshev(origin) <= distance:
                return gen
        return None

    def remove_generator_obstacle(self, gen: Generator) -> None:
        self.obstacles = [
            o for o in self.obstacles
            if not (o.position == gen.position and o.type == ObstacleType.GENERATOR)
        ]

    # -- inventory & effects --

    def key_required(self) -> bool:
        return any(c.type == CollectibleType.KEY for c in self.collectibles)

    def potion_in_inventory(self) -> Collectible | None:
        for item in self.collectibles:
            if item.type == CollectibleType.POTION and item.collected and not item.consumed:
                return item
        return None

    def has_power_up(self, effect: PowerUpType) -> bool:
        return any(p.is_active and p.type == effect for p in self.power_ups)

    def refresh_active_effects(self) -> None:
        self.active_effects = [p.type for p in self.power_ups if p.is_active]

    # -- copy --

    def copy(self) -> WorldState:
        """Deep copy handed to step callbacks; later mutation never leaks into it."""
        return WorldState(
            character=self.character.copy(),
            exit=self.exit,
            grid_width=self.grid_width,
            grid_height=self.grid_height,
            enemies=[e.copy() for e in self.enemies],
            collectibles=[c.copy() for c in self.collectibles],
            obstacles=[o.copy() for o in self.obstacles],
            generators=[g.copy() for g in self.generators],
            power_ups=[p.copy() for p in self.power_ups],
            active_effects=list(self.active_effects),
            current_level=self.current_level,
            moves=self.moves,
            score=self.score,
            time=self.time,
            keys=self.keys,
            potions=self.potions,
            it_tagged=self.it_tagged,
            is_running=self.is_running,
            is_complete=self.is_complete,
            game_over=self.game_over,
            announcements=set(self.announcements),
            _serial=self._serial,
        )
