"""Pydantic models for the REST API and for JSON level files."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_script.core.enums import (
    CharacterClass,
    CollectibleType,
    Direction,
    EnemyBehavior,
    EnemyType,
    ObstacleType,
    PowerUpType,
    RunStatus,
)
from dungeon_script.core.levels import Level
from dungeon_script.core.models import Character, Collectible, Enemy, Obstacle, Vector2
from dungeon_script.core.snapshot import Frame
from dungeon_script.core.world_state import WorldState


class _Schema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# --- Grid primitives ---

class PositionSchema(_Schema):
    x: int
    y: int

    def to_vector(self) -> Vector2:
        return Vector2(self.x, self.y)


class CharacterSchema(_Schema):
    position: PositionSchema
    name: str = "Hero"
    hero_class: CharacterClass = CharacterClass.WARRIOR
    health: int = 100
    max_health: int = 100
    food: int | None = None
    max_food: int | None = None
    gems: int = 0
    has_key: bool = False
    direction: Direction = Direction.RIGHT
    level: int = 1
    experience: int = 0
    special_power: str | None = None

    def to_character(self) -> Character:
        return Character(
            position=self.position.to_vector(),
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


class EnemySchema(_Schema):
    id: str
    type: EnemyType
    position: PositionSchema
    health: int = 20
    max_health: int | None = None
    damage: int = 10
    is_alive: bool = True
    speed: float = 1.0
    behavior: EnemyBehavior = EnemyBehavior.CHASE
    spawned_from_generator: bool = False
    generator_id: str | None = None

    def to_enemy(self) -> Enemy:
        return Enemy(
            id=self.id,
            type=self.type,
            position=self.position.to_vector(),
            health=self.health,
            max_health=self.max_health if self.max_health is not None else self.health,
            damage=self.damage,
            is_alive=self.is_alive,
            speed=self.speed,
            behavior=self.behavior,
            spawned_from_generator=self.spawned_from_generator,
            generator_id=self.generator_id,
        )


class CollectibleSchema(_Schema):
    id: str
    position: PositionSchema
    type: CollectibleType
    value: int = 0
    collected: bool = False
    effect: PowerUpType | None = None
    duration: float | None = Field(None, gt=0)
    consumed: bool = False

    def to_collectible(self) -> Collectible:
        return Collectible(
            id=self.id,
            position=self.position.to_vector(),
            type=self.type,
            value=self.value,
            collected=self.collected,
            effect=self.effect,
            duration=self.duration,
            consumed=self.consumed,
        )


class ObstacleSchema(_Schema):
    position: PositionSchema
    type: ObstacleType
    damage: int | None = None
    generates_type: EnemyType | None = None
    generation_rate: float | None = Field(None, gt=0)
    health: int | None = Field(None, gt=0)

    def to_obstacle(self) -> Obstacle:
        return Obstacle(
            position=self.position.to_vector(),
            type=self.type,
            damage=self.damage,
            generates_type=self.generates_type,
            generation_rate=self.generation_rate,
            health=self.health,
        )


class GeneratorSchema(_Schema):
    id: str
    position: PositionSchema
    type: EnemyType
    health: int
    max_health: int
    generation_rate: float
    is_active: bool
    spawned: int = 0


class PowerUpSchema(_Schema):
    id: str
    type: PowerUpType
    duration: float
    is_active: bool


# --- Levels ---

class LevelSummary(_Schema):
    id: int
    name: str
    description: str = ""
    rules: Literal["basic", "gauntlet"] = "basic"
    width: int
    height: int
    objective: str = ""


class LevelSchema(_Schema):
    id: int = 0
    name: str = "Custom Level"
    description: str = ""
    rules: Literal["basic", "gauntlet"] = "basic"
    width: int = Field(..., gt=0, le=64)
    height: int = Field(..., gt=0, le=64)
    character: CharacterSchema
    exit: PositionSchema
    enemies: list[EnemySchema] = Field(default_factory=list)
    collectibles: list[CollectibleSchema] = Field(default_factory=list)
    obstacles: list[ObstacleSchema] = Field(default_factory=list)
    objective: str = ""
    hints: list[str] = Field(default_factory=list)
    starter_code: str = ""
    solution: str = ""
    time_limit: int | None = None

    @model_validator(mode="after")
    def _inside_grid(self) -> LevelSchema:
        points = [("character", self.character.position), ("exit", self.exit)]
        points += [(f"enemy {e.id}", e.position) for e in self.enemies]
        points += [(f"collectible {c.id}", c.position) for c in self.collectibles]
        points += [(f"{o.type.value} obstacle", o.position) for o in self.obstacles]
        for label, pos in points:
            if not (0 <= pos.x < self.width and 0 <= pos.y < self.height):
                raise ValueError(f"{label} at ({pos.x}, {pos.y}) is outside the {self.width}x{self.height} grid")
        return self

    def to_level(self) -> Level:
        return Level(
            id=self.id,
            name=self.name,
            width=self.width,
            height=self.height,
            character=self.character.to_character(),
            exit=self.exit.to_vector(),
            rules=self.rules,
            description=self.description,
            enemies=[e.to_enemy() for e in self.enemies],
            collectibles=[c.to_collectible() for c in self.collectibles],
            obstacles=[o.to_obstacle() for o in self.obstacles],
            objective=self.objective,
            hints=list(self.hints),
            starter_code=self.starter_code,
            solution=self.solution,
            time_limit=self.time_limit,
        )


def load_level(path: str | Path) -> Level:
    """Read and validate a JSON level file."""
    text = Path(path).read_text(encoding="utf-8")
    return LevelSchema.model_validate_json(text).to_level()


# --- World & runs ---

class WorldStateSchema(_Schema):
    character: CharacterSchema
    exit: PositionSchema
    grid_width: int
    grid_height: int
    enemies: list[EnemySchema]
    collectibles: list[CollectibleSchema]
    obstacles: list[ObstacleSchema]
    generators: list[GeneratorSchema]
    power_ups: list[PowerUpSchema]
    active_effects: list[PowerUpType]
    current_level: int
    moves: int
    score: int
    time: int
    keys: int
    potions: int
    it_tagged: bool
    is_running: bool
    is_complete: bool
    game_over: bool

    @classmethod
    def from_world(cls, world: WorldState) -> WorldStateSchema:
        return cls.model_validate(world)


class FrameSchema(BaseModel):
    current_line: int
    logs: list[str]
    state: WorldStateSchema

    @classmethod
    def from_frame(cls, frame: Frame) -> FrameSchema:
        return cls(
            current_line=frame.current_line,
            logs=list(frame.logs),
            state=WorldStateSchema.from_world(frame.state),
        )


class RunRequest(BaseModel):
    script: str = Field(..., max_length=20_000)
    level_id: int | None = None
    level: LevelSchema | None = None
    include_frames: bool = True

    @model_validator(mode="after")
    def _one_level_source(self) -> RunRequest:
        if (self.level_id is None) == (self.level is None):
            raise ValueError("provide exactly one of 'level_id' or 'level'")
        return self


class RunResponse(BaseModel):
    status: RunStatus
    is_complete: bool
    game_over: bool
    logs: list[str]
    code_lines: list[str]
    final_state: WorldStateSchema
    frames: list[FrameSchema] = Field(default_factory=list)
