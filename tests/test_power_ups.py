"""Tests for timed power-ups and potions.

Covers:
- Invincibility short-circuits hazard and collision damage
- Potions: pickup into inventory, drinking, empty inventory
- Expiry at statement boundaries, driven by the run clock
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dungeon_script.core.enums import CollectibleType, EnemyType, ObstacleType, PowerUpType
from dungeon_script.systems.power_ups import PowerUpSystem
from tests.helpers.dungeon_arena import DungeonArena


class TestInvincibility:
    def test_blocks_hazard_damage(self):
        arena = DungeonArena(rules="gauntlet")
        arena.add_hazard(ObstacleType.SPIKE, 1, 0, damage=30)
        PowerUpSystem.grant(arena.ctx, PowerUpType.INVINCIBILITY, 10.0)
        arena.commands.move_right()
        assert arena.hero.health == 100
        assert arena.narration.contains("Invincibility protected you from the spike!")

    def test_blocks_collision_damage(self):
        arena = DungeonArena(rules="gauntlet")
        arena.add_enemy(EnemyType.LOBBER, 0, 1, damage=25)
        PowerUpSystem.grant(arena.ctx, PowerUpType.INVINCIBILITY, 10.0)
        arena.commands.move_down()
        assert arena.hero.health == 100


class TestPotions:
    def test_drink_collected_potion(self):
        arena = DungeonArena(rules="gauntlet")
        potion = arena.add_item(CollectibleType.POTION, 1, 0, effect=PowerUpType.SPEED, duration=8.0)
        arena.commands.move_right()
        arena.commands.use_potion()
        assert potion.consumed
        assert arena.world.potions == 0
        assert arena.world.active_effects == [PowerUpType.SPEED]
        assert arena.narration.contains("Used speed potion! Effect active for 8 seconds.")

    def test_default_potion_effect(self):
        arena = DungeonArena(rules="gauntlet")
        arena.add_item(CollectibleType.POTION, 1, 0)
        arena.commands.move_right()
        power_up = PowerUpSystem.use_potion(arena.ctx)
        assert power_up.type == PowerUpType.INVINCIBILITY
        assert power_up.duration == 10.0

    def test_empty_inventory(self):
        arena = DungeonArena(rules="gauntlet")
        arena.add_item(CollectibleType.POTION, 5, 5)
        arena.commands.use_potion()
        assert arena.world.power_ups == []
        assert arena.narration.contains("No potion in inventory!")

    def test_each_potion_drinks_once(self):
        arena = DungeonArena(rules="gauntlet")
        arena.add_item(CollectibleType.POTION, 1, 0, effect=PowerUpType.POWER)
        arena.commands.move_right()
        arena.commands.use_potion()
        arena.commands.use_potion()
        assert len(arena.world.power_ups) == 1
        assert arena.narration.contains("No potion in inventory!")


class TestExpiry:
    def test_power_up_expires_after_duration(self):
        arena = DungeonArena(rules="gauntlet")
        arena.begin()
        PowerUpSystem.grant(arena.ctx, PowerUpType.POWER, 5.0)

        arena.tick(4.5)
        assert arena.world.has_power_up(PowerUpType.POWER)

        arena.tick(0.5)
        assert not arena.world.has_power_up(PowerUpType.POWER)
        assert arena.world.active_effects == []
        assert arena.narration.contains("power power-up has expired!")

    def test_only_expired_effects_are_dropped(self):
        arena = DungeonArena(rules="gauntlet")
        arena.begin()
        PowerUpSystem.grant(arena.ctx, PowerUpType.POWER, 2.0)
        PowerUpSystem.grant(arena.ctx, PowerUpType.INVINCIBILITY, 6.0)
        arena.tick(3.0)
        assert arena.world.active_effects == [PowerUpType.INVINCIBILITY]

    def test_special_expires_like_potion(self):
        arena = DungeonArena(rules="gauntlet")
        arena.begin()
        arena.commands.use_special()
        arena.tick(arena.config.special_duration)
        assert arena.world.active_effects == []

