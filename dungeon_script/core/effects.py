"""Power-up system: time-boxed effects granted by potions and class specials.

Design:
  - A PowerUp records its type, ``start_time`` and ``duration`` (seconds).
  - Expiry is recomputed at every line boundary from the run clock;
    there is no background timer.
  - ``WorldState.active_effects`` is a derived projection kept in sync by
    ``WorldState.refresh_active_effects`` for the rendering layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from dungeon_script.core.enums import PowerUpType


@dataclass(slots=True)
class PowerUp:
    id: str
    type: PowerUpType
    duration: float             # seconds
    start_time: float
    is_active: bool = True

    def expired(self, now: float) -> bool:
        return now - self.start_time >= self.duration

    def remaining(self, now: float) -> float:
        return max(0.0, self.duration - (now - self.start_time))

    def copy(self) -> PowerUp:
        return PowerUp(
            id=self.id,
            type=self.type,
            duration=self.duration,
            start_time=self.start_time,
            is_active=self.is_active,
        )


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------

def potion_power_up(
    effect: PowerUpType,
    duration: float,
    now: float,
    serial: int,
) -> PowerUp:
    """Create the effect granted by drinking a potion."""
    return PowerUp(id=f"{effect.value}{serial}", type=effect, duration=duration, start_time=now)


def special_power_up(
    effect: PowerUpType,
    duration: float,
    now: float,
    serial: int,
) -> PowerUp:
    """Create the effect granted by a class special (rage, shield)."""
    return PowerUp(id=f"special-{effect.value}{serial}", type=effect, duration=duration, start_time=now)
