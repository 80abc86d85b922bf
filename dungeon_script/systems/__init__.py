"""Engine systems: RNG, enemy generators, hunger, power-ups, announcements."""
