"""
Particle System
================
Short-lived decorative sparks spawned when a treasure is picked up.
"""

import random
from typing import List

from .ecs import World
from .components import (
    Position, Velocity, Renderable, Lifetime, ParticleTag,
    TREASURE_SPECIAL,
)
from .config import PARTICLES_PER_PICKUP, PARTICLE_LIFE, PARTICLE_SPEED
from .engine import NEON_MAGENTA, NEON_YELLOW


PARTICLE_COLORS = {
    'normal': NEON_YELLOW,
    TREASURE_SPECIAL: NEON_MAGENTA,
}


def spawn_particle(
    world: World,
    x: float, y: float,
    vx: float, vy: float,
    color: int,
    lifetime: int = PARTICLE_LIFE,
    char: str = '*',
) -> int:
    """Spawn a single particle entity."""
    return world.create_entity(
        Position(x, y),
        Velocity(vx, vy),
        Renderable(char=char, color=color, layer=5),
        Lifetime(lifetime),
        ParticleTag(),
    )


def spawn_treasure_burst(
    world: World,
    x: float, y: float,
    kind: str,
    rng: random.Random,
    count: int = PARTICLES_PER_PICKUP,
) -> List[int]:
    """Burst of sparks at a collected treasure, colored by its kind."""
    color = PARTICLE_COLORS.get(kind, NEON_YELLOW)
    char = '+' if kind == TREASURE_SPECIAL else '*'
    spawned = []
    for _ in range(count):
        vx = (rng.random() - 0.5) * 2 * PARTICLE_SPEED
        vy = (rng.random() - 0.5) * 2 * PARTICLE_SPEED
        spawned.append(spawn_particle(world, x, y, vx, vy, color, char=char))
    return spawned
