"""
Room System
============
Room progression and generation of treasures/enemies for a level.
"""

import logging
import random
from typing import List, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Sprite, Renderable, Treasure, Enemy, Villager,
    TREASURE_NORMAL, TREASURE_SPECIAL,
)
from .config import (
    ARENA_WIDTH, ARENA_HEIGHT, ENEMY_SIZE, TREASURE_SIZE, VILLAGER_SIZE,
    SPECIAL_CHANCE,
)
from .engine import NEON_GREEN, NEON_RED, NEON_YELLOW, NEON_MAGENTA
from .lore import scene_for_room

logger = logging.getLogger(__name__)

MAX_TREASURES = 8
MAX_ENEMIES = 6
MAX_VILLAGERS = 3
ENEMY_SPEED = 2.0


class RoomState:
    """Tracks which room the player is in and the level it was built for."""

    def __init__(self):
        self.room = 1
        self.level = 1

    @property
    def scene(self) -> str:
        return scene_for_room(self.room)

    def advance(self):
        self.room += 1
        self.level += 1


def room_size(level: int) -> Tuple[int, int]:
    """(treasure_count, enemy_count) for a difficulty level."""
    return min(3 + level, MAX_TREASURES), min(2 + level // 2, MAX_ENEMIES)


def create_treasure(world: World, x: float, y: float, kind: str = TREASURE_NORMAL) -> int:
    special = kind == TREASURE_SPECIAL
    return world.create_entity(
        Position(x, y),
        Sprite(TREASURE_SIZE),
        Treasure(kind=kind),
        Renderable(char='$' if special else 'o',
                   color=NEON_MAGENTA if special else NEON_YELLOW,
                   layer=2),
    )


def create_enemy(world: World, x: float, y: float, vx: float, vy: float) -> int:
    return world.create_entity(
        Position(x, y),
        Velocity(vx, vy),
        Sprite(ENEMY_SIZE),
        Enemy(),
        Renderable(char='X', color=NEON_RED, layer=4),
    )


def create_villager(world: World, x: float, y: float) -> int:
    return world.create_entity(
        Position(x, y),
        Sprite(VILLAGER_SIZE),
        Villager(),
        Renderable(char='V', color=NEON_GREEN, layer=3),
    )


def generate_room(
    world: World,
    level: int,
    rng: random.Random,
    width: float = ARENA_WIDTH,
    height: float = ARENA_HEIGHT,
) -> Tuple[List[int], List[int]]:
    """
    Replace the room contents with a fresh set for `level`.

    All previous treasures, enemies and villagers are destroyed first, so
    the new sets never merge with the old ones. Returns (treasure_ids,
    enemy_ids).
    """
    world.destroy_all(Treasure)
    world.destroy_all(Enemy)
    world.destroy_all(Villager)
    world.process_dead_entities()

    treasure_count, enemy_count = room_size(level)

    treasures = []
    for _ in range(treasure_count):
        kind = TREASURE_SPECIAL if rng.random() < SPECIAL_CHANCE else TREASURE_NORMAL
        treasures.append(create_treasure(
            world,
            rng.random() * (width - TREASURE_SIZE),
            rng.random() * (height - TREASURE_SIZE),
            kind,
        ))

    enemies = []
    for _ in range(enemy_count):
        enemies.append(create_enemy(
            world,
            rng.random() * (width - ENEMY_SIZE),
            rng.random() * (height - ENEMY_SIZE),
            (rng.random() * 2 - 1) * ENEMY_SPEED,
            (rng.random() * 2 - 1) * ENEMY_SPEED,
        ))

    # 1 to MAX_VILLAGERS villagers, drawn after the hostile contents
    villager_count = 1 + int(rng.random() * MAX_VILLAGERS)
    for _ in range(villager_count):
        create_villager(
            world,
            rng.random() * (width - VILLAGER_SIZE),
            rng.random() * (height - VILLAGER_SIZE),
        )

    logger.debug('Generated level %d room: %d treasures, %d enemies, %d villagers',
                 level, treasure_count, enemy_count, villager_count)
    return treasures, enemies
