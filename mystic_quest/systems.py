"""
ECS Systems
============
Per-tick systems of the update engine. Each queries the World for
entities with the components it needs and mutates them in place.
"""

import math
import random
from typing import List, Optional, Tuple

from .ecs import World
from .components import (
    Position, Velocity, Sprite, Renderable, Health, PlayerStats, PlayerTag,
    Treasure, Enemy, Villager, Lifetime, ParticleTag, TREASURE_SPECIAL,
)
from .config import (
    ARENA_WIDTH, ARENA_HEIGHT, PLAYER_SIZE, NORMAL_POINTS, SPECIAL_POINTS,
    CONTACT_DAMAGE, TALK_DISTANCE,
)
from .engine import GRAY_MED
from .lore import VILLAGER_LINES
from .particles import spawn_treasure_burst
from .player import get_player_center


def center_of(pos: Position, sprite: Sprite) -> Tuple[float, float]:
    return pos.x + sprite.size / 2, pos.y + sprite.size / 2


def get_distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.sqrt((ax - bx) ** 2 + (ay - by) ** 2)


def in_contact(player_center: Tuple[float, float], pos: Position, sprite: Sprite) -> bool:
    """Contact means center-to-center distance below the player's sprite size."""
    ox, oy = center_of(pos, sprite)
    return get_distance(player_center[0], player_center[1], ox, oy) < PLAYER_SIZE


# =============================================================================
# MOTION
# =============================================================================

def enemy_motion_system(world: World, width: float = ARENA_WIDTH,
                        height: float = ARENA_HEIGHT) -> None:
    """
    Move enemies by their velocity and reflect them off the arena walls.

    The velocity component is flipped first, then the coordinate is
    clamped, so an enemy never rests outside the arena.
    """
    for _, pos, vel, sprite, enemy in world.query(Position, Velocity, Sprite, Enemy):
        if not enemy.alive:
            continue
        pos.x += vel.x
        pos.y += vel.y

        max_x = width - sprite.size
        max_y = height - sprite.size
        if pos.x < 0 or pos.x > max_x:
            vel.x = -vel.x
            pos.x = max(0.0, min(max_x, pos.x))
        if pos.y < 0 or pos.y > max_y:
            vel.y = -vel.y
            pos.y = max(0.0, min(max_y, pos.y))


# =============================================================================
# COLLISIONS
# =============================================================================

def treasure_pickup_system(world: World, rng: random.Random) -> List[dict]:
    """
    Collect every uncollected treasure the player touches.

    Returns one event dict per pickup: {'kind', 'points', 'x', 'y'}.
    """
    events = []
    player = world.query_one(PlayerStats, PlayerTag)
    player_center = get_player_center(world)
    if player is None or player_center is None:
        return events
    stats = player[1]

    for _, pos, sprite, treasure in world.query(Position, Sprite, Treasure):
        if treasure.collected or not in_contact(player_center, pos, sprite):
            continue
        treasure.collected = True
        points = SPECIAL_POINTS if treasure.kind == TREASURE_SPECIAL else NORMAL_POINTS
        stats.score += points
        spawn_treasure_burst(world, pos.x, pos.y, treasure.kind, rng)
        events.append({'kind': treasure.kind, 'points': points, 'x': pos.x, 'y': pos.y})
    return events


def remaining_treasures(world: World) -> int:
    return sum(1 for _, t in world.query(Treasure) if not t.collected)


def contact_damage_system(world: World) -> int:
    """
    Every alive enemy touching the player deals CONTACT_DAMAGE.

    Damage stacks per enemy per tick. Returns the total damage dealt.
    """
    player = world.query_one(Health, PlayerTag)
    player_center = get_player_center(world)
    if player is None or player_center is None:
        return 0
    health = player[1]

    dealt = 0
    for _, pos, sprite, enemy in world.query(Position, Sprite, Enemy):
        if enemy.alive and in_contact(player_center, pos, sprite):
            before = health.current
            health.damage(CONTACT_DAMAGE)
            dealt += before - health.current
    return dealt


# =============================================================================
# PARTICLES
# =============================================================================

def particle_system(world: World) -> None:
    """Advance particles, tick their lifetimes and drop the expired ones."""
    for entity_id, pos, vel, lifetime, _ in world.query(
        Position, Velocity, Lifetime, ParticleTag
    ):
        pos.x += vel.x
        pos.y += vel.y
        lifetime.frames_remaining -= 1
        if lifetime.frames_remaining <= 0:
            world.destroy_entity(entity_id)
    world.process_dead_entities()


# =============================================================================
# VILLAGERS
# =============================================================================

def villager_talk_system(world: World, rng: random.Random) -> Optional[str]:
    """
    The closest villager within TALK_DISTANCE who has not spoken yet says
    one line. Returns the line, or None if nobody is in reach.
    """
    player_center = get_player_center(world)
    if player_center is None:
        return None

    closest = None
    for _, pos, sprite, villager, rend in world.query(Position, Sprite, Villager, Renderable):
        if villager.talked:
            continue
        vx, vy = center_of(pos, sprite)
        distance = get_distance(player_center[0], player_center[1], vx, vy)
        if distance < TALK_DISTANCE and (closest is None or distance < closest[0]):
            closest = (distance, villager, rend)

    if closest is None:
        return None
    _, villager, rend = closest
    villager.talked = True
    rend.color = GRAY_MED
    return rng.choice(VILLAGER_LINES)
