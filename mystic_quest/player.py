"""
Player Module
==============
Player entity creation, keyboard-to-intent mapping and player movement.
"""

from typing import NamedTuple, Optional, Tuple

from .ecs import World
from .components import (
    Position, Sprite, Renderable, Health, PlayerStats, PlayerTag,
)
from .config import (
    ARENA_WIDTH, ARENA_HEIGHT, PLAYER_SIZE, PLAYER_SPEED, PLAYER_MAX_HEALTH,
)
from .engine import NEON_CYAN


def create_player(world: World, x: float, y: float) -> int:
    """Create the player entity with all required components."""
    return world.create_entity(
        Position(x, y),
        Sprite(PLAYER_SIZE),
        Health(PLAYER_MAX_HEALTH, PLAYER_MAX_HEALTH),
        PlayerStats(score=0, level=1),
        PlayerTag(),
        Renderable(char='@', color=NEON_CYAN, layer=10),
    )


class Intents(NamedTuple):
    """Directional intents held during one tick."""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False


NO_INTENTS = Intents()

_KEY_DIRECTIONS = {
    'w': 'up', 's': 'down', 'a': 'left', 'd': 'right',
    'KEY_UP': 'up', 'KEY_DOWN': 'down', 'KEY_LEFT': 'left', 'KEY_RIGHT': 'right',
}


class InputHandler:
    """
    Tracks held directions.

    Terminals don't report key-up, so each press refreshes a hold timer
    and the direction counts as held until the timer runs out.
    """

    def __init__(self, hold_duration: int = 12):
        self.held: dict = {}  # direction -> ticks remaining
        self.hold_duration = hold_duration

    def process_key(self, key) -> Optional[str]:
        """Feed one blessed keystroke. Returns the direction it maps to, if any."""
        if key is None or not key:
            return None
        if key.is_sequence:
            direction = _KEY_DIRECTIONS.get(key.name)
        else:
            direction = _KEY_DIRECTIONS.get(str(key).lower())
        if direction is not None:
            self.held[direction] = self.hold_duration
        return direction

    def update(self) -> None:
        """Age hold timers (call once per tick)."""
        for direction in list(self.held):
            self.held[direction] -= 1
            if self.held[direction] <= 0:
                del self.held[direction]

    def clear(self) -> None:
        self.held.clear()

    def intents(self) -> Intents:
        return Intents(
            up='up' in self.held,
            down='down' in self.held,
            left='left' in self.held,
            right='right' in self.held,
        )


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def player_movement_system(world: World, intents: Intents,
                           width: float = ARENA_WIDTH,
                           height: float = ARENA_HEIGHT) -> None:
    """Step the player PLAYER_SPEED units per held direction, clamped to the arena."""
    for _, pos, sprite, _ in world.query(Position, Sprite, PlayerTag):
        if intents.up:
            pos.y -= PLAYER_SPEED
        if intents.down:
            pos.y += PLAYER_SPEED
        if intents.left:
            pos.x -= PLAYER_SPEED
        if intents.right:
            pos.x += PLAYER_SPEED
        pos.x = clamp(pos.x, 0, width - sprite.size)
        pos.y = clamp(pos.y, 0, height - sprite.size)


def get_player_center(world: World) -> Optional[Tuple[float, float]]:
    row = world.query_one(Position, Sprite, PlayerTag)
    if row is None:
        return None
    _, pos, sprite, _ = row
    return pos.x + sprite.size / 2, pos.y + sprite.size / 2
