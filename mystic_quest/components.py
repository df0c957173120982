"""
Component Definitions
======================
Plain dataclasses, no behavior beyond trivial helpers.
"""

from dataclasses import dataclass


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Top-left corner in arena units."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Arena units per tick."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Sprite:
    """Square footprint of an entity. Bounds and contact checks use it."""
    size: float = 20.0


# =============================================================================
# RENDERING COMPONENTS
# =============================================================================

@dataclass
class Renderable:
    """Visual representation of an entity."""
    char: str = '?'
    color: int = 7  # ANSI 256 color
    layer: int = 0  # Higher layers render on top
    visible: bool = True


# =============================================================================
# PLAYER COMPONENTS
# =============================================================================

@dataclass
class Health:
    """Health pool, always kept inside [0, maximum]."""
    current: int = 100
    maximum: int = 100

    def damage(self, amount: int) -> None:
        self.current = max(0, min(self.maximum, self.current - amount))


@dataclass
class PlayerStats:
    score: int = 0
    level: int = 1


@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


# =============================================================================
# ROOM CONTENTS
# =============================================================================

TREASURE_NORMAL = 'normal'
TREASURE_SPECIAL = 'special'


@dataclass
class Treasure:
    kind: str = TREASURE_NORMAL
    collected: bool = False


@dataclass
class Enemy:
    # Nothing kills enemies yet; the flag is honored by every system.
    alive: bool = True


@dataclass
class Villager:
    """Speaks once, when the player is close and presses Space."""
    talked: bool = False


# =============================================================================
# EFFECT COMPONENTS
# =============================================================================

@dataclass
class Lifetime:
    """Entity lifetime in ticks (particles)."""
    frames_remaining: int = 30


@dataclass
class ParticleTag:
    """Marks a particle entity."""
    pass
