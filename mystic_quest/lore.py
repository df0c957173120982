"""
Lore Tables
============
Scenes, quest text and the fixed prompt templates sent to the Oracle.
"""

from dataclasses import dataclass, field
from typing import List

from .components import TREASURE_SPECIAL


SCENES = {
    'forest': {
        'name': 'Enchanted Forest',
        'description': 'A mystical forest filled with ancient magic and secrets',
    },
    'temple': {
        'name': 'Oracle Temple',
        'description': 'An ancient temple where the AI Oracle resides',
    },
    'village': {
        'name': 'Mystic Village',
        'description': 'A peaceful village where wise inhabitants share their knowledge',
    },
}

SCENE_ORDER = ['forest', 'temple', 'village']


def scene_for_room(room: int) -> str:
    """Scene key for a room number. Rooms cycle through the scenes."""
    return SCENE_ORDER[(room - 1) % len(SCENE_ORDER)]


@dataclass
class QuestProgress:
    current_quest: str = 'Find the Ancient Oracle'
    completed: List[str] = field(default_factory=list)
    objectives: List[str] = field(default_factory=lambda: [
        'Explore the mystical forest',
        'Discover hidden secrets',
        'Consult the AI Oracle',
    ])

    def as_payload(self) -> dict:
        return {
            'currentQuest': self.current_quest,
            'completed': list(self.completed),
            'objectives': list(self.objectives),
        }


# =============================================================================
# FINDS & VILLAGERS
# =============================================================================

# Every treasure yields one named item; special treasures yield relics.
ITEM_NAMES = ['Mystic Sword', 'Ancient Shield', 'Wisdom Scroll']
RELIC_NAMES = ['Power Crystal', 'Magic Orb']

VILLAGER_LINES = [
    'The ancient wisdom flows through these lands...',
    'Seek the Oracle for guidance on your journey.',
    'Beware the shadows that lurk in the deeper woods.',
    'Your destiny awaits beyond the mystical veil.',
    'The spirits whisper of great adventures ahead.',
]


def item_for(kind: str, rng) -> str:
    names = RELIC_NAMES if kind == TREASURE_SPECIAL else ITEM_NAMES
    return rng.choice(names)


# =============================================================================
# ORACLE TEXT
# =============================================================================

SYSTEM_PROMPT = (
    'You are a mystical AI guide in a dungeon exploration game. '
    'Keep responses under 50 words, be encouraging, mysterious, and helpful. '
    'Use fantasy language but stay concise.'
)

# Client side: shown when the Oracle cannot be reached.
ORACLE_FALLBACK = (
    "The Oracle's voice grows faint... The mystical connection wavers. "
    'Perhaps try again in a moment.'
)

# Proxy side: empty completion, and upstream failure.
UNCLEAR_RESPONSE = 'The mystical energies are unclear...'
RESTING_RESPONSE = 'The oracle rests... seek wisdom again soon, brave adventurer!'

THINKING_TEXT = 'The Oracle contemplates your query...'
AWAITING_TEXT = 'The Oracle awaits your question...'


def room_cleared_prompt(level: int, score: int, scene_name: str) -> str:
    return (
        f'The adventurer has cleared a chamber of the {scene_name} and now '
        f'descends to level {level} with {score} gold. '
        'Offer a brief omen for the next room.'
    )


def death_prompt(level: int, score: int, scene_name: str) -> str:
    return (
        f'The adventurer has fallen on level {level} in the {scene_name}, '
        f'having gathered {score} gold. Speak a short farewell.'
    )


def chamber_context(scene_name: str, level: int, health: int, score: int,
                    inventory: List[str], quest: str, recent: List[str]) -> str:
    """Context block sent alongside a question asked in the Oracle chamber."""
    return (
        f'Current scene: {scene_name}\n'
        f'Player level: {level}\n'
        f'Player health: {health}%\n'
        f'Player gold: {score}\n'
        f"Player inventory: {', '.join(inventory) or 'Empty'}\n"
        f'Current quest: {quest}\n'
        f"Recent events: {' | '.join(recent)}"
    )
