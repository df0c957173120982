"""
Game Session
=============
The explicit session object that owns every piece of game state, and
the per-tick update engine that advances it.
"""

import logging
import random
from typing import List, Optional

from .ecs import World
from .components import Health, PlayerStats
from .config import (
    ARENA_WIDTH, ARENA_HEIGHT, PLAYER_SIZE, NARRATIVE_CHANCE,
)
from .lore import (
    SCENES, QuestProgress, item_for, room_cleared_prompt, death_prompt,
    chamber_context,
)
from .oracle import Narrator
from .player import Intents, create_player, player_movement_system
from .rooms import RoomState, generate_room
from .systems import (
    enemy_motion_system, treasure_pickup_system, contact_damage_system,
    particle_system, remaining_treasures, villager_talk_system,
)

logger = logging.getLogger(__name__)


# Game phases
PHASE_MENU = 'menu'
PHASE_PLAYING = 'playing'
PHASE_ORACLE = 'oracle'  # paused while the player questions the Oracle

GAME_LOG_SIZE = 11


class GameSession:
    """
    Central game state container. Passed by reference to the loop driver
    and the renderer; nothing else holds game state.

    `version` increases on every observable change so the renderer can
    skip frames where nothing moved. `phase_epoch` increases on every
    phase change so the loop driver knows when to restart its clock.
    """

    def __init__(self, narrator: Optional[Narrator] = None,
                 rng: Optional[random.Random] = None,
                 width: float = ARENA_WIDTH, height: float = ARENA_HEIGHT):
        self.narrator = narrator
        self.rng = rng or random.Random()
        self.width = width
        self.height = height

        self.world = World()
        self.room = RoomState()
        self.player_id: Optional[int] = None
        self.phase = PHASE_MENU
        self.phase_epoch = 0
        self.version = 0

        # Display-only slots
        self.narrative = ''
        self.game_log: List[str] = []
        self.inventory: List[str] = []
        self.quest = QuestProgress()
        self.chamber_input = ''
        self.last_run: Optional[dict] = None

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def health(self) -> Optional[Health]:
        return self.world.get_component(self.player_id, Health)

    @property
    def stats(self) -> Optional[PlayerStats]:
        return self.world.get_component(self.player_id, PlayerStats)

    @property
    def scene_name(self) -> str:
        return SCENES[self.room.scene]['name']

    def touch(self):
        self.version += 1

    def set_phase(self, phase: str):
        if phase != self.phase:
            logger.debug('Phase %s -> %s', self.phase, phase)
            self.phase = phase
            self.phase_epoch += 1
        self.touch()

    def log(self, message: str):
        """Append to the game log, keeping the last GAME_LOG_SIZE entries."""
        self.game_log = self.game_log[-(GAME_LOG_SIZE - 1):] + [message]
        self.touch()

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start_game(self):
        """Reset player, inventory and room contents; enter play at level 1."""
        self.world = World()
        self.room = RoomState()
        self.player_id = create_player(
            self.world,
            (self.width - PLAYER_SIZE) / 2,
            (self.height - PLAYER_SIZE) / 2,
        )
        generate_room(self.world, self.room.level, self.rng, self.width, self.height)
        self.game_log = []
        self.inventory = []
        self.quest = QuestProgress()
        self.chamber_input = ''
        self.log(f'Entered {self.scene_name}')
        logger.info('New game started')
        self.set_phase(PHASE_PLAYING)

    def open_chamber(self):
        if self.phase == PHASE_PLAYING:
            self.chamber_input = ''
            self.set_phase(PHASE_ORACLE)

    def close_chamber(self):
        if self.phase == PHASE_ORACLE:
            self.set_phase(PHASE_PLAYING)

    def quit_to_menu(self):
        if self.phase != PHASE_MENU:
            self._record_run()
            self.set_phase(PHASE_MENU)

    # -------------------------------------------------------------------------
    # Update engine
    # -------------------------------------------------------------------------

    def update(self, intents: Intents) -> bool:
        """
        Run one tick. Does nothing unless the game is playing.

        Returns True if a tick was run.
        """
        if self.phase != PHASE_PLAYING:
            return False

        world = self.world
        player_movement_system(world, intents, self.width, self.height)
        enemy_motion_system(world, self.width, self.height)

        for pickup in treasure_pickup_system(world, self.rng):
            item = item_for(pickup['kind'], self.rng)
            self.inventory.append(item)
            self.log(f"Found: {item} +{pickup['points']}")

        contact_damage_system(world)
        particle_system(world)

        if remaining_treasures(world) == 0:
            self._complete_room()

        if self.health.current <= 0:
            self._game_over()

        self.touch()
        return True

    def talk_to_villager(self) -> bool:
        """The closest villager in reach speaks once. Returns True if one did."""
        if self.phase != PHASE_PLAYING:
            return False
        line = villager_talk_system(self.world, self.rng)
        if line is None:
            return False
        self.log(f'Villager: {line}')
        return True

    def _complete_room(self):
        stats = self.stats
        stats.level += 1
        self.room.advance()
        generate_room(self.world, stats.level, self.rng, self.width, self.height)
        self.log(f'Room cleared! Level {stats.level}: {self.scene_name}')
        logger.info('Room %d reached at level %d (score %d)',
                    self.room.room, stats.level, stats.score)

        if self.rng.random() < NARRATIVE_CHANCE:
            self.narrate(
                room_cleared_prompt(stats.level, stats.score, self.scene_name),
                kind='omen',
            )

    def _game_over(self):
        stats = self.stats
        logger.info('Player fell at level %d with score %d', stats.level, stats.score)
        self.log('You have fallen...')
        self._record_run()
        self.set_phase(PHASE_MENU)
        self.narrate(death_prompt(stats.level, stats.score, self.scene_name), kind='death')

    def _record_run(self):
        stats = self.stats
        if stats is None:
            return
        self.last_run = {
            'score': stats.score,
            'level': stats.level,
            'room': self.room.room,
            'health': self.health.current,
        }

    # -------------------------------------------------------------------------
    # Oracle
    # -------------------------------------------------------------------------

    def narrate(self, prompt: str, kind: str = 'omen', context: Optional[str] = None):
        """Issue a fire-and-forget Oracle request. No-op without a narrator."""
        if self.narrator is None:
            return None
        stats = self.stats
        return self.narrator.request(
            prompt,
            kind=kind,
            context=context,
            scene=self.room.scene,
            playerLevel=stats.level if stats else self.room.level,
            questProgress=self.quest.as_payload(),
        )

    def ask_oracle(self, question: Optional[str] = None) -> bool:
        """Send the chamber question (or `question`) to the Oracle."""
        text = (question if question is not None else self.chamber_input).strip()
        if not text or self.stats is None:
            return False
        stats = self.stats
        context = chamber_context(
            self.scene_name, stats.level, self.health.current, stats.score,
            self.inventory, self.quest.current_quest, self.game_log[-3:],
        )
        self.log(f'You: {text}')
        self.chamber_input = ''
        self.narrate(text, kind='chamber', context=context)
        return True

    def deliver_narratives(self) -> int:
        """
        Apply finished Oracle answers on the caller's (loop) thread.

        Only the narrative slot and the log change; the latest answer wins.
        """
        if self.narrator is None:
            return 0
        deliveries = self.narrator.drain()
        for delivery in deliveries:
            self.narrative = delivery.reply.text
            if delivery.reply.ok:
                self.log(f'Oracle: {delivery.reply.text}')
            else:
                self.log("The Oracle's power fluctuates...")
        return len(deliveries)

    @property
    def oracle_thinking(self) -> bool:
        return self.narrator is not None and self.narrator.is_waiting('chamber')
