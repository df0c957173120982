#!/usr/bin/env python3
"""
MYSTIC QUEST - Terminal Treasure Hunt
======================================
Gather treasure, dodge wanderers, and heed the Oracle.

Controls:
    WASD / Arrows - Move
    Space         - Talk to a villager
    O / Enter     - Enter the Oracle chamber
    ESC           - Leave the chamber
    Q             - Back to menu / quit
"""

import logging
import sys
import textwrap
import time

from blessed import Terminal

from .components import Position, Renderable
from .config import ARENA_WIDTH, ARENA_HEIGHT, Settings, configure_logging
from .engine import (
    GameRenderer, HUD_ROWS,
    GRAY_DARK, GRAY_DARKER, GRAY_LIGHT, GRAY_MED, WHITE,
    NEON_CYAN, NEON_GREEN, NEON_MAGENTA, NEON_PURPLE, NEON_RED, NEON_YELLOW,
)
from .game import GameSession, PHASE_MENU, PHASE_ORACLE
from .lore import SCENES, THINKING_TEXT, AWAITING_TEXT
from .loop import GameLoop, TickClock
from .oracle import OracleClient, Narrator

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 80
MIN_HEIGHT = 24

TITLE_ART = [
    r" __  __         _   _       ___                 _   ",
    r"|  \/  |_  _ __| |_(_)__   / _ \ _  _ ___ ___ _| |_ ",
    r"| |\/| | || (_-<  _| / _| | (_) | || / -_|_-<|_   _|",
    r"|_|  |_|\_, /__/\__|_\__|  \__\_\\_,_\___/__/ |_|  ",
    r"        |__/                                        ",
]


# =============================================================================
# SCREENS
# =============================================================================

def render_menu(renderer: GameRenderer, session: GameSession):
    width = renderer.width
    art_y = max(1, renderer.height // 2 - 9)
    for i, line in enumerate(TITLE_ART):
        color = NEON_MAGENTA if i % 2 == 0 else NEON_PURPLE
        renderer.put_centered(art_y + i, line, color)

    y = art_y + len(TITLE_ART) + 1
    renderer.put_centered(y, 'AI-Powered Adventure Awaits', GRAY_MED)

    if session.last_run:
        run = session.last_run
        y += 2
        renderer.put_centered(
            y, f"LAST QUEST - GOLD: {run['score']}  LEVEL: {run['level']}  ROOM: {run['room']}",
            NEON_YELLOW,
        )
        if session.narrative:
            for line in textwrap.wrap(session.narrative, max(20, width - 20))[:3]:
                y += 1
                renderer.put_centered(y, line, NEON_CYAN)

    y += 2
    renderer.put_centered(y, '[ ENTER - BEGIN YOUR QUEST ]    [ Q - QUIT ]', NEON_GREEN)
    controls = [
        'WASD / Arrows - Move',
        'Space - Talk to villagers',
        'O / Enter - Consult the Oracle',
        'Q - Return to menu',
    ]
    for i, line in enumerate(controls):
        renderer.put_centered(y + 2 + i, line, GRAY_DARK)

    renderer.draw_box(0, 0, width, renderer.height, GRAY_DARKER, '.')


def render_arena(renderer: GameRenderer, session: GameSession):
    """Draw every visible entity, lower layers first."""
    renderer.draw_box(0, 0, renderer.width, renderer.game_height, GRAY_DARK, '#')
    rows = sorted(session.world.query(Position, Renderable), key=lambda r: r[2].layer)
    for _, pos, rend in rows:
        if rend.visible:
            renderer.put_world(pos.x, pos.y, rend.char, rend.color)


def render_hud(renderer: GameRenderer, session: GameSession):
    ui_y = renderer.game_height
    width = renderer.width

    renderer.put_string(0, ui_y, '=' * width, GRAY_DARK)
    renderer.put_string(2, ui_y, ' MYSTIC QUEST ', NEON_MAGENTA)
    scene = SCENES[session.room.scene]
    scene_text = f' {scene["name"]} - ROOM {session.room.room} '
    renderer.put_string(width - len(scene_text) - 1, ui_y, scene_text, NEON_YELLOW)

    health = session.health
    stats = session.stats
    if health and stats:
        bar_width = 20
        filled = max(0, int(health.current / health.maximum * bar_width))
        bar = '|' * filled + '.' * (bar_width - filled)
        color = NEON_GREEN if health.current > 30 else NEON_RED
        renderer.put_string(2, ui_y + 1, 'HEALTH:', GRAY_MED)
        renderer.put_string(10, ui_y + 1, f'[{bar}] {health.current:3d}', color)
        renderer.put_string(40, ui_y + 1, f'GOLD: {stats.score}', NEON_YELLOW)
        renderer.put_string(55, ui_y + 1, f'LEVEL: {stats.level}', NEON_CYAN)
        renderer.put_string(68, ui_y + 1, f'ITEMS: {len(session.inventory)}', NEON_MAGENTA)

    if session.narrative:
        renderer.put_string(2, ui_y + 2, session.narrative[:width - 4], NEON_PURPLE)

    for i, entry in enumerate(session.game_log[-(HUD_ROWS - 3):]):
        renderer.put_string(2, ui_y + 3 + i, entry[:width - 4], GRAY_LIGHT)


def render_chamber(renderer: GameRenderer, session: GameSession):
    width = renderer.width
    height = renderer.height
    renderer.draw_box(0, 0, width, height, NEON_PURPLE, '*')
    renderer.put_centered(2, '~ AI ORACLE CHAMBER ~', NEON_MAGENTA)
    renderer.put_centered(3, 'Seek wisdom from the ancient AI Oracle', GRAY_MED)

    renderer.put_string(4, 5, "ORACLE'S VISION", NEON_CYAN)
    if session.oracle_thinking:
        vision = [THINKING_TEXT]
    else:
        vision = textwrap.wrap(session.narrative or AWAITING_TEXT, max(20, width - 8))
    for i, line in enumerate(vision[:5]):
        renderer.put_string(4, 7 + i, line, WHITE)

    renderer.put_string(4, 13, 'YOUR QUERY', NEON_CYAN)
    prompt = '> ' + session.chamber_input + '_'
    renderer.put_string(4, 15, prompt[-(width - 8):], NEON_GREEN)
    renderer.put_string(4, 16, 'ENTER - Ask    ESC - Return', GRAY_DARK)

    renderer.put_string(4, 18, 'RECENT EVENTS', NEON_CYAN)
    for i, entry in enumerate(session.game_log[-5:]):
        if 19 + i < height - 1:
            renderer.put_string(4, 19 + i, entry[:width - 8], GRAY_MED)


class TerminalView:
    """Renderer callback for GameLoop: draws the current phase to the terminal."""

    def __init__(self, term: Terminal, arena_width: float = ARENA_WIDTH,
                 arena_height: float = ARENA_HEIGHT, out=None):
        self.term = term
        self.renderer = GameRenderer(term, arena_width, arena_height)
        self.out = out if out is not None else sys.stdout

    def resized(self) -> bool:
        """Follow a terminal size change. Returns True if the size changed."""
        width, height = self.term.width, self.term.height
        if (width, height) == (self.renderer.width, self.renderer.height):
            return False
        logger.debug('Terminal resized to %dx%d', width, height)
        self.renderer.resize(width, height)
        self.out.write(self.term.home + self.term.clear)
        return True

    def __call__(self, session: GameSession):
        renderer = self.renderer
        renderer.begin_frame()
        if session.phase == PHASE_MENU:
            render_menu(renderer, session)
        elif session.phase == PHASE_ORACLE:
            render_chamber(renderer, session)
        else:
            render_arena(renderer, session)
            render_hud(renderer, session)
        output = renderer.end_frame()
        if output:
            self.out.write(output)
            self.out.flush()


# =============================================================================
# MAIN LOOP
# =============================================================================

def main():
    """Entry point. Sets up the terminal and drives the game loop."""
    settings = Settings.from_env()
    configure_logging(settings, to_file=True)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    narrator = Narrator(OracleClient(settings.oracle_url, settings.oracle_timeout))
    session = GameSession(narrator=narrator)
    view = TerminalView(term, session.width, session.height)
    loop = GameLoop(session, view, clock=TickClock())
    logger.info('Mystic Quest starting (oracle at %s)', settings.oracle_url)

    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            print(term.home + term.clear, end='', flush=True)

            while loop.running:
                frame_start = time.perf_counter()

                key = term.inkey(timeout=0)
                while key and loop.running:
                    loop.handle_key(key)
                    key = term.inkey(timeout=0)

                if view.resized():
                    session.touch()
                loop.step(time.perf_counter())

                elapsed = time.perf_counter() - frame_start
                sleep_time = FRAME_TIME - elapsed
                if sleep_time > 0.001:
                    time.sleep(sleep_time * 0.9)

            print(term.normal, end='', flush=True)
    finally:
        narrator.shutdown()
        logger.info('Mystic Quest stopped')


if __name__ == '__main__':
    main()
