"""
Game Loop Driver
=================
Fixed-timestep ticking of the session while it is playing, key dispatch
per phase, and change-driven rendering.
"""

import logging
from typing import Callable, Optional

from .config import TICK_INTERVAL, MAX_TICKS_PER_STEP
from .game import GameSession, PHASE_MENU, PHASE_PLAYING, PHASE_ORACLE
from .player import InputHandler

logger = logging.getLogger(__name__)

CHAMBER_INPUT_LIMIT = 200


class TickClock:
    """
    Fixed-period timer driven by the caller's clock readings.

    Leftover time is kept between calls; a long stall yields at most
    max_ticks ticks and the excess is dropped.
    """

    def __init__(self, interval: float = TICK_INTERVAL, max_ticks: int = MAX_TICKS_PER_STEP):
        self.interval = interval
        self.max_ticks = max_ticks
        self.running = False
        self._last = 0.0
        self._accumulator = 0.0

    def start(self, now: float):
        self.running = True
        self._last = now
        self._accumulator = 0.0

    def stop(self):
        self.running = False
        self._accumulator = 0.0

    def due(self, now: float) -> int:
        """Number of ticks owed since the previous reading."""
        if not self.running:
            return 0
        self._accumulator += max(0.0, now - self._last)
        self._last = now

        ticks = int(self._accumulator / self.interval)
        if ticks > self.max_ticks:
            ticks = self.max_ticks
            self._accumulator = 0.0
        else:
            self._accumulator -= ticks * self.interval
        return ticks


class GameLoop:
    """
    Drives one GameSession.

    step() is the only place ticks happen, so ticks never overlap. The
    clock is restarted on every entry into "playing" and stopped on every
    exit; a tick is never started once the phase has left "playing".
    """

    def __init__(self, session: GameSession,
                 render: Callable[[GameSession], None],
                 input_handler: Optional[InputHandler] = None,
                 clock: Optional[TickClock] = None):
        self.session = session
        self.render = render
        self.input_handler = input_handler or InputHandler()
        self.clock = clock or TickClock()
        self.running = True
        self._seen_epoch = -1
        self._rendered_version = -1

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def handle_key(self, key) -> None:
        """Route one blessed keystroke according to the current phase."""
        session = self.session
        name = key.name if key.is_sequence else None
        char = '' if key.is_sequence else str(key)

        if session.phase == PHASE_MENU:
            if name == 'KEY_ENTER' or char in ('\n', '\r', ' '):
                session.start_game()
                self.input_handler.clear()
            elif char.lower() == 'q' or name == 'KEY_ESCAPE':
                self.running = False

        elif session.phase == PHASE_PLAYING:
            if char.lower() == 'o' or name == 'KEY_ENTER' or char in ('\n', '\r'):
                session.open_chamber()
                self.input_handler.clear()
            elif char.lower() == 'q' or name == 'KEY_ESCAPE':
                session.quit_to_menu()
            elif char == ' ':
                session.talk_to_villager()
            else:
                self.input_handler.process_key(key)

        elif session.phase == PHASE_ORACLE:
            if name == 'KEY_ESCAPE':
                session.close_chamber()
            elif name == 'KEY_ENTER' or char in ('\n', '\r'):
                session.ask_oracle()
            elif name in ('KEY_BACKSPACE', 'KEY_DELETE') or char in ('\x7f', '\x08'):
                session.chamber_input = session.chamber_input[:-1]
                session.touch()
            elif char and char.isprintable() and len(session.chamber_input) < CHAMBER_INPUT_LIMIT:
                session.chamber_input += char
                session.touch()

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def _sync_clock(self, now: float):
        session = self.session
        if session.phase_epoch == self._seen_epoch:
            return
        self._seen_epoch = session.phase_epoch
        if session.phase == PHASE_PLAYING:
            self.clock.start(now)
        else:
            self.clock.stop()

    def step(self, now: float) -> int:
        """
        One pass of the loop: deliver Oracle answers, run owed ticks,
        render if anything changed. Returns the number of ticks run.
        """
        session = self.session
        session.deliver_narratives()
        self._sync_clock(now)

        ticks = 0
        for _ in range(self.clock.due(now)):
            if session.phase != PHASE_PLAYING:
                self.clock.stop()
                break
            session.update(self.input_handler.intents())
            self.input_handler.update()
            ticks += 1
        self._sync_clock(now)

        if session.version != self._rendered_version:
            self._rendered_version = session.version
            self.render(session)
        return ticks
