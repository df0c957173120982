"""Loop driver tests: tick cadence, phase transitions, change-driven rendering."""

import random

import pytest

from mystic_quest.game import GameSession, PHASE_MENU, PHASE_PLAYING, PHASE_ORACLE
from mystic_quest.loop import GameLoop, TickClock
from mystic_quest.player import InputHandler

from helpers import (
    add_enemy_at, add_treasure_at, add_villager_at, empty_room, key, player_center,
    player_position, seq,
)


class RenderSpy:
    def __init__(self):
        self.frames = []

    def __call__(self, session):
        self.frames.append((session.phase, session.version))


@pytest.fixture
def spy():
    return RenderSpy()


@pytest.fixture
def loop(spy):
    session = GameSession(rng=random.Random(42))
    return GameLoop(session, spy, clock=TickClock(interval=1.0, max_ticks=4))


# ==================== Clock ====================

class TestTickClock:

    def test_counts_whole_periods(self):
        clock = TickClock(interval=1.0, max_ticks=4)
        clock.start(0.0)
        assert clock.due(0.5) == 0
        assert clock.due(1.0) == 1
        assert clock.due(3.5) == 2

    def test_stall_is_capped_and_forgotten(self):
        clock = TickClock(interval=1.0, max_ticks=4)
        clock.start(0.0)
        assert clock.due(100.0) == 4
        assert clock.due(100.5) == 0

    def test_stopped_clock_owes_nothing(self):
        clock = TickClock(interval=1.0)
        assert clock.due(10.0) == 0
        clock.start(0.0)
        clock.stop()
        assert clock.due(10.0) == 0

    def test_restart_discards_leftover(self):
        clock = TickClock(interval=1.0)
        clock.start(0.0)
        clock.due(0.9)
        clock.start(5.0)
        assert clock.due(5.5) == 0


# ==================== Loop ====================

class TestGameLoop:

    def test_menu_renders_once_until_something_changes(self, loop, spy):
        loop.step(0.0)
        loop.step(1.0)
        loop.step(2.0)
        assert len(spy.frames) == 1
        assert spy.frames[0][0] == PHASE_MENU

    def test_no_ticks_in_menu(self, loop):
        loop.step(0.0)
        assert loop.step(10.0) == 0

    def test_enter_starts_and_clock_begins_at_transition(self, loop, spy):
        loop.step(0.0)
        loop.handle_key(seq('KEY_ENTER', '\n'))
        assert loop.session.phase == PHASE_PLAYING

        assert loop.step(10.0) == 0   # clock starts here
        assert loop.step(11.0) == 1
        assert loop.step(13.0) == 2
        assert spy.frames[-1][0] == PHASE_PLAYING

    def test_renders_after_each_ticking_step(self, loop, spy):
        loop.session.start_game()
        loop.step(0.0)
        count = len(spy.frames)
        loop.step(1.0)
        assert len(spy.frames) == count + 1
        loop.step(1.5)  # no tick owed, nothing changed
        assert len(spy.frames) == count + 1

    def test_held_key_moves_player(self, loop):
        session = loop.session
        session.start_game()
        empty_room(session)
        add_treasure_at(session, 10, 10)
        loop.step(0.0)
        x0 = player_position(session).x

        loop.handle_key(key('d'))
        loop.step(2.0)

        assert player_position(session).x == x0 + 6

    def test_no_tick_after_game_over(self, loop):
        session = loop.session
        session.start_game()
        empty_room(session)
        add_treasure_at(session, 10, 10)
        add_enemy_at(session, *player_center(session))
        session.health.current = 1
        loop.step(0.0)

        ticks = loop.step(4.0)

        assert ticks == 1
        assert session.phase == PHASE_MENU
        assert not loop.clock.running
        assert loop.step(8.0) == 0

    def test_chamber_suspends_and_resumes_ticking(self, loop):
        session = loop.session
        session.start_game()
        loop.step(0.0)

        loop.handle_key(key('o'))
        assert session.phase == PHASE_ORACLE
        assert loop.step(5.0) == 0

        loop.handle_key(seq('KEY_ESCAPE'))
        assert session.phase == PHASE_PLAYING
        assert loop.step(20.0) == 0   # restarted, nothing owed yet
        assert loop.step(21.0) == 1

    def test_chamber_typing(self, loop):
        session = loop.session
        session.start_game()
        loop.handle_key(key('o'))

        for char in 'hi!x':
            loop.handle_key(key(char))
        loop.handle_key(seq('KEY_BACKSPACE', '\x7f'))
        assert session.chamber_input == 'hi!'

        loop.handle_key(seq('KEY_ENTER', '\n'))
        assert session.chamber_input == ''
        assert session.game_log[-1] == 'You: hi!'

    def test_space_talks_to_nearby_villager(self, loop):
        session = loop.session
        session.start_game()
        empty_room(session)
        cx, cy = player_center(session)
        add_villager_at(session, cx, cy + 20)

        loop.handle_key(key(' '))

        assert session.game_log[-1].startswith('Villager: ')
        assert session.phase == PHASE_PLAYING

    def test_q_in_play_returns_to_menu_then_quits(self, loop):
        loop.session.start_game()
        loop.handle_key(key('q'))
        assert loop.session.phase == PHASE_MENU
        assert loop.running
        loop.handle_key(key('q'))
        assert not loop.running


# ==================== Input ====================

class TestInputHandler:

    def test_wasd_and_arrows(self):
        handler = InputHandler()
        handler.process_key(key('W'))
        handler.process_key(seq('KEY_RIGHT'))
        intents = handler.intents()
        assert intents.up and intents.right
        assert not intents.down and not intents.left

    def test_hold_expires(self):
        handler = InputHandler(hold_duration=2)
        handler.process_key(key('a'))
        handler.update()
        assert handler.intents().left
        handler.update()
        assert not handler.intents().left

    def test_other_keys_ignored(self):
        handler = InputHandler()
        assert handler.process_key(key('z')) is None
        assert handler.intents() == (False, False, False, False)
