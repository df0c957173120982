"""Shared fakes and arrangement helpers for the test suite."""

from concurrent.futures import Executor, Future

import requests
from blessed.keyboard import Keystroke

from mystic_quest.components import Position, Sprite, Treasure, Enemy, Villager, ParticleTag
from mystic_quest.oracle import OracleReply
from mystic_quest.rooms import create_treasure, create_enemy, create_villager
from mystic_quest.config import TREASURE_SIZE, ENEMY_SIZE, VILLAGER_SIZE


# ==================== Executors ====================

class ImmediateExecutor(Executor):
    """Runs submitted work inline."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until run_all() or run_at()."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_at(self, index):
        future, fn, args, kwargs = self.pending.pop(index)
        if future.set_running_or_notify_cancel():
            future.set_result(fn(*args, **kwargs))

    def run_all(self):
        while self.pending:
            self.run_at(0)


# ==================== HTTP ====================

class FakeResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._bad_json:
            raise ValueError('No JSON object could be decoded')
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f'{self.status_code} Error', response=self)


class FakeHttp:
    """Stands in for requests.Session; records every POST."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(200, {'response': 'ok'})
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class StubClient:
    """OracleClient replacement returning a fixed reply and recording asks."""

    def __init__(self, text='The stars align.', ok=True):
        self.reply = OracleReply(text, ok)
        self.asked = []

    def ask(self, prompt, **context):
        self.asked.append((prompt, context))
        return self.reply


# ==================== Keys ====================

def key(char):
    return Keystroke(char)


def seq(name, ucs='\x1b'):
    return Keystroke(ucs, code=1, name=name)


# ==================== Arrangement ====================

def empty_room(session):
    session.world.destroy_all(Treasure)
    session.world.destroy_all(Enemy)
    session.world.destroy_all(Villager)
    session.world.process_dead_entities()


def player_position(session):
    return session.world.get_component(session.player_id, Position)


def player_center(session):
    pos = player_position(session)
    size = session.world.get_component(session.player_id, Sprite).size
    return pos.x + size / 2, pos.y + size / 2


def add_treasure_at(session, cx, cy, kind='normal'):
    """Treasure whose center sits at (cx, cy)."""
    return create_treasure(session.world, cx - TREASURE_SIZE / 2, cy - TREASURE_SIZE / 2, kind)


def add_enemy_at(session, cx, cy, vx=0.0, vy=0.0):
    """Enemy whose center sits at (cx, cy)."""
    return create_enemy(session.world, cx - ENEMY_SIZE / 2, cy - ENEMY_SIZE / 2, vx, vy)


def particle_ids(world):
    return [row[0] for row in world.query(ParticleTag)]


def add_villager_at(session, cx, cy):
    """Villager whose center sits at (cx, cy)."""
    return create_villager(session.world, cx - VILLAGER_SIZE / 2, cy - VILLAGER_SIZE / 2)
