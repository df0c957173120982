import random

import pytest

from mystic_quest.game import GameSession
from mystic_quest.oracle import Narrator

from helpers import ImmediateExecutor, StubClient


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def session(rng):
    """A started session with no Oracle attached."""
    s = GameSession(rng=rng)
    s.start_game()
    return s


@pytest.fixture
def stub_client():
    return StubClient()


@pytest.fixture
def narrated_session(rng, stub_client):
    """A started session whose Oracle answers inline with a fixed line."""
    s = GameSession(narrator=Narrator(stub_client, executor=ImmediateExecutor()), rng=rng)
    s.start_game()
    return s
