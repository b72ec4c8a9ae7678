"""Shared fixtures for the brawler test-suite."""

import os

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from entities.enemy import Enemy
from entities.player import Player
from systems.director import EncounterDirector


class ScriptedRandom:
    """Stand-in for ``random.Random`` that replays fixed rolls.

    Once the script runs out every roll returns *default*.
    """

    def __init__(self, values=(), default=0.99):
        self._values = list(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self.default


@pytest.fixture
def scripted_rng():
    return ScriptedRandom


@pytest.fixture
def player():
    return Player(100, 450)


@pytest.fixture
def make_enemy(player):
    """Factory: enemy targeting the player fixture, with scripted rolls.

    The first roll is always spent on the enemy's walking speed.
    """

    def _factory(x=140, y=450, rolls=(0.5,), default=0.99, **kwargs):
        enemy = Enemy(x, y, ScriptedRandom(rolls, default), **kwargs)
        enemy.set_target(player)
        return enemy

    return _factory


@pytest.fixture
def enemy(make_enemy):
    return make_enemy()


@pytest.fixture
def director():
    return EncounterDirector(seed=1234)
