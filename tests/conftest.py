import random

import pytest

from torus_chase.config import GameConfig
from torus_chase.ecs import World
from torus_chase.simulation import Simulation


@pytest.fixture
def config():
    return GameConfig(seed=1234)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world():
    return World()


@pytest.fixture
def sim(config):
    return Simulation(config)
