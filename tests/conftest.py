import os
import sys
import random
import pytest

# Ensure the project root (containing the game modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from game import GameSession
from server import ScoreServer


class LifeOnlyRandom(random.Random):
    '''
    every spawn tick rolls a life bubble, which never costs a life when missed
    '''

    def random(self):
        return 0.15


@pytest.fixture()
def game():
    return GameSession(rng=random.Random(7))


@pytest.fixture()
def calm_game():
    # long scenarios would otherwise end early on random misses
    return GameSession(rng=LifeOnlyRandom(7))


@pytest.fixture()
def score_server():
    server = ScoreServer(0, '127.0.0.1', identities={'token-alice': 'alice'})
    server.start()
    yield server
    server.close()
