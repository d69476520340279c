import os
import sys
import pytest

# Ensure the backend root (containing the `app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app import create_app, db
from app.services.games.machine import GameStateMachine
from app.services.games.state import Player, Team


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    POLL_INTERVAL_SEC = 5
    MAX_INNINGS = 9
    GAME_ID_LENGTH = 7
    FETCH_RETRY_ATTEMPTS = 2
    FETCH_RETRY_BACKOFF_SEC = 0
    MIN_PLAYERS = 0
    CORS_ORIGINS = ['http://localhost:3000']


def make_team(name, prefix, size=3):
    players = [Player(id=f'{prefix}{n}', name=f'{name} {n}', number=str(n)) for n in range(1, size + 1)]
    return Team(name=name, players=players, batting_order=[p.id for p in players])


def team_payload(name, prefix, size=3):
    return make_team(name, prefix, size).to_dict()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import app.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def clock():
    """Deterministic, strictly increasing timestamps."""
    ticks = iter(range(1_000, 1_000_000))
    return lambda: float(next(ticks))


@pytest.fixture()
def machine(clock):
    """Fresh nine-inning game, away team (a1..a3) batting in the top of the 1st."""
    m = GameStateMachine(clock=clock)
    m.initialize_game(make_team('Home', 'h'), make_team('Away', 'a'), 9, game_id='test123')
    return m
