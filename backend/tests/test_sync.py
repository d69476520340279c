from sqlalchemy.exc import SQLAlchemyError

from app.services.games import store
from app.services.games.sync import SyncGateway


def test_fetch_with_retry_backs_off_then_gives_up(flask_app):
    delays = []
    gateway = SyncGateway(sleep=delays.append)
    assert gateway.fetch_with_retry('missing', attempts=3, backoff=0.5) is None
    assert delays == [0.5, 1.0]


def test_fetch_with_retry_stops_once_found(monkeypatch, machine):
    results = iter([None, None, machine.state])
    calls = []

    def load(game_id):
        calls.append(game_id)
        return next(results)

    monkeypatch.setattr(store, 'load', load)
    delays = []
    gateway = SyncGateway(sleep=delays.append)
    assert gateway.fetch_with_retry('test123', attempts=5, backoff=2) is machine.state
    assert calls == ['test123'] * 3
    assert delays == [2, 4]


def test_single_attempt_does_not_sleep(flask_app):
    delays = []
    assert SyncGateway(sleep=delays.append).fetch_with_retry('missing', attempts=1) is None
    assert delays == []


def test_push_result_is_tracked(flask_app, machine, monkeypatch):
    gateway = SyncGateway()
    assert gateway.last_push_ok is None
    assert gateway.push('test123', machine.state) is True
    assert gateway.last_push_ok is True

    def broken_save(game_id, state):
        raise SQLAlchemyError('database is down')

    monkeypatch.setattr(store, 'save', broken_save)
    assert gateway.push('test123', machine.state) is False
    assert gateway.last_push_ok is False
