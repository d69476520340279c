"""Sync gateway: moves snapshots between a game session and the shared store.

Viewers poll ``fetch`` on a fixed interval; the admin side pushes after
every transition. Failures are logged and reported as ``False``/``None``
so callers can retry; nothing here raises on a store error.
"""

import logging
import time
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from app import db
from . import store
from .machine import GameStateMachine
from .state import GameState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SEC = 5


class SyncGateway:
    def __init__(self, poll_interval: int = DEFAULT_POLL_INTERVAL_SEC,
                 sleep: Callable[[float], None] = time.sleep):
        self.poll_interval = poll_interval
        self._sleep = sleep
        # Result of the most recent push; None until something is pushed
        self.last_push_ok: Optional[bool] = None

    def fetch(self, game_id: str) -> Optional[GameState]:
        try:
            state = store.load(game_id)
        except (SQLAlchemyError, ValueError) as exc:
            db.session.rollback()
            logger.error("[fetch-error] game=%s %s", game_id, exc)
            return None
        if state is None:
            logger.info("[fetch-miss] game=%s not found", game_id)
        return state

    def push(self, game_id: str, state: GameState) -> bool:
        try:
            store.save(game_id, state)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("[push-error] game=%s %s", game_id, exc)
            self.last_push_ok = False
            return False
        logger.debug("[push] game=%s", game_id)
        self.last_push_ok = True
        return True

    def create(self, game_id: str, state: GameState) -> bool:
        """Store the initial snapshot of a new game (overwrites on id collision)."""
        logger.info("[create] game=%s", game_id)
        return self.push(game_id, state)

    def exists(self, game_id: str) -> bool:
        try:
            return store.exists(game_id)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("[exists-error] game=%s %s", game_id, exc)
            return False

    def fetch_with_retry(self, game_id: str, attempts: int = 3, backoff: float = 1.0) -> Optional[GameState]:
        """Bounded retry used by views that may load a game before its first push."""
        for attempt in range(max(1, attempts)):
            state = self.fetch(game_id)
            if state is not None:
                return state
            if attempt + 1 < attempts:
                delay = backoff * (2 ** attempt)
                logger.info("[fetch-retry] game=%s attempt=%d next_in=%.1fs", game_id, attempt + 1, delay)
                self._sleep(delay)
        logger.warning("[fetch-giveup] game=%s after %d attempts", game_id, attempts)
        return None

    def attach(self, machine: GameStateMachine) -> Callable[[], None]:
        """Push the machine's state after every transition; returns the unsubscribe hook."""
        def _on_change(state: GameState, label: str) -> None:
            if not state.game_id:
                return
            if not self.push(state.game_id, state):
                logger.warning("[push-dropped] game=%s action=%r", state.game_id, label)
        return machine.subscribe(_on_change)
