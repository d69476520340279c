"""Key-value persistence for game snapshots.

The store knows nothing about baseball: a game is an id and the JSON
document produced by ``GameState.to_dict``. Writes are upserts and the
last writer wins.
"""

import json
import logging
from typing import Optional

from app import db
from app.models import GameRecord
from .state import GameState

logger = logging.getLogger(__name__)


def save(game_id: str, state: GameState) -> str:
    """Insert or overwrite the snapshot for ``game_id``; returns the id."""
    if not game_id:
        raise ValueError('game_id is required')
    document = json.dumps(state.to_dict())
    record = db.session.get(GameRecord, game_id)
    if record is None:
        record = GameRecord(id=game_id, game_state=document)
    else:
        record.game_state = document
    db.session.add(record)
    db.session.commit()
    logger.debug("[save] game=%s bytes=%d", game_id, len(document))
    return record.id


def load(game_id: str) -> Optional[GameState]:
    record = db.session.get(GameRecord, game_id)
    if record is None:
        return None
    return GameState.from_dict(record.state_dict)


def exists(game_id: str) -> bool:
    return db.session.get(GameRecord, game_id) is not None
