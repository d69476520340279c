from app import db
from datetime import datetime, timezone
import json
import string
import random


def _utcnow():
    return datetime.now(timezone.utc)


def generate_game_id(length=7):
    """Generate a short join code that is not already taken."""
    alphabet = string.ascii_lowercase + string.digits
    while True:
        code = ''.join(random.choices(alphabet, k=length))
        if not db.session.get(GameRecord, code):
            return code


class GameRecord(db.Model):
    """One row per game: the latest snapshot as a JSON document."""
    __tablename__ = 'game_record'
    id = db.Column(db.String(255), primary_key=True)
    game_state = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def state_dict(self):
        return json.loads(self.game_state)
