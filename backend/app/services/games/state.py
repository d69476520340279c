"""Game state model: rosters, count, bases, line score and undo points.

Everything here is plain data. Transitions live in ``machine.py``; the
store and HTTP layers only ever see the dict produced by ``to_dict``.
"""

import copy
import time
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional


BASES = ('first', 'second', 'third')
HOME = 'home'
MAX_INNINGS = 9


class Phase(str, Enum):
    """Which half of the inning is being played, if any."""
    PENDING = 'pending'  # created, teams not set up yet
    TOP = 'top'          # away team bats
    BOTTOM = 'bottom'    # home team bats
    ENDED = 'ended'


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'number': self.number}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        if not data.get('id'):
            raise ValueError('player id is required')
        number = data.get('number')
        return cls(
            id=str(data['id']),
            name=str(data.get('name') or ''),
            number=str(number) if number not in (None, '') else None,
        )


@dataclass
class Team:
    name: str = ''
    players: List[Player] = field(default_factory=list)
    batting_order: List[str] = field(default_factory=list)
    current_batter_index: int = 0

    def player(self, player_id: Optional[str]) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def current_batter_id(self) -> Optional[str]:
        if not 0 <= self.current_batter_index < len(self.batting_order):
            return None
        return self.batting_order[self.current_batter_index]

    def validate(self) -> None:
        """Raise ValueError unless the batting order is a permutation of the roster."""
        ids = [p.id for p in self.players]
        if len(set(ids)) != len(ids):
            raise ValueError(f'team {self.name!r} has duplicate player ids')
        if sorted(self.batting_order) != sorted(ids):
            raise ValueError(f'team {self.name!r} batting order must list every player exactly once')
        if self.batting_order and not 0 <= self.current_batter_index < len(self.batting_order):
            raise ValueError(f'team {self.name!r} current batter index out of range')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'players': [p.to_dict() for p in self.players],
            'batting_order': list(self.batting_order),
            'current_batter_index': self.current_batter_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Team':
        players = [Player.from_dict(p) for p in data.get('players') or []]
        order = data.get('batting_order')
        # Rosters submitted without an explicit order bat in roster order
        if order is None:
            order = [p.id for p in players]
        return cls(
            name=str(data.get('name') or ''),
            players=players,
            batting_order=[str(pid) for pid in order],
            current_batter_index=int(data.get('current_batter_index') or 0),
        )


@dataclass
class BaseState:
    first: Optional[str] = None
    second: Optional[str] = None
    third: Optional[str] = None

    def get(self, base: str) -> Optional[str]:
        return getattr(self, check_base(base))

    def set(self, base: str, runner_id: Optional[str]) -> None:
        setattr(self, check_base(base), runner_id)

    def clear(self) -> None:
        self.first = self.second = self.third = None

    def to_dict(self) -> Dict[str, Any]:
        return {'first': self.first, 'second': self.second, 'third': self.third}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BaseState':
        data = data or {}
        return cls(first=data.get('first'), second=data.get('second'), third=data.get('third'))


@dataclass
class Score:
    """Runs per inning for each side. Row length is fixed at setup."""
    home: List[int] = field(default_factory=lambda: [0] * MAX_INNINGS)
    away: List[int] = field(default_factory=lambda: [0] * MAX_INNINGS)

    @classmethod
    def empty(cls, innings: int) -> 'Score':
        return cls(home=[0] * innings, away=[0] * innings)

    @property
    def home_total(self) -> int:
        return sum(self.home)

    @property
    def away_total(self) -> int:
        return sum(self.away)

    def to_dict(self) -> Dict[str, Any]:
        return {'home': list(self.home), 'away': list(self.away)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Score':
        if not data:
            return cls()
        return cls(home=[int(r) for r in data.get('home') or []],
                   away=[int(r) for r in data.get('away') or []])


@dataclass
class LastAction:
    """Undo point: the label of the action and the full state before it ran."""
    type: str
    previous_state: 'GameState'
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'previous_state': self.previous_state.to_dict(),
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LastAction':
        return cls(
            type=str(data.get('type') or ''),
            previous_state=GameState.from_dict(data.get('previous_state') or {}),
            timestamp=float(data.get('timestamp') or 0.0),
        )


@dataclass
class GameState:
    home_team: Team = field(default_factory=Team)
    away_team: Team = field(default_factory=Team)
    inning: int = 1
    phase: Phase = Phase.PENDING
    balls: int = 0
    strikes: int = 0
    outs: int = 0
    bases: BaseState = field(default_factory=BaseState)
    score: Score = field(default_factory=Score)
    game_id: Optional[str] = None
    total_innings: int = MAX_INNINGS
    last_action: Optional[LastAction] = None
    last_updated: float = field(default_factory=time.time)

    @property
    def is_top_inning(self) -> bool:
        return self.phase is Phase.TOP

    @property
    def is_game_active(self) -> bool:
        return self.phase in (Phase.TOP, Phase.BOTTOM)

    @property
    def batting_side(self) -> str:
        return 'away' if self.phase is Phase.TOP else 'home'

    @property
    def batting_team(self) -> Team:
        return self.away_team if self.phase is Phase.TOP else self.home_team

    def snapshot(self) -> 'GameState':
        """Deep copy used as an undo point.

        The copy keeps its own ``last_action`` so undo can chain one step
        back, but that action's snapshot is cut off from further history.
        """
        snap = copy.deepcopy(self)
        if snap.last_action is not None:
            snap.last_action.previous_state.last_action = None
        return snap

    def replace_with(self, other: 'GameState') -> None:
        """Overwrite every field in place with ``other``'s."""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game_id': self.game_id,
            'home_team': self.home_team.to_dict(),
            'away_team': self.away_team.to_dict(),
            'inning': self.inning,
            'phase': self.phase.value,
            'is_top_inning': self.is_top_inning,
            'is_game_active': self.is_game_active,
            'balls': self.balls,
            'strikes': self.strikes,
            'outs': self.outs,
            'bases': self.bases.to_dict(),
            'score': self.score.to_dict(),
            'total_innings': self.total_innings,
            'last_action': self.last_action.to_dict() if self.last_action else None,
            'last_updated': self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameState':
        if not isinstance(data, dict):
            raise ValueError('game state must be a JSON object')
        phase = data.get('phase')
        if phase:
            phase = Phase(phase)
        elif data.get('is_game_active'):
            phase = Phase.TOP if data.get('is_top_inning', True) else Phase.BOTTOM
        else:
            phase = Phase.PENDING
        last_action = data.get('last_action')
        score = Score.from_dict(data.get('score'))
        return cls(
            home_team=Team.from_dict(data.get('home_team') or {}),
            away_team=Team.from_dict(data.get('away_team') or {}),
            inning=int(data.get('inning') or 1),
            phase=phase,
            balls=int(data.get('balls') or 0),
            strikes=int(data.get('strikes') or 0),
            outs=int(data.get('outs') or 0),
            bases=BaseState.from_dict(data.get('bases')),
            score=score,
            game_id=data.get('game_id'),
            total_innings=int(data.get('total_innings') or len(score.home) or MAX_INNINGS),
            last_action=LastAction.from_dict(last_action) if last_action else None,
            last_updated=float(data.get('last_updated') or time.time()),
        )


def check_base(base: str) -> str:
    if base not in BASES:
        raise ValueError(f'unknown base: {base!r}')
    return base
