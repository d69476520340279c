"""Admin-side game session: one state machine per game, wired to the store.

The HTTP layer resolves a game id to a ``GameSession``, applies one named
action, and returns the new snapshot. The session refuses mutating
actions once the game is over; ``undo`` stays available.
"""

import logging
from typing import Any, Dict, Optional

from . import plays
from .machine import GameStateMachine
from .state import GameState, Team
from .sync import SyncGateway

logger = logging.getLogger(__name__)

# Actions still allowed once is_game_over() holds
_ALLOWED_WHEN_OVER = {'undo', 'end_game'}


class GameNotFound(LookupError):
    pass


class GameOverError(RuntimeError):
    pass


class UnknownAction(ValueError):
    pass


class GameSession:
    def __init__(self, state: GameState, gateway: SyncGateway):
        self.machine = GameStateMachine(state)
        self.gateway = gateway
        self._detach = gateway.attach(self.machine)

    @property
    def state(self) -> GameState:
        return self.machine.state

    @classmethod
    def load(cls, game_id: str, gateway: SyncGateway) -> 'GameSession':
        state = gateway.fetch(game_id)
        if state is None:
            raise GameNotFound(game_id)
        if not state.game_id:
            state.game_id = game_id
        return cls(state, gateway)

    @classmethod
    def start(cls, game_id: str, home_team: Team, away_team: Team, total_innings: int,
              gateway: SyncGateway, min_players: int = 0) -> 'GameSession':
        session = cls(GameState(game_id=game_id), gateway)
        # The attached listener pushes the initial snapshot
        session.machine.initialize_game(home_team, away_team, total_innings,
                                        game_id=game_id, min_players=min_players)
        return session

    def close(self) -> None:
        self._detach()

    def apply(self, action: str, params: Optional[Dict[str, Any]] = None) -> GameState:
        params = params or {}
        handler = self._handlers().get(action)
        if handler is None:
            raise UnknownAction(action)
        if action not in _ALLOWED_WHEN_OVER and self.machine.is_game_over():
            raise GameOverError(self.state.game_id)
        if action == 'end_game' and not self.state.is_game_active:
            raise GameOverError(self.state.game_id)
        logger.info("[apply] game=%s action=%s params=%s", self.state.game_id, action, params)
        handler(params)
        return self.state

    def _handlers(self):
        m = self.machine
        return {
            'ball': lambda p: m.add_ball(),
            'strike': lambda p: m.add_strike(),
            'out': lambda p: m.add_out(),
            'reset_count': lambda p: m.reset_count(),
            'advance_runner': lambda p: m.advance_runner(_required(p, 'from'), _required(p, 'to')),
            'return_runner': lambda p: m.return_runner(_required(p, 'from'), _required(p, 'to')),
            'strike_out_runner': lambda p: m.strike_out_runner(_required(p, 'base')),
            'clear_bases': lambda p: m.clear_bases(),
            'add_run': lambda p: m.add_run(),
            'next_batter': lambda p: m.next_batter(),
            'switch_sides': lambda p: m.switch_sides(),
            'end_team_turn': lambda p: m.end_team_turn(),
            'end_game': lambda p: m.end_game(),
            'undo': lambda p: m.undo_last_action(),
            'single': lambda p: plays.single(m),
            'double': lambda p: plays.double(m),
            'triple': lambda p: plays.triple(m),
            'home_run': lambda p: plays.home_run(m),
            'direct_out': lambda p: plays.direct_out(m),
        }


def _required(params: Dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not value:
        raise ValueError(f'{key!r} is required')
    return str(value)
