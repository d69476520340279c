"""Baseball game state machine.

Each public method is one scoring event. A method called directly by the
caller is a *top-level* transition: it snapshots the whole state first,
records that snapshot as the undo point, and notifies subscribers once
it is done. Methods it calls internally (a walk calling ``next_batter``,
a third out calling ``switch_sides``) run inside the same transition and
are undone together with it.
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional

from .state import HOME, MAX_INNINGS, GameState, LastAction, Phase, Score, Team, check_base

logger = logging.getLogger(__name__)

Listener = Callable[[GameState, str], None]

BALLS_FOR_WALK = 4
STRIKES_FOR_OUT = 3
OUTS_PER_HALF = 3


class GameStateMachine:
    def __init__(self, state: Optional[GameState] = None, clock: Callable[[], float] = time.time):
        self.state = state if state is not None else GameState()
        self._clock = clock
        self._listeners: List[Listener] = []
        self._depth = 0

    # ---- observers ----

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(state, label)`` after every completed transition."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, label: str) -> None:
        for listener in list(self._listeners):
            listener(self.state, label)

    @contextmanager
    def batch(self, label: str) -> Iterator[GameState]:
        """Run a block of operations as a single transition.

        Only the outermost block records an undo point and notifies. If the
        block raises, the state is rolled back to the snapshot.
        """
        if self._depth:
            self._depth += 1
            try:
                yield self.state
            finally:
                self._depth -= 1
            return

        snapshot = self.state.snapshot()
        self._depth = 1
        try:
            yield self.state
        except Exception:
            self.state.replace_with(snapshot)
            raise
        finally:
            self._depth = 0
        now = self._clock()
        self.state.last_action = LastAction(type=label, previous_state=snapshot, timestamp=now)
        self.state.last_updated = now
        logger.debug("[action] game=%s %s", self.state.game_id, label)
        self._notify(label)

    # ---- setup / queries ----

    def initialize_game(self, home_team: Team, away_team: Team, total_innings: int = MAX_INNINGS,
                        game_id: Optional[str] = None, min_players: int = 0) -> GameState:
        home_team.validate()
        away_team.validate()
        if not home_team.players or not away_team.players:
            raise ValueError('both teams need at least one player')
        for team in (home_team, away_team):
            if len(team.players) < min_players:
                logger.warning("[setup] team=%r has %d players, %d recommended",
                               team.name, len(team.players), min_players)
        total_innings = max(1, min(int(total_innings or MAX_INNINGS), MAX_INNINGS))

        state = GameState(
            home_team=home_team,
            away_team=away_team,
            inning=1,
            phase=Phase.TOP,
            score=Score.empty(total_innings),
            game_id=game_id or self.state.game_id,
            total_innings=total_innings,
            last_updated=self._clock(),
        )
        self.state.replace_with(state)
        logger.info("[setup] game=%s innings=%d home=%r away=%r",
                    state.game_id, total_innings, home_team.name, away_team.name)
        self._notify('Initialize Game')
        return self.state

    def current_batter_id(self) -> Optional[str]:
        return self.state.batting_team.current_batter_id()

    def is_game_over(self) -> bool:
        s = self.state
        if not s.is_game_active:
            return True
        if (s.inning >= s.total_innings and s.phase is Phase.BOTTOM
                and s.score.home_total > s.score.away_total):
            return True
        return s.inning > s.total_innings

    # ---- count ----

    def add_ball(self) -> None:
        if self.state.balls + 1 < BALLS_FOR_WALK:
            with self.batch('Ball') as s:
                s.balls += 1
            return

        with self.batch('Ball (Walk)') as s:
            s.balls = 0
            s.strikes = 0
            batter = self.current_batter_id()
            bases = s.bases
            # Forced advance: each runner moves only if the base behind is filled
            if bases.first is not None:
                if bases.second is not None:
                    if bases.third is not None:
                        logger.info("[walk] game=%s runner=%s forced home", s.game_id, bases.third)
                        self._credit_run()
                    bases.third = bases.second
                bases.second = bases.first
            bases.first = batter
            logger.info("[walk] game=%s batter=%s", s.game_id, batter)
            self.next_batter()

    def add_strike(self) -> None:
        if self.state.strikes + 1 < STRIKES_FOR_OUT:
            with self.batch('Strike') as s:
                s.strikes += 1
            return

        with self.batch('Strike (Strikeout)') as s:
            s.balls = 0
            s.strikes = 0
            logger.info("[strikeout] game=%s batter=%s", s.game_id, self.current_batter_id())
            # Rotate first, then record the out (the reverse of out-then-rotate)
            # so a third out does not advance the other team's order once
            # sides have switched
            self.next_batter()
            self.add_out()

    def add_out(self) -> None:
        if self.state.outs + 1 < OUTS_PER_HALF:
            with self.batch('Out') as s:
                s.outs += 1
            return
        with self.batch('Out (Side Retired)'):
            self.switch_sides()

    def reset_count(self) -> None:
        with self.batch('Reset Count') as s:
            s.balls = 0
            s.strikes = 0

    # ---- baserunning ----

    def advance_runner(self, from_base: str, to_base: str) -> None:
        if from_base != HOME:
            check_base(from_base)
        if to_base != HOME:
            check_base(to_base)
        s = self.state

        if from_base == HOME and to_base != HOME:
            label = {'first': 'Hit (Single)', 'second': 'Hit (Double)', 'third': 'Hit (Triple)'}[to_base]
            with self.batch(label):
                s.bases.set(to_base, self.current_batter_id())
                self.next_batter()
            return

        if to_base == HOME:
            if from_base == HOME:
                with self.batch('Home Run'):
                    self._credit_run()
                return
            runner = s.bases.get(from_base)
            if runner is None:
                logger.info("[advance-skip] game=%s no runner on %s", s.game_id, from_base)
                return
            with self.batch(f'Runner Scored from {from_base}'):
                player = s.batting_team.player(runner)
                logger.info("[run] game=%s runner=%s scored from %s",
                            s.game_id, player.name if player else runner, from_base)
                self._credit_run()
                s.bases.set(from_base, None)
            return

        if from_base == to_base:
            logger.info("[advance-skip] game=%s runner already on %s", s.game_id, from_base)
            return
        runner = s.bases.get(from_base)
        if runner is None:
            logger.info("[advance-skip] game=%s no runner on %s", s.game_id, from_base)
            return
        with self.batch(f'Runner Advanced: {from_base} to {to_base}'):
            s.bases.set(to_base, runner)
            s.bases.set(from_base, None)

    def return_runner(self, from_base: str, to_base: str) -> None:
        s = self.state
        runner = s.bases.get(from_base)
        if runner is None:
            logger.info("[return-skip] game=%s no runner on %s", s.game_id, from_base)
            return
        if s.bases.get(to_base) is not None:
            logger.info("[return-skip] game=%s base %s is already occupied", s.game_id, to_base)
            return
        with self.batch(f'Runner Returned: {from_base} to {to_base}'):
            s.bases.set(to_base, runner)
            s.bases.set(from_base, None)

    def strike_out_runner(self, base: str) -> None:
        s = self.state
        if s.bases.get(base) is None:
            logger.info("[runner-out-skip] game=%s no runner on %s", s.game_id, base)
            return
        with self.batch(f'Strike Out Runner at {base}'):
            s.bases.set(base, None)
            self.add_out()

    def clear_bases(self) -> None:
        with self.batch('Clear Bases') as s:
            s.bases.clear()

    def add_run(self) -> None:
        with self.batch('Run Scored'):
            self._credit_run()

    def _credit_run(self) -> None:
        s = self.state
        row = s.score.away if s.phase is Phase.TOP else s.score.home
        idx = s.inning - 1
        if not 0 <= idx < len(row):
            logger.warning("[run-skip] game=%s inning=%d outside score rows", s.game_id, s.inning)
            return
        row[idx] += 1

    # ---- turns ----

    def next_batter(self) -> None:
        team = self.state.batting_team
        if not team.batting_order:
            logger.warning("[next-batter-skip] game=%s empty batting order", self.state.game_id)
            return
        with self.batch('Next Batter') as s:
            team.current_batter_index = (team.current_batter_index + 1) % len(team.batting_order)
            s.balls = 0
            s.strikes = 0

    def switch_sides(self) -> None:
        s = self.state
        if (s.inning >= s.total_innings and s.phase is Phase.BOTTOM
                and s.score.home_total > s.score.away_total):
            logger.info("[walk-off] game=%s inning=%d", s.game_id, s.inning)
            self.end_game()
            return

        if s.phase is Phase.TOP:
            with self.batch('Switch Sides (Top to Bottom)'):
                s.phase = Phase.BOTTOM
                self._reset_half()
        elif s.phase is Phase.BOTTOM:
            if s.inning + 1 > s.total_innings:
                self.end_game()
                return
            with self.batch('Switch Sides (Bottom to Top)'):
                s.inning += 1
                s.phase = Phase.TOP
                self._reset_half()
        else:
            logger.info("[switch-skip] game=%s phase=%s", s.game_id, s.phase.value)

    def _reset_half(self) -> None:
        s = self.state
        s.balls = 0
        s.strikes = 0
        s.outs = 0
        s.bases.clear()

    def end_team_turn(self) -> None:
        with self.batch('End Team Turn'):
            self.switch_sides()

    def end_game(self) -> None:
        with self.batch('End Game') as s:
            s.phase = Phase.ENDED
        logger.info("[end] game=%s final home=%d away=%d",
                    s.game_id, s.score.home_total, s.score.away_total)

    # ---- undo ----

    def undo_last_action(self) -> bool:
        s = self.state
        if s.last_action is None:
            logger.info("[undo-skip] game=%s nothing to undo", s.game_id)
            return False
        if self._depth:
            raise RuntimeError('cannot undo inside a transition')
        action = s.last_action
        s.replace_with(action.previous_state)
        s.last_updated = self._clock()
        logger.info("[undo] game=%s undid %r", s.game_id, action.type)
        self._notify(f'Undo {action.type}')
        return True
