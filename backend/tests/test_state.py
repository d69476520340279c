import json

import pytest

from app.services.games.machine import GameStateMachine
from app.services.games.state import GameState, Phase, Player, Team

from conftest import make_team


def test_snapshot_survives_json_round_trip(machine):
    machine.add_ball()
    machine.advance_runner('home', 'first')
    machine.add_strike()
    document = json.loads(json.dumps(machine.state.to_dict()))
    restored = GameState.from_dict(document)
    assert restored == machine.state
    assert restored.last_action.previous_state.last_action.type == 'Hit (Single)'


def test_phase_flags_are_emitted_for_viewers(machine):
    data = machine.state.to_dict()
    assert data['phase'] == 'top'
    assert data['is_top_inning'] is True
    assert data['is_game_active'] is True
    machine.end_game()
    data = machine.state.to_dict()
    assert data['is_game_active'] is False
    assert data['is_top_inning'] is False


def test_phase_derived_from_legacy_flags():
    state = GameState.from_dict({'is_game_active': True, 'is_top_inning': False})
    assert state.phase is Phase.BOTTOM
    assert GameState.from_dict({}).phase is Phase.PENDING


def test_total_innings_falls_back_to_score_length():
    state = GameState.from_dict({'total_innings': 0, 'score': {'home': [0] * 5, 'away': [0] * 5}})
    assert state.total_innings == 5


def test_from_dict_rejects_non_objects():
    with pytest.raises(ValueError):
        GameState.from_dict(['not', 'a', 'state'])


def test_snapshot_history_is_bounded(machine):
    for _ in range(10):
        machine.add_strike()
    prev = machine.state.last_action.previous_state
    assert prev.last_action is not None
    assert prev.last_action.previous_state.last_action is None


def test_team_without_order_bats_in_roster_order():
    team = Team.from_dict({'name': 'Away', 'players': [{'id': 'x'}, {'id': 'y', 'number': 7}]})
    assert team.batting_order == ['x', 'y']
    assert team.players[1] == Player(id='y', name='', number='7')


def test_current_batter_out_of_range_is_none():
    team = make_team('Away', 'a')
    team.current_batter_index = 7
    assert team.current_batter_id() is None
    with pytest.raises(ValueError):
        team.validate()


def test_initialize_caps_innings_and_sizes_score(clock):
    m = GameStateMachine(clock=clock)
    m.initialize_game(make_team('Home', 'h'), make_team('Away', 'a'), 12)
    assert m.state.total_innings == 9
    assert len(m.state.score.home) == len(m.state.score.away) == 9

    m.initialize_game(make_team('Home', 'h'), make_team('Away', 'a'), 4)
    assert m.state.total_innings == 4
    assert m.state.score.home == [0, 0, 0, 0]
    assert m.state.phase is Phase.TOP
    assert m.state.inning == 1


def test_initialize_rejects_batting_order_mismatch(clock):
    home = make_team('Home', 'h')
    home.batting_order = ['h1', 'h2', 'zz']
    with pytest.raises(ValueError):
        GameStateMachine(clock=clock).initialize_game(home, make_team('Away', 'a'))


def test_initialize_rejects_empty_roster(clock):
    with pytest.raises(ValueError):
        GameStateMachine(clock=clock).initialize_game(Team(name='Home'), make_team('Away', 'a'))
