from app.services.games.state import GameState
from app.services.games.summary import build_summary, winner


def test_summary_of_finished_game(machine):
    s = machine.state
    s.score.away[0] = 2
    s.score.home[3] = 3
    s.score.home[6] = 1
    machine.end_game()

    summary = build_summary(machine.state)
    assert summary['is_final'] is True
    assert summary['innings'] == 9
    assert summary['home']['total'] == 4
    assert summary['away']['total'] == 2
    assert summary['winner'] == 'home'
    assert summary['winner_name'] == 'Home'
    assert summary['most_productive_inning'] == {'inning': 4, 'runs': 3, 'team': 'Home'}


def test_summary_tie_without_runs(machine):
    summary = build_summary(machine.state)
    assert summary['is_tie'] is True
    assert summary['winner'] is None
    assert summary['most_productive_inning'] is None


def test_summary_uses_score_length_when_total_innings_missing():
    state = GameState.from_dict({
        'home_team': {'name': 'H'},
        'away_team': {'name': 'A'},
        'score': {'home': [0, 1, 0], 'away': [2, 0, 0]},
    })
    summary = build_summary(state)
    assert summary['innings'] == 3
    assert summary['away']['runs_by_inning'] == [2, 0, 0]
    assert winner(state) == 'away'
