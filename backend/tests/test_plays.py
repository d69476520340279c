from app.services.games import plays


def test_single_moves_every_runner_one_base(machine):
    machine.state.bases.first = 'r1'
    machine.state.bases.second = 'r2'
    machine.state.bases.third = 'r3'
    plays.single(machine)
    s = machine.state
    assert s.bases.to_dict() == {'first': 'a1', 'second': 'r1', 'third': 'r2'}
    assert s.score.away[0] == 1
    assert machine.current_batter_id() == 'a2'


def test_double_scores_runners_from_second_and_third(machine):
    machine.state.bases.first = 'r1'
    machine.state.bases.second = 'r2'
    plays.double(machine)
    assert machine.state.bases.to_dict() == {'first': None, 'second': 'a1', 'third': 'r1'}
    assert machine.state.score.away[0] == 1


def test_triple_clears_the_bases_ahead(machine):
    machine.state.bases.first = 'r1'
    plays.triple(machine)
    assert machine.state.bases.to_dict() == {'first': None, 'second': None, 'third': 'a1'}
    assert machine.state.score.away[0] == 1


def test_grand_slam(machine):
    machine.state.bases.first = 'r1'
    machine.state.bases.second = 'r2'
    machine.state.bases.third = 'r3'
    plays.home_run(machine)
    assert machine.state.score.away[0] == 4
    assert machine.state.bases.to_dict() == {'first': None, 'second': None, 'third': None}
    assert machine.current_batter_id() == 'a2'


def test_play_is_one_undo_point(machine):
    machine.state.bases.second = 'r2'
    seen = []
    machine.subscribe(lambda state, label: seen.append(label))
    plays.double(machine)
    assert seen == ['Double']
    machine.undo_last_action()
    assert machine.state.bases.to_dict() == {'first': None, 'second': 'r2', 'third': None}
    assert machine.state.score.away_total == 0
    assert machine.current_batter_id() == 'a1'


def test_direct_out_advances_batter(machine):
    plays.direct_out(machine)
    assert machine.state.outs == 1
    assert machine.current_batter_id() == 'a2'
