"""Composite plays built from ordered ``advance_runner`` calls.

Runners are always moved from third backward so a destination base is
vacated before the trailing runner arrives. Each play is a single undo
point.
"""

from .machine import GameStateMachine


def _advance_all(machine: GameStateMachine, destinations: dict) -> None:
    bases = machine.state.bases
    for base in ('third', 'second', 'first'):
        if bases.get(base) is not None:
            machine.advance_runner(base, destinations[base])


def single(machine: GameStateMachine) -> None:
    with machine.batch('Single'):
        _advance_all(machine, {'third': 'home', 'second': 'third', 'first': 'second'})
        machine.advance_runner('home', 'first')


def double(machine: GameStateMachine) -> None:
    with machine.batch('Double'):
        _advance_all(machine, {'third': 'home', 'second': 'home', 'first': 'third'})
        machine.advance_runner('home', 'second')


def triple(machine: GameStateMachine) -> None:
    with machine.batch('Triple'):
        _advance_all(machine, {'third': 'home', 'second': 'home', 'first': 'home'})
        machine.advance_runner('home', 'third')


def home_run(machine: GameStateMachine) -> None:
    with machine.batch('Home Run'):
        _advance_all(machine, {'third': 'home', 'second': 'home', 'first': 'home'})
        machine.advance_runner('home', 'home')
        machine.next_batter()


def direct_out(machine: GameStateMachine) -> None:
    """Batter put out on the play (fly out, ground out)."""
    with machine.batch('Out'):
        machine.next_batter()
        machine.add_out()
