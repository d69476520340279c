from typing import Any, Dict, Optional

from .state import GameState


def winner(state: GameState) -> Optional[str]:
    """'home', 'away', or None for a tie."""
    home, away = state.score.home_total, state.score.away_total
    if home > away:
        return 'home'
    if away > home:
        return 'away'
    return None


def build_summary(state: GameState) -> Dict[str, Any]:
    """Final line score and headline numbers for a finished (or paused) game.

    The innings shown follow ``total_innings``, falling back to the length
    of the score rows for snapshots that never recorded it.
    """
    innings = state.total_innings or len(state.score.home)
    home_rows = (state.score.home + [0] * innings)[:innings]
    away_rows = (state.score.away + [0] * innings)[:innings]

    best = {'inning': 0, 'runs': 0, 'team': None}
    for i in range(innings):
        if home_rows[i] > best['runs']:
            best = {'inning': i + 1, 'runs': home_rows[i], 'team': state.home_team.name}
        if away_rows[i] > best['runs']:
            best = {'inning': i + 1, 'runs': away_rows[i], 'team': state.away_team.name}

    result = winner(state)
    return {
        'game_id': state.game_id,
        'is_final': not state.is_game_active,
        'innings': innings,
        'home': {'name': state.home_team.name, 'runs_by_inning': home_rows, 'total': sum(home_rows)},
        'away': {'name': state.away_team.name, 'runs_by_inning': away_rows, 'total': sum(away_rows)},
        'winner': result,
        'winner_name': {'home': state.home_team.name, 'away': state.away_team.name}.get(result),
        'is_tie': result is None,
        'most_productive_inning': best if best['runs'] else None,
    }
