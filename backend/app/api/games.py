from flask import Blueprint, jsonify, request, current_app
from app.models import generate_game_id
from app.services.games.session import GameSession, GameNotFound, GameOverError, UnknownAction
from app.services.games.state import GameState, Team
from app.services.games.summary import build_summary
from app.services.games.sync import SyncGateway


games = Blueprint('games', __name__)


def _gateway() -> SyncGateway:
    return SyncGateway(poll_interval=int(current_app.config.get('POLL_INTERVAL_SEC', 5)))


def _game_id_arg():
    return (request.args.get('game_id') or request.args.get('gameId') or '').strip()


@games.route('', methods=['POST'])
def push_game_state():
    """
    Creates or overwrites a game snapshot. Last writer wins.
    """
    data = request.get_json(silent=True) or {}
    game_id = data.get('game_id')
    raw_state = data.get('game_state')
    if not game_id or not raw_state:
        return jsonify({'error': 'Game ID and game state are required'}), 400

    try:
        state = GameState.from_dict(raw_state)
    except (ValueError, TypeError, AttributeError) as exc:
        return jsonify({'error': f'Invalid game state: {exc}'}), 400
    state.game_id = game_id
    if state.is_game_active:
        try:
            state.home_team.validate()
            state.away_team.validate()
        except ValueError as exc:
            return jsonify({'error': f'Invalid game state: {exc}'}), 400

    if not _gateway().push(game_id, state):
        return jsonify({'error': 'Failed to save game'}), 500
    return jsonify({'success': True, 'game_id': game_id})


@games.route('', methods=['GET'])
def fetch_game_state():
    """
    Returns the latest snapshot of a game; polled by every viewer.
    """
    game_id = _game_id_arg()
    if not game_id:
        return jsonify({'error': 'Game ID is required'}), 400

    gateway = _gateway()
    state = gateway.fetch(game_id)
    if state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify({
        'success': True,
        'game_state': state.to_dict(),
        'poll_interval': gateway.poll_interval,
    })


@games.route('/exists', methods=['GET'])
def game_exists():
    game_id = _game_id_arg()
    if not game_id:
        return jsonify({'error': 'Game ID is required'}), 400
    return jsonify({'success': True, 'exists': _gateway().exists(game_id)})


@games.route('/setup', methods=['POST'])
def setup_game():
    """
    Creates a new game from two rosters and stores its initial snapshot.
    """
    data = request.get_json(silent=True) or {}
    home = data.get('home_team')
    away = data.get('away_team')
    if not home or not away:
        return jsonify({'error': 'Home and away teams are required'}), 400

    max_innings = int(current_app.config.get('MAX_INNINGS', 9))
    try:
        total_innings = int(data.get('total_innings') or max_innings)
        home_team = Team.from_dict(home)
        away_team = Team.from_dict(away)
    except (ValueError, TypeError, AttributeError) as exc:
        return jsonify({'error': str(exc)}), 400
    total_innings = max(1, min(total_innings, max_innings))

    game_id = generate_game_id(int(current_app.config.get('GAME_ID_LENGTH', 7)))
    gateway = _gateway()
    try:
        session = GameSession.start(
            game_id, home_team, away_team, total_innings, gateway,
            min_players=int(current_app.config.get('MIN_PLAYERS', 0)),
        )
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    session.close()

    if not gateway.exists(game_id):
        return jsonify({'error': 'Failed to save game'}), 500
    current_app.logger.info(f"[setup] game={game_id} innings={total_innings}")
    return jsonify({'success': True, 'game_id': game_id, 'game_state': session.state.to_dict()}), 201


@games.route('/<string:game_id>/actions', methods=['POST'])
def apply_action(game_id):
    """
    Applies one scoring event to a game and pushes the resulting snapshot.
    """
    data = request.get_json(silent=True) or {}
    action = data.get('action')
    if not action:
        return jsonify({'error': 'Action is required'}), 400

    try:
        session = GameSession.load(game_id, _gateway())
    except GameNotFound:
        return jsonify({'error': 'Game not found'}), 404

    try:
        state = session.apply(action, data)
    except UnknownAction:
        return jsonify({'error': f'Unknown action: {action}'}), 400
    except GameOverError:
        return jsonify({'error': 'Game is over'}), 409
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    finally:
        session.close()

    if session.gateway.last_push_ok is False:
        return jsonify({'error': 'Failed to save game'}), 500
    current_app.logger.info(f"[action] game={game_id} action={action} last={state.last_action.type if state.last_action else None}")
    return jsonify({
        'success': True,
        'action': action,
        'game_state': state.to_dict(),
        'is_game_over': session.machine.is_game_over(),
    })


@games.route('/<string:game_id>/summary', methods=['GET'])
def game_summary(game_id):
    """
    Final line score for the summary view; retries briefly if the game has
    not been pushed yet.
    """
    cfg = current_app.config
    state = _gateway().fetch_with_retry(
        game_id,
        attempts=int(cfg.get('FETCH_RETRY_ATTEMPTS', 3)),
        backoff=float(cfg.get('FETCH_RETRY_BACKOFF_SEC', 1.0)),
    )
    if state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify({'success': True, 'summary': build_summary(state)})
