from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the baseball scoreboard server!'})

@main.route('/health')
def health():
    return jsonify({
        'status': 'ok',
        'poll_interval': current_app.config.get('POLL_INTERVAL_SEC', 5),
    })
