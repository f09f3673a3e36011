from flask import Blueprint, jsonify

from mostlikely import get_session

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Mest sannsynlig game server!'})

@main.route('/api/health')
def health():
    session = get_session()
    return jsonify({'status': 'ok', 'phase': session.phase, 'players': len(session.registry)})
