from flask import Blueprint, jsonify, request, current_app
import time
from werkzeug.exceptions import HTTPException

from mostlikely import get_session, socketio
from mostlikely.services.games.avatars import get_avatars
from mostlikely.services.games.errors import AlreadyVoted, GameError
from mostlikely.socketio_events import ROOM


game = Blueprint('game', __name__)

_last_controller_action: dict[str, float] = {}


def _body() -> dict:
    return request.get_json(silent=True) or {}


def _publish(state: dict) -> None:
    socketio.emit('state_update', state, to=ROOM, namespace='/ws')


def _ok(**extra):
    state = get_session().snapshot()
    _publish(state)
    payload = {'success': True}
    payload.update(extra)
    payload['state'] = state
    return jsonify(payload)


def _debounced(action: str) -> bool:
    try:
        debounce_ms = int(current_app.config.get('CONTROLLER_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms <= 0:
        return False
    now = time.time() * 1000.0
    last = _last_controller_action.get(action, 0)
    if now - last < debounce_ms:
        current_app.logger.debug(f"[debounce] action={action}")
        return True
    _last_controller_action[action] = now
    return False


@game.errorhandler(GameError)
def handle_game_error(exc):
    current_app.logger.debug(f"[rejected] path={request.path} code={exc.code} error={exc.message}")
    payload = exc.to_dict()
    if isinstance(exc, AlreadyVoted):
        payload['duplicate'] = True
        payload['state'] = get_session().snapshot()
    return jsonify(payload), exc.status_code


@game.errorhandler(Exception)
def handle_unexpected(exc):
    if isinstance(exc, HTTPException):
        return exc
    current_app.logger.exception(f"[error] path={request.path}")
    return jsonify({'success': False, 'error': 'Something went wrong', 'code': 'internal_error'}), 500


@game.route('/state', methods=['GET'])
def get_state():
    return jsonify(get_session().snapshot())


@game.route('/join', methods=['POST'])
def join():
    joined = get_session().join(_body().get('name'))
    return _ok(token=joined['token'], name=joined['name'], avatar_id=joined['avatar_id'], avatars=get_avatars())


@game.route('/leave', methods=['POST'])
def leave():
    get_session().leave(_body().get('token'))
    return _ok()


@game.route('/avatar', methods=['POST'])
def set_avatar():
    data = _body()
    get_session().set_avatar(data.get('token'), data.get('avatar_id'))
    return _ok()


@game.route('/settings', methods=['POST'])
def set_settings():
    data = _body()
    get_session().set_settings(data.get('tone'), data.get('couples_safe', False))
    return _ok()


@game.route('/validate-token', methods=['POST'])
def validate_token():
    session = get_session()
    result = session.validate_token(_body().get('token'))
    if not result['valid']:
        return jsonify({'valid': False})
    result['avatars'] = get_avatars()
    result['state'] = session.snapshot()
    return jsonify(result)


@game.route('/mode', methods=['POST'])
def set_game_mode():
    get_session().set_game_mode(_body().get('mode'))
    return _ok()


@game.route('/start', methods=['POST'])
def start():
    if _debounced('start'):
        return jsonify({'message': 'debounced'}), 202
    get_session().start()
    return _ok()


@game.route('/vote', methods=['POST'])
def vote():
    data = _body()
    get_session().submit_vote(data.get('token'), data.get('voted_for'))
    return _ok()


@game.route('/end-voting', methods=['POST'])
def end_voting():
    if _debounced('end-voting'):
        return jsonify({'message': 'debounced'}), 202
    result = get_session().end_voting()
    return _ok(result=result.to_dict())


@game.route('/tick', methods=['POST'])
def tick():
    result = get_session().tick()
    if result is None:
        return jsonify({'success': True, 'result': None, 'state': get_session().snapshot()})
    return _ok(result=result.to_dict())


@game.route('/next', methods=['POST'])
def next_question():
    if _debounced('next'):
        return jsonify({'message': 'debounced'}), 202
    get_session().next_question()
    return _ok()


@game.route('/next-now', methods=['POST'])
def next_question_now():
    if _debounced('next-now'):
        return jsonify({'message': 'debounced'}), 202
    get_session().next_question_now()
    return _ok()


@game.route('/pause', methods=['POST'])
def pause():
    get_session().pause()
    return _ok()


@game.route('/resume', methods=['POST'])
def resume():
    get_session().resume()
    return _ok()


@game.route('/reset-to-lobby', methods=['POST'])
def reset_to_lobby():
    get_session().reset_to_lobby()
    return _ok()


@game.route('/reset', methods=['POST'])
def reset():
    get_session().reset()
    return _ok()


@game.route('/checkout', methods=['POST'])
def create_checkout():
    created = get_session().create_checkout()
    return _ok(checkout_id=created['checkout_id'], checkout_url=created['checkout_url'])


@game.route('/checkout/<string:checkout_id>/paid', methods=['POST'])
def checkout_paid(checkout_id):
    get_session().mark_checkout_paid(checkout_id)
    return _ok()


@game.route('/checkout/<string:checkout_id>/canceled', methods=['POST'])
def checkout_canceled(checkout_id):
    get_session().mark_checkout_canceled(checkout_id)
    return _ok()
