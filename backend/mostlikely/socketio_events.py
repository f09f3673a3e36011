from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from mostlikely import get_session, socketio

ROOM = 'room:session'
ROLES = ('tv', 'player')


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    current_app.logger.debug(f"[ws-disconnect] sid={request.sid} reason={reason}")  # type: ignore[attr-defined]


def handle_join_room(data):
    """Subscribe this socket to state pushes and send it the current state."""
    role = (data or {}).get('role') or 'player'
    if role not in ROLES:
        emit('error', {'message': f'role must be one of {", ".join(ROLES)}'})
        return
    join_room(ROOM)
    current_app.logger.info(f"[ws-join] sid={request.sid} role={role}")  # type: ignore[attr-defined]
    emit('joined', {'room': ROOM, 'role': role})
    emit('state_update', get_session().snapshot())


def handle_leave_room(data=None):
    leave_room(ROOM)
    emit('left', {'room': ROOM})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'join_room': handle_join_room,
        'leave_room': handle_leave_room,
        'ping': handle_ping,
    }
    for event, handler in handlers.items():
        socketio.on_event(event, handler, namespace='/ws')
    if testing:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace='/')
