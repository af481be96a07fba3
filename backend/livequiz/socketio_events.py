from flask import current_app, request
from flask_socketio import emit
from livequiz import socketio, NAMESPACE


def _game():
    return current_app.extensions['game']


def _relay():
    return current_app.extensions['live_relay']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    # Late joiners converge on the current view without waiting for the next event
    game = _game()
    emit('game:state', game.snapshot())
    emit('admin:questions_updated', game.questions())


def handle_disconnect(reason=None):
    _relay().release(_get_sid())


def handle_join(data=None):
    if isinstance(data, dict):
        data = data.get('username')
    username = data.strip() if isinstance(data, str) else ''
    if not username:
        emit('error', {'message': 'username is required'})
        return
    _relay().connect(_get_sid(), username)


def handle_add_question(data=None):
    if not isinstance(data, dict):
        emit('error', {'message': 'question payload must be an object'})
        return
    _game().add_question(data)


def handle_start_game(data=None):
    _game().start_game()


def handle_next_question(data=None):
    _game().next_question()


def handle_clear_questions(data=None):
    if not _game().clear_questions():
        emit('error', {'message': 'questions can only be cleared before or after a game'})


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('join', handle_join, namespace=NAMESPACE)
    socketio.on_event('admin:add_question', handle_add_question, namespace=NAMESPACE)
    socketio.on_event('admin:start_game', handle_start_game, namespace=NAMESPACE)
    socketio.on_event('admin:next_question', handle_next_question, namespace=NAMESPACE)
    socketio.on_event('admin:clear_questions', handle_clear_questions, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
