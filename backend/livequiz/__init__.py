from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from livequiz.config import Config

NAMESPACE = '/ws'

socketio = SocketIO(cors_allowed_origins='*', async_mode=None)


def _run_inline(fn, *args):
    fn(*args)


def create_app(config_class=Config, live_source_factory=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS', '*')
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from livequiz.live_source import TikTokLiveSource
    from livequiz.relay import LiveRelay
    from livequiz.services.game import Countdown, GameMachine

    def broadcast(event, payload):
        socketio.emit(event, payload, namespace=NAMESPACE)

    def notify(sid, event, payload):
        socketio.emit(event, payload, to=sid, namespace=NAMESPACE)

    # Tests run the countdown synchronously so emitted events are deterministic
    if flask_app.config.get('TESTING'):
        spawn = _run_inline
    else:
        spawn = socketio.start_background_task

    countdown = Countdown(
        spawn=spawn,
        sleep=socketio.sleep,
        interval=float(flask_app.config.get('TICK_INTERVAL_SEC', 1)),
    )
    machine = GameMachine(
        broadcast,
        countdown=countdown,
        question_duration=int(flask_app.config.get('QUESTION_DURATION_SEC', 10)),
        points_per_answer=int(flask_app.config.get('POINTS_PER_ANSWER', 10)),
        leaderboard_size=int(flask_app.config.get('LEADERBOARD_SIZE', 10)),
        logger=flask_app.logger,
    )
    if live_source_factory is None:
        def live_source_factory():
            return TikTokLiveSource(spawn=socketio.start_background_task)
    relay = LiveRelay(machine, live_source_factory, broadcast, notify, logger=flask_app.logger)

    flask_app.extensions['game'] = machine
    flask_app.extensions['live_relay'] = relay

    from livequiz.routes import main, game
    flask_app.register_blueprint(main)
    flask_app.register_blueprint(game, url_prefix='/api/game')

    # Register Socket.IO event handlers
    from livequiz.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    return flask_app
