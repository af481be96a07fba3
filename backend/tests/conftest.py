import os
import sys
import pytest

# Ensure the backend root (containing the `livequiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from livequiz import create_app, socketio, NAMESPACE
from livequiz.live_source import Connected, ConnectionFailed
from livequiz.services.game import Countdown, GameMachine


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    QUESTION_DURATION_SEC = 10
    TICK_INTERVAL_SEC = 0
    POINTS_PER_ANSWER = 10
    LEADERBOARD_SIZE = 10


class ManualScheduler:
    """Collects spawned countdown workers so a test decides when they run."""

    def __init__(self):
        self.tasks = []

    def spawn(self, fn, *args):
        self.tasks.append((fn, args))

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for fn, args in tasks:
            fn(*args)


class RecordingBroadcast:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def named(self, name):
        return [payload for event, payload in self.events if event == name]

    def clear(self):
        self.events.clear()


class FakeLiveSource:
    def __init__(self, fail_with=None):
        self.fail_with = fail_with
        self.broadcaster_id = None
        self.on_event = None
        self.disconnected = False

    def connect(self, broadcaster_id, on_event):
        self.broadcaster_id = broadcaster_id
        self.on_event = on_event
        if self.fail_with:
            on_event(ConnectionFailed(self.fail_with))
            return
        on_event(Connected(room_id=f'room-{broadcaster_id}', broadcaster_id=broadcaster_id))

    def push(self, event):
        self.on_event(event)

    def disconnect(self):
        self.disconnected = True


class FakeLiveSourceFactory:
    def __init__(self):
        self.fail_with = None
        self.created = []

    def __call__(self):
        source = FakeLiveSource(fail_with=self.fail_with)
        self.created.append(source)
        return source


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def recorder():
    return RecordingBroadcast()


@pytest.fixture()
def machine(scheduler, recorder):
    countdown = Countdown(spawn=scheduler.spawn, sleep=lambda _: None)
    return GameMachine(recorder, countdown=countdown)


@pytest.fixture()
def live_sources():
    return FakeLiveSourceFactory()


@pytest.fixture()
def flask_app(live_sources):
    application = create_app(TestConfig, live_source_factory=live_sources)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace=NAMESPACE
    )
    yield test_client
    try:
        test_client.disconnect(namespace=NAMESPACE)
    except Exception:
        pass
