import random

import pytest

from kniffel.game import engine
from kniffel.game.models import Room
from kniffel.game.registry import RoomRegistry
from kniffel.game.service import GameService
from kniffel.server import create_app


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    CORS_ORIGINS = "*"
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = "threading"
    LOG_LEVEL = "DEBUG"
    MIN_PLAYERS = 2
    MAX_PLAYERS = 6
    ROOM_CODE_LENGTH = 4
    AI_DELAY_EASY_SEC = 0.0
    AI_DELAY_MEDIUM_SEC = 0.0
    AI_DELAY_HARD_SEC = 0.0
    AI_RUN_INLINE = True


class EmitRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, event, data, to=None):
        self.calls.append((event, data, to))

    def named(self, event):
        return [data for name, data, _ in self.calls if name == event]


class TaskRecorder:
    """Collects spawned background tasks so tests decide when they run."""

    def __init__(self):
        self.tasks = []

    def __call__(self, fn, *args):
        self.tasks.append((fn, args))

    def run(self, index):
        fn, args = self.tasks[index]
        fn(*args)


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def make_room():
    def _make(*names, min_players=2, max_players=6, start=False):
        room = Room(code="TEST", min_players=min_players, max_players=max_players)
        for i, name in enumerate(names):
            engine.add_player(room, f"p{i}", name)
        if start:
            engine.start_game(room, "p0", random.Random(0))
        return room

    return _make


@pytest.fixture()
def emitted():
    return EmitRecorder()


@pytest.fixture()
def service(emitted, rng):
    registry = RoomRegistry(rng=random.Random(99))
    return GameService(registry, emit=emitted, ai_inline=True, rng=rng)


@pytest.fixture()
def deferred_service(emitted, rng):
    tasks = TaskRecorder()
    registry = RoomRegistry(rng=random.Random(99))
    svc = GameService(registry, emit=emitted, spawn=tasks, ai_inline=False, rng=rng)
    return svc, tasks


@pytest.fixture()
def flask_app():
    application, _ = create_app(TestConfig)
    yield application


@pytest.fixture()
def socketio_server(flask_app):
    return flask_app.extensions["socketio"]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app, socketio_server):
    clients = []

    def _connect():
        test_client = socketio_server.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect

    for c in clients:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass
