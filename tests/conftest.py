import pytest

from chatroom.hub import ChatHub


class RecordingServer:
    """Заглушка socketio.Server: запоминает обработчики и отправки."""

    def __init__(self):
        self.handlers = {}
        self.emitted = []

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    def emit(self, event, data=None, to=None, **kwargs):
        self.emitted.append((event, data, to))

    def received(self, sid, event=None):
        return [(e, d) for e, d, to in self.emitted if to == sid and (event is None or e == event)]

    def payloads(self, sid, event):
        return [d for e, d in self.received(sid, event)]

    def clear(self):
        self.emitted.clear()


class RecordingClient:
    """Заглушка socketio.Client."""

    def __init__(self, sid="client-sid"):
        self.sid = sid
        self.handlers = {}
        self.emitted = []
        self.connected_to = None

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    def emit(self, event, data=None, **kwargs):
        self.emitted.append((event, data))

    def connect(self, url):
        self.connected_to = url
        self.handlers["connect"]()

    def disconnect(self):
        self.handlers["disconnect"]()

    def trigger(self, event, *args):
        return self.handlers[event](*args)


@pytest.fixture
def server():
    return RecordingServer()


@pytest.fixture
def hub(server):
    return ChatHub(server)


@pytest.fixture
def client_sio():
    return RecordingClient()


@pytest.fixture
def join(hub, server):
    """Подключает SID и выполняет join."""

    def _join(sid, username):
        hub.on_connect(sid, {})
        hub.on_join(sid, {"username": username})

    return _join
