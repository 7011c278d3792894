import sys

import eventlet
from eventlet import wsgi
import socketio
from loguru import logger

from chatroom.config import Settings, load_settings
from chatroom.hub import ChatHub


def create_app(settings: Settings, async_mode: str = "eventlet"):
    # async_handlers=False: события одного подключения обрабатываются по порядку
    sio = socketio.Server(
        cors_allowed_origins=settings.cors_origin,
        async_mode=async_mode,
        async_handlers=False,
    )
    hub = ChatHub(sio)
    app = socketio.WSGIApp(sio)
    return sio, app, hub


def main():
    settings = load_settings()
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    _, app, _ = create_app(settings)
    logger.info(f"Запуск сервера на http://{settings.host}:{settings.port}")
    wsgi.server(eventlet.listen((settings.host, settings.port)), app, log_output=False)


if __name__ == '__main__':
    main()
