"""Python-клиент чата.

:class:`ChatView` хранит то же локальное состояние, что и браузерный
интерфейс: сообщения, пользователей онлайн, кто печатает и есть ли связь.
С сетью он не работает. :class:`ChatClient` наполняет его событиями
из ``socketio.Client``.
"""
import threading
from typing import List, Optional

import socketio
from loguru import logger

from chatroom.models import Message, User

# Ограничения длины на стороне клиента
MAX_MESSAGE_LENGTH = 500
MAX_USERNAME_LENGTH = 20

# Через сколько секунд без нажатий индикатор набора гаснет сам
TYPING_IDLE_SECONDS = 1.0


class ChatView:
    def __init__(self):
        self.messages: List[Message] = []
        self.users: List[User] = []
        self.typing_users: List[str] = []
        self.connected = False
        self.own_id: Optional[str] = None

    def on_chat_history(self, history):
        self.messages = [Message.model_validate(item) for item in history]

    def on_receive_message(self, data) -> bool:
        """Добавляет сообщение; True, если оно пришло от другого пользователя."""
        message = Message.model_validate(data)
        self.messages.append(message)
        return not self.is_own(message)

    def on_users_update(self, users):
        self.users = [User.model_validate(item) for item in users]

    def on_user_joined(self, data):
        user = User.model_validate(data)
        self.messages.append(Message.system(f"{user.username} joined the chat"))

    def on_user_left(self, data):
        user = User.model_validate(data)
        self.messages.append(Message.system(f"{user.username} left the chat"))

    def on_user_typing(self, usernames):
        self.typing_users = list(usernames)

    def is_own(self, message: Message) -> bool:
        return self.own_id is not None and message.user_id == self.own_id

    def is_system(self, message: Message) -> bool:
        return message.is_system

    def typing_label(self) -> Optional[str]:
        if not self.typing_users:
            return None
        if len(self.typing_users) == 1:
            return f"{self.typing_users[0]} is typing..."
        return f"{len(self.typing_users)} people are typing..."


class ChatClient:
    def __init__(self, url: str, view: Optional[ChatView] = None, sio=None,
                 typing_idle: float = TYPING_IDLE_SECONDS):
        self.url = url
        self.view = view or ChatView()
        self.sio = sio or socketio.Client()
        self.username: Optional[str] = None
        self.typing_idle = typing_idle
        self._typing = False
        self._typing_timer: Optional[threading.Timer] = None
        self._bind()

    def _bind(self):
        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        self.sio.on("chat_history", self.view.on_chat_history)
        self.sio.on("receive_message", self._on_receive_message)
        self.sio.on("users_update", self.view.on_users_update)
        self.sio.on("user_joined", self.view.on_user_joined)
        self.sio.on("user_left", self.view.on_user_left)
        self.sio.on("user_typing", self.view.on_user_typing)

    def _on_connect(self):
        self.view.connected = True
        self.view.own_id = self.sio.sid
        logger.info("Подключение к серверу установлено")

    def _on_disconnect(self, reason=None):
        self.view.connected = False
        self._typing = False
        self._cancel_typing_timer()
        logger.info("Соединение с сервером потеряно")

    def _on_receive_message(self, data):
        if self.view.on_receive_message(data):
            logger.debug(f"Новое сообщение от {data.get('username')}")

    def connect(self):
        self.sio.connect(self.url)

    def close(self):
        self._cancel_typing_timer()
        self.sio.disconnect()
        self.view.connected = False

    def join(self, username: str) -> bool:
        username = username.strip()[:MAX_USERNAME_LENGTH]
        if not username or not self.view.connected:
            return False
        self.username = username
        self.sio.emit("join", {"username": username})
        return True

    def send(self, text: str) -> bool:
        text = text.strip()[:MAX_MESSAGE_LENGTH]
        if not text or not self.view.connected:
            return False
        self.sio.emit("send_message", {"text": text})
        self.typing_stop()
        return True

    def typing_start(self):
        """Вызывается на каждое нажатие; таймер простоя перезапускается."""
        if not self._typing:
            self._typing = True
            self.sio.emit("typing_start")
        self._cancel_typing_timer()
        self._typing_timer = threading.Timer(self.typing_idle, self.typing_stop)
        self._typing_timer.daemon = True
        self._typing_timer.start()

    def typing_stop(self):
        self._cancel_typing_timer()
        if self._typing:
            self._typing = False
            self.sio.emit("typing_stop")

    def _cancel_typing_timer(self):
        timer, self._typing_timer = self._typing_timer, None
        if timer is not None:
            timer.cancel()
