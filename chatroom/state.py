"""Состояние комнаты в памяти: кто онлайн, последние сообщения и кто печатает.

Сами структуры ничего не блокируют. Ими владеет
:class:`chatroom.hub.ChatHub`, он и упорядочивает все изменения.
"""
from collections import deque
from typing import Deque, Dict, List, Optional

from loguru import logger

from chatroom.models import Message, User

# Сколько последних сообщений получает новый участник
MAX_HISTORY = 100


class ConnectionRegistry:
    """Пользователи, прошедшие join, по SID подключения."""

    def __init__(self):
        self._users: Dict[str, User] = {}

    def register(self, connection_id: str, username: str) -> User:
        user = User(id=connection_id, username=username)
        if connection_id in self._users:
            logger.debug(f"Повторный join, запись перезаписана (SID={connection_id})")
        self._users[connection_id] = user
        logger.debug(f"Пользователь добавлен: {username} (SID={connection_id})")
        return user

    def unregister(self, connection_id: str) -> Optional[User]:
        user = self._users.pop(connection_id, None)
        if user:
            logger.debug(f"Пользователь удалён: {user.username} (SID={connection_id})")
        return user

    def get(self, connection_id: str) -> Optional[User]:
        return self._users.get(connection_id)

    def list_all(self) -> List[User]:
        return list(self._users.values())

    def __len__(self):
        return len(self._users)

    def __contains__(self, connection_id):
        return connection_id in self._users


class MessageLog:
    """Ограниченный буфер сообщений; старые вытесняются с головы."""

    def __init__(self, capacity: int = MAX_HISTORY):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._messages: Deque[Message] = deque(maxlen=capacity)

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def snapshot(self) -> List[Message]:
        return list(self._messages)

    def __len__(self):
        return len(self._messages)


class TypingSet:
    # Ключ - имя пользователя, а не SID: одинаковые имена делят одну запись
    def __init__(self):
        self._usernames: Dict[str, None] = {}

    def start(self, username: str) -> None:
        self._usernames[username] = None

    def stop(self, username: str) -> None:
        self._usernames.pop(username, None)

    def list_all(self) -> List[str]:
        return list(self._usernames)

    def __contains__(self, username):
        return username in self._usernames


class ConnectionSet:
    """Все открытые подключения, включая ещё не вошедшие в чат."""

    def __init__(self):
        self._sids: Dict[str, None] = {}

    def add(self, sid: str) -> None:
        self._sids[sid] = None

    def discard(self, sid: str) -> None:
        self._sids.pop(sid, None)

    def all(self) -> List[str]:
        return list(self._sids)

    def others(self, sid: str) -> List[str]:
        return [other for other in self._sids if other != sid]

    def __len__(self):
        return len(self._sids)

    def __contains__(self, sid):
        return sid in self._sids
