"""Маршрутизатор событий чата.

Каждый обработчик устроен одинаково: проверить данные, под блокировкой
изменить состояние и собрать, что и кому отправить, а отправлять уже
после снятия блокировки. Отправка может переключить green thread,
поэтому блокировка на время отправки не удерживается.
"""
import threading
from typing import Any, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel, ValidationError

from chatroom.models import JoinPayload, Message, SendMessagePayload, User
from chatroom.state import MAX_HISTORY, ConnectionRegistry, ConnectionSet, MessageLog, TypingSet


class ChatHub:
    def __init__(self, sio, history_size: int = MAX_HISTORY):
        self.registry = ConnectionRegistry()
        self.log = MessageLog(history_size)
        self.typing = TypingSet()
        self.connections = ConnectionSet()
        self._lock = threading.Lock()
        self.register(sio)

    def register(self, sio) -> None:
        """Привязывает обработчики к серверу Socket.IO."""
        self.sio = sio
        sio.on("connect", self.on_connect)
        sio.on("join", self.on_join)
        sio.on("send_message", self.on_send_message)
        sio.on("typing_start", self.on_typing_start)
        sio.on("typing_stop", self.on_typing_stop)
        sio.on("disconnect", self.on_disconnect)

    # Отправка

    def _emit(self, event: str, data: Any, sids: Iterable[str]) -> None:
        for sid in sids:
            self.sio.emit(event, data, to=sid)

    def _users_payload(self) -> List[dict]:
        return [user.to_payload() for user in self.registry.list_all()]

    @staticmethod
    def _parse(model, sid: str, event: str, data: Any) -> Optional[BaseModel]:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Некорректные данные {event} от {sid}: {e.errors()}")
            return None

    # Обработчики событий

    def on_connect(self, sid, environ=None, auth=None):
        with self._lock:
            self.connections.add(sid)
        logger.info(f"Пользователь {sid} подключился")

    def on_join(self, sid, data=None):
        payload = self._parse(JoinPayload, sid, "join", data)
        if payload is None:
            return

        with self._lock:
            user = self.registry.register(sid, payload.username)
            history = [message.to_payload() for message in self.log.snapshot()]
            users = self._users_payload()
            others = self.connections.others(sid)

        # Новичку - история и список, остальным - уведомление и список
        self._emit("chat_history", history, [sid])
        self._emit("users_update", users, [sid])
        self._emit("user_joined", user.to_payload(), others)
        self._emit("users_update", users, others)
        logger.info(f"Пользователь {user.username} (sid={sid}) вошёл в чат")

    def on_send_message(self, sid, data=None):
        with self._lock:
            user = self.registry.get(sid)
        if not user:
            logger.warning(f"send_message от пользователя без join (sid={sid})")
            return

        payload = self._parse(SendMessagePayload, sid, "send_message", data)
        if payload is None:
            return

        with self._lock:
            # Пользователь мог выйти, пока проверялись данные
            user = self.registry.get(sid)
            if not user:
                return
            message = Message(text=payload.text, username=user.username, user_id=sid)
            self.log.append(message)
            recipients = self.connections.all()

        # Отправителю тоже: клиент узнаёт своё сообщение по userId
        self._emit("receive_message", message.to_payload(), recipients)
        logger.info(f"Сообщение от {user.username}: {message.text}")

    def on_typing_start(self, sid, data=None):
        self._update_typing(sid, typing=True)

    def on_typing_stop(self, sid, data=None):
        self._update_typing(sid, typing=False)

    def _update_typing(self, sid: str, typing: bool) -> None:
        with self._lock:
            user = self.registry.get(sid)
            if not user:
                logger.warning(f"Индикатор набора от пользователя без join (sid={sid})")
                return
            if typing:
                self.typing.start(user.username)
            else:
                self.typing.stop(user.username)
            typing_users = self.typing.list_all()
            others = self.connections.others(sid)

        self._emit("user_typing", typing_users, others)
        logger.debug(f"Печатают: {typing_users}")

    def on_disconnect(self, sid, reason=None):
        with self._lock:
            self.connections.discard(sid)
            user: Optional[User] = self.registry.unregister(sid)
            if not user:
                logger.info(f"Пользователь {sid} отключился, не войдя в чат")
                return
            self.typing.stop(user.username)
            users = self._users_payload()
            typing_users = self.typing.list_all()
            others = self.connections.all()

        self._emit("user_left", user.to_payload(), others)
        self._emit("users_update", users, others)
        self._emit("user_typing", typing_users, others)
        logger.info(f"Пользователь {user.username} (sid={sid}) покинул чат")
