import random
import time

from pydantic import BaseModel, ConfigDict, Field

from chatroom.models.user import now_iso

# Служебный автор для уведомлений о входе и выходе
SYSTEM_USER_ID = "system"
SYSTEM_USERNAME = "System"


def make_message_id() -> float:
    # Миллисекунды плюс случайная добавка: коллизии возможны, но маловероятны
    return time.time() * 1000 + random.random()


class Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: float = Field(default_factory=make_message_id)
    text: str  # Текст сообщения
    username: str  # Имя автора
    user_id: str = Field(alias="userId")  # SID автора или "system"
    timestamp: str = Field(default_factory=now_iso)
    delivered: bool = True  # Подтверждений доставки нет

    @classmethod
    def system(cls, text: str) -> "Message":
        """Служебное сообщение, которое клиент показывает при входе/выходе."""
        return cls(text=text, username=SYSTEM_USERNAME, user_id=SYSTEM_USER_ID)

    @property
    def is_system(self) -> bool:
        return self.user_id == SYSTEM_USER_ID

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
