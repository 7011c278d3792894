from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def now_iso() -> str:
    """Текущее время в UTC в формате ISO 8601 с миллисекундами."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str                                             # Идентификатор подключения (Socket.IO SID)
    username: str                                       # Имя пользователя, может повторяться
    joined_at: str = Field(default_factory=now_iso, alias="joinedAt")  # Время входа в чат
    is_online: bool = Field(default=True, alias="isOnline")            # Всегда True, пока пользователь в чате

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
