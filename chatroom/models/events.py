"""Входящие события от клиента.

Каждое событие с данными проверяется своей моделью до того, как попасть
в обработчик. Лишние поля игнорируются: браузерный клиент вместе с именем
присылает joinedAt и isOnline.
"""
from pydantic import BaseModel, Field


class JoinPayload(BaseModel):
    username: str = Field(min_length=1)


class SendMessagePayload(BaseModel):
    text: str  # Пустая строка допустима, как и любой другой текст
