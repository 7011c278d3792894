"""Настройки сервера из переменных окружения (и файла .env, если он есть)."""
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Поле настроек -> переменная окружения
ENV_VARS = {
    "host": "HOST",
    "port": "PORT",
    "cors_origin": "CORS_ORIGIN",
    "log_level": "LOG_LEVEL",
}


class Settings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origin: str = "http://localhost:5173"  # Откуда разрешено подключаться браузеру
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        load_dotenv()
        environ = os.environ
    values = {field: environ[name] for field, name in ENV_VARS.items() if name in environ}
    return Settings(**values)
