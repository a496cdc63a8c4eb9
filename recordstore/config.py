"""
Конфигурация хранилища записей пользователей и стримов

Этот файл содержит все настройки приложения:
- Подключение к базе данных MongoDB
- Настройки сервера
- Уровень логирования

СЕКРЕТНЫЕ ДАННЫЕ (строка подключения к MongoDB) хранятся в файле .env
"""

from __future__ import annotations

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from recordstore.utils.errors import ConfigurationError


DEFAULT_MONGO_URI = "mongodb://localhost:27017"


class Settings(BaseSettings):
    """
    Настройки приложения

    Все значения читаются из переменных окружения или файла .env
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Настройки приложения
    app_env: str = Field(default="development", alias="APP_ENV")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def port(self) -> int:
        """Порт для запуска приложения (приоритет: PORT > APP_PORT > 8000)"""
        return int(os.getenv("PORT", os.getenv("APP_PORT", self.app_port)))

    # Настройки MongoDB (строка подключения содержит учетные данные)
    mongo_uri: str = Field(default=DEFAULT_MONGO_URI, alias="MONGO_URI")
    mongo_db: str = Field(default="stream_records", alias="MONGO_DB")

    def validate_required(self) -> None:
        """Валидация обязательных настроек"""
        errors = []

        if not self.mongo_uri:
            errors.append("MONGO_URI is required")
        elif self.mongo_uri == DEFAULT_MONGO_URI and self.app_env == "production":
            errors.append("MONGO_URI must be set for production")
        if not self.mongo_db:
            errors.append("MONGO_DB is required")

        if errors:
            raise ConfigurationError("Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Получение настроек (кэшируется для производительности)

    Returns:
        Объект Settings с настройками приложения
    """
    return Settings()  # type: ignore[call-arg]
