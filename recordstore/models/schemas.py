"""
Схемы данных хранилища

Записи пользователей и стримов непрозрачны для хранилища: оно знает только
уникальный ключ и _id, остальные поля сохраняются как есть.
"""

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# ЗАПИСИ ПРЕДМЕТНОЙ ОБЛАСТИ
# ============================================================================

class StoredRecord(BaseModel):
    """Базовая запись с идентификатором, который назначает база данных"""
    # Поля заполняются только по алиасам: "id" в данных записи это обычное
    # поле предметной области, а не _id документа
    model_config = ConfigDict(extra="allow")

    record_id: Optional[str] = Field(
        default=None,
        alias="_id",
        description="Идентификатор документа (нет до первого сохранения)"
    )

    def to_document(self) -> dict[str, Any]:
        """Данные записи для сохранения в MongoDB, без _id"""
        document = self.model_dump(by_alias=True)
        document.pop("_id", None)
        return document


class User(StoredRecord):
    """Профиль пользователя"""

    login: str = Field(min_length=1, description="Уникальный логин")


class Stream(StoredRecord):
    """Запись о стрим-сессии"""

    stream_date: str = Field(
        alias="streamDate",
        min_length=1,
        description="Дата стрима, уникальный ключ"
    )


# ============================================================================
# СЛУЖЕБНЫЕ МОДЕЛИ
# ============================================================================

class HealthResponse(BaseModel):
    """Ответ health check"""
    model_config = ConfigDict(extra="forbid")

    status: str
    time: str


class ReadyResponse(BaseModel):
    """Готовность сервиса (доступна ли база данных)"""
    model_config = ConfigDict(extra="forbid")

    ready: bool
    time: str
