"""
Работа с базой данных MongoDB

Этот модуль содержит:
- Описание коллекций и их именованных индексов
- Создание клиента MongoDB
- Получение хранилища, созданного при старте приложения
- Создание уникальных индексов для поиска по ключу
- Преобразование документов MongoDB в записи предметной области
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from recordstore.config import Settings

if TYPE_CHECKING:
    from recordstore.repos.record_store import RecordStore


@dataclass(frozen=True)
class CollectionSchema:
    """Коллекция и уникальный ключ, по которому в ней ищутся записи"""
    name: str
    key_field: str
    index_name: str
    label: str


USERS_LOGIN_INDEX = "users_login"
STREAMS_STREAM_DATE_INDEX = "streams_streamDate"

USERS = CollectionSchema(name="users", key_field="login", index_name=USERS_LOGIN_INDEX, label="User")
STREAMS = CollectionSchema(
    name="streams",
    key_field="streamDate",
    index_name=STREAMS_STREAM_DATE_INDEX,
    label="Stream",
)

COLLECTIONS: tuple[CollectionSchema, ...] = (USERS, STREAMS)


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """
    Создание клиента MongoDB

    Клиент один на процесс и используется всеми операциями хранилища.
    Соединение устанавливается лениво, при первом запросе.

    Args:
        settings: Настройки приложения со строкой подключения
    """
    return AsyncIOMotorClient(settings.mongo_uri)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Создание уникальных именованных индексов по ключевым полям

    Поиск записей идет через эти индексы по имени, а уникальность
    не дает создать две записи с одним ключом.
    """
    for schema in COLLECTIONS:
        await db[schema.name].create_index(schema.key_field, name=schema.index_name, unique=True)


def map_document(doc: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """
    Преобразование документа MongoDB в запись

    Поля документа переносятся как есть, а _id заменяется его строковым
    представлением.

    Args:
        doc: Документ из MongoDB

    Returns:
        Словарь с полями записи и строковым _id
    """
    if doc is None:
        return None
    mapped = {k: v for k, v in doc.items() if k != "_id"}
    mapped["_id"] = str(doc["_id"])
    return mapped


def get_store(request: Request) -> RecordStore:
    """
    Получение хранилища, созданного при старте приложения

    Raises:
        RuntimeError: Если хранилище не инициализировано
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("Record store is not initialized")
    return store
