"""
Хранилище записей пользователей и стримов

Две коллекции MongoDB, в каждой запись ищется по уникальному ключу через
именованный индекс:
- users: по login (индекс users_login)
- streams: по streamDate (индекс streams_streamDate)

Ошибки базы данных не пробрасываются вызывающему коду: они пишутся в лог,
а операция возвращает StoreResult со статусом failed (или None для методов
get_*/save_*).
"""

from __future__ import annotations

import logging
from typing import Optional, TypeVar

from bson import ObjectId
from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from recordstore.config import Settings
from recordstore.db.mongo import (
    STREAMS,
    USERS,
    CollectionSchema,
    create_client,
    ensure_indexes,
    map_document,
)
from recordstore.models import Stream, StoredRecord, StoreResult, User

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=StoredRecord)

# Ошибки драйвера, ошибки BSON (неверный _id, значение, которое нельзя
# закодировать, слишком большое целое) и документ, который не читается как запись
_DATABASE_ERRORS = (PyMongoError, BSONError, OverflowError, ValidationError)


class RecordStore:
    """Хранилище записей пользователей и стримов"""

    def __init__(self, db: AsyncIOMotorDatabase, client: Optional[AsyncIOMotorClient] = None) -> None:
        self._db = db
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecordStore":
        """
        Создать хранилище с собственным клиентом MongoDB

        Индексы не создаются: перед первым запросом нужно вызвать
        ensure_indexes(), иначе поиск по ключу (он идет через hint по имени
        индекса) завершится ошибкой базы данных.

        Args:
            settings: Настройки со строкой подключения (MONGO_URI) и именем базы
        """
        client = create_client(settings)
        return cls(client[settings.mongo_db], client=client)

    async def ensure_indexes(self) -> None:
        """Создать индексы, через которые идет поиск по ключу"""
        await ensure_indexes(self._db)

    async def ping(self) -> bool:
        """Проверить доступность базы данных"""
        try:
            await self._db.command("ping")
        except PyMongoError as e:
            logger.error(f"RecordStore:ping - {e}")
            return False
        return True

    def close(self) -> None:
        """Закрыть клиент MongoDB, если хранилище его создало"""
        if self._client is not None:
            self._client.close()
        self._client = None

    # ------------------------------------------------------------------
    # Пользователи
    # ------------------------------------------------------------------

    async def get_user(self, login: str) -> Optional[User]:
        """Найти пользователя по login (None, если не найден или ошибка базы)"""
        return (await self.lookup_user(login)).or_none()

    async def save_user(self, user: User) -> Optional[User]:
        """Создать или обновить пользователя (None при ошибке базы)"""
        return (await self.upsert_user(user)).or_none()

    async def lookup_user(self, login: str) -> StoreResult[User]:
        return await self._lookup(USERS, User, login)

    async def upsert_user(self, user: User) -> StoreResult[User]:
        return await self._upsert(USERS, user)

    # ------------------------------------------------------------------
    # Стримы
    # ------------------------------------------------------------------

    async def get_stream(self, stream_date: str) -> Optional[Stream]:
        """Найти стрим по streamDate (None, если не найден или ошибка базы)"""
        return (await self.lookup_stream(stream_date)).or_none()

    async def save_stream(self, stream: Stream) -> Optional[Stream]:
        """Создать или обновить стрим (None при ошибке базы)"""
        return (await self.upsert_stream(stream)).or_none()

    async def lookup_stream(self, stream_date: str) -> StoreResult[Stream]:
        return await self._lookup(STREAMS, Stream, stream_date)

    async def upsert_stream(self, stream: Stream) -> StoreResult[Stream]:
        return await self._upsert(STREAMS, stream)

    # ------------------------------------------------------------------
    # Общая логика
    # ------------------------------------------------------------------

    async def _lookup(
        self,
        schema: CollectionSchema,
        model: type[R],
        key: str,
        context: Optional[str] = None,
    ) -> StoreResult[R]:
        """
        Найти первую запись с данным ключом через именованный индекс

        Args:
            schema: Коллекция и ее ключ
            model: Класс записи
            key: Значение ключа
            context: Метка операции для лога (по умолчанию get<Label>)
        """
        context = context or f"get{schema.label}"
        try:
            doc = await self._db[schema.name].find_one(
                {schema.key_field: key},
                hint=schema.index_name,
            )
            if doc is None:
                return StoreResult.not_found(f"No {schema.name} record with {schema.key_field}={key!r}")
            return StoreResult.ok(model.model_validate(map_document(doc)))
        except _DATABASE_ERRORS as e:
            return self._failed(context, e)

    async def _upsert(self, schema: CollectionSchema, record: R) -> StoreResult[R]:
        """
        Создать или обновить запись по уникальному ключу

        Запись обновляется, если у нее уже есть _id или в коллекции есть
        запись с тем же ключом. Иначе создается новая. Если проверка
        существования не удалась, запись не сохраняется.
        """
        model = type(record)
        payload = record.to_document()
        key = payload[schema.key_field]

        existing = await self._lookup(schema, model, key, context=f"save{schema.label} - Lookup")
        if existing.is_failed:
            return StoreResult.failed(existing.reason or "Existence check failed")

        if record.record_id or existing.is_ok:
            target_id = record.record_id or existing.value.record_id  # type: ignore[union-attr]
            return await self._replace(schema, model, target_id, payload)
        return await self._create(schema, model, key, payload)

    async def _replace(
        self,
        schema: CollectionSchema,
        model: type[R],
        target_id: str,
        payload: dict,
    ) -> StoreResult[R]:
        """Заменить данные документа с заданным _id"""
        context = f"save{schema.label} - Update"
        try:
            doc = await self._db[schema.name].find_one_and_replace(
                {"_id": ObjectId(target_id)},
                payload,
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                reason = f"{schema.name} document {target_id} does not exist"
                logger.error(f"RecordStore:{context} - {reason}")
                return StoreResult.failed(reason)
            return StoreResult.ok(model.model_validate(map_document(doc)))
        except _DATABASE_ERRORS as e:
            return self._failed(context, e)

    async def _create(
        self,
        schema: CollectionSchema,
        model: type[R],
        key: str,
        payload: dict,
    ) -> StoreResult[R]:
        """
        Создать документ

        Вставка идет как upsert по уникальному ключу, поэтому два
        одновременных первых сохранения попадут в один документ.
        """
        context = f"save{schema.label} - Create"
        try:
            doc = await self._db[schema.name].find_one_and_replace(
                {schema.key_field: key},
                payload,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
            return StoreResult.ok(model.model_validate(map_document(doc)))
        except _DATABASE_ERRORS as e:
            return self._failed(context, e)

    @staticmethod
    def _failed(context: str, error: Exception) -> StoreResult:
        logger.error(f"RecordStore:{context} - {error}")
        return StoreResult.failed(f"{context}: {error}")
