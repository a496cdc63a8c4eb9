"""
Модели данных хранилища записей

Записи пользователей и стримов, а также результат операций хранилища.
"""

from recordstore.models.schemas import (
    StoredRecord,
    User,
    Stream,
    HealthResponse,
    ReadyResponse,
)

from recordstore.models.results import (
    StoreResult,
    StoreStatus,
)

__all__ = [
    "StoredRecord",
    "User",
    "Stream",
    "HealthResponse",
    "ReadyResponse",
    "StoreResult",
    "StoreStatus",
]
