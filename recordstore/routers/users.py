"""
Роутер для работы с профилями пользователей
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from recordstore.models import StoreResult, User
from recordstore.db.mongo import get_store
from recordstore.repos.record_store import RecordStore
from recordstore.utils.errors import DatabaseError, RecordNotFoundError


router = APIRouter()


def unwrap_or_http(result: StoreResult):
    """
    Значение результата или HTTP ошибка

    Raises:
        HTTPException: 404 если запись не найдена, 503 если база недоступна
    """
    try:
        return result.unwrap()
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DatabaseError as e:
        raise HTTPException(status_code=503, detail=f"Database unavailable: {e}")


@router.get("/{login}", response_model=User)
async def get_user(login: str, store: RecordStore = Depends(get_store)) -> User:
    """
    Получить пользователя по login

    Raises:
        HTTPException: Если пользователь не найден или база недоступна
    """
    return unwrap_or_http(await store.lookup_user(login))


@router.put("", response_model=User)
async def save_user(user: User, store: RecordStore = Depends(get_store)) -> User:
    """
    Создать или обновить пользователя

    Если у пользователя есть _id или в базе уже есть запись с таким login,
    запись обновляется, иначе создается новая.
    """
    return unwrap_or_http(await store.upsert_user(user))
