"""
Роутер для работы с записями о стримах
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from recordstore.models import Stream
from recordstore.db.mongo import get_store
from recordstore.repos.record_store import RecordStore
from recordstore.routers.users import unwrap_or_http


router = APIRouter()


@router.get("/{stream_date}", response_model=Stream)
async def get_stream(stream_date: str, store: RecordStore = Depends(get_store)) -> Stream:
    """Получить стрим по дате"""
    return unwrap_or_http(await store.lookup_stream(stream_date))


@router.put("", response_model=Stream)
async def save_stream(stream: Stream, store: RecordStore = Depends(get_store)) -> Stream:
    """Создать или обновить стрим по streamDate"""
    return unwrap_or_http(await store.upsert_stream(stream))
