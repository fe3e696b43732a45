"""History endpoint: list saved audio analyses."""

from __future__ import annotations

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_record_store
from src.api.models import HistoryResponse
from src.storage.records import RecordStore

router = APIRouter()


@router.get("/api/history", response_model=HistoryResponse)
async def list_history(
    store: Annotated[RecordStore, Depends(get_record_store)],
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> HistoryResponse:
    """List saved analyses ordered by creation date (newest first)."""
    rows = await asyncio.to_thread(store.list_recent, limit)
    return HistoryResponse(data=rows)
