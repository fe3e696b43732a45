"""Supabase storage for persisted analysis records."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol, cast

from postgrest import CountMethod
from supabase import Client, create_client

from src.analysis.errors import PersistenceFaultError
from src.analysis.models import AnalysisRecord

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def insert(self, record: AnalysisRecord) -> str: ...

    def count_where(
        self,
        equals: dict[str, Any] | None = None,
        created_after: datetime | None = None,
    ) -> int: ...

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]: ...


def get_supabase_client(url: str, key: str) -> Client:
    """Create and return a Supabase client."""
    return create_client(url, key)


class SupabaseRecordStore:
    """Analysis records kept in a single Supabase table.

    Every client or PostgREST failure is reported as PersistenceFaultError.
    """

    def __init__(self, client: Client, table: str = "audio_analyses") -> None:
        self.client = client
        self.table = table

    def insert(self, record: AnalysisRecord) -> str:
        """Store *record* and return the generated ID (also set on the record)."""
        try:
            result = (
                self.client.table(self.table)
                .insert(
                    {
                        "kind": record.kind,
                        "transcript": record.transcript,
                        "analysis": record.analysis,
                        "client_ip": record.client_ip,
                        "created_at": record.created_at.isoformat(),
                    }
                )
                .execute()
            )
            rows = cast(list[dict[str, Any]], result.data)
            record_id = str(rows[0]["id"])
        except Exception as exc:
            raise PersistenceFaultError("Error saving to the database", details=str(exc)) from exc

        record.id = record_id
        logger.info("Stored analysis record %s", record_id)
        return record_id

    def count_where(
        self,
        equals: dict[str, Any] | None = None,
        created_after: datetime | None = None,
    ) -> int:
        """Count rows matching every ``column == value`` pair and the time floor."""
        try:
            query = self.client.table(self.table).select("id", count=CountMethod.exact)
            for column, value in (equals or {}).items():
                query = query.eq(column, value)
            if created_after is not None:
                query = query.gte("created_at", created_after.isoformat())
            result = query.execute()
        except Exception as exc:
            raise PersistenceFaultError("Error querying the database", details=str(exc)) from exc
        return result.count or 0

    def list_recent(self, limit: int = 50) -> list[dict[str, Any]]:
        """Newest records first."""
        try:
            result = (
                self.client.table(self.table)
                .select("*")
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as exc:
            raise PersistenceFaultError("Error fetching the history", details=str(exc)) from exc
        return cast(list[dict[str, Any]], result.data)
