"""Tests for the Supabase record store (client mocked)."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from postgrest import CountMethod

from src.analysis.errors import PersistenceFaultError
from src.analysis.models import AnalysisRecord
from src.storage.records import SupabaseRecordStore


def _record() -> AnalysisRecord:
    return AnalysisRecord(
        kind="job-interview",
        transcript="Hello.",
        analysis="Strong candidate.",
        client_ip="10.0.0.1",
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    )


class TestInsert:
    def test_inserts_row_and_sets_id(self) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.return_value.data = [{"id": 42}]
        store = SupabaseRecordStore(client, table="audio_analyses")
        record = _record()

        record_id = store.insert(record)

        assert record_id == "42"
        assert record.id == "42"
        client.table.assert_called_with("audio_analyses")
        row = client.table.return_value.insert.call_args.args[0]
        assert row == {
            "kind": "job-interview",
            "transcript": "Hello.",
            "analysis": "Strong candidate.",
            "client_ip": "10.0.0.1",
            "created_at": "2024-05-01T12:00:00+00:00",
        }

    def test_client_error_is_persistence_fault(self) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.side_effect = RuntimeError(
            'relation "audio_analyses" does not exist'
        )
        record = _record()

        with pytest.raises(PersistenceFaultError) as info:
            SupabaseRecordStore(client).insert(record)

        assert "does not exist" in (info.value.details or "")
        assert record.id is None

    def test_empty_response_is_persistence_fault(self) -> None:
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.return_value.data = []
        with pytest.raises(PersistenceFaultError):
            SupabaseRecordStore(client).insert(_record())


class TestCountWhere:
    def test_filters_by_column_and_time(self) -> None:
        client = MagicMock()
        query = client.table.return_value.select.return_value
        query.eq.return_value = query
        query.gte.return_value = query
        query.execute.return_value.count = 7
        since = datetime(2024, 5, 1, 11, 0, tzinfo=UTC)

        count = SupabaseRecordStore(client).count_where(
            equals={"client_ip": "10.0.0.1"}, created_after=since
        )

        assert count == 7
        client.table.return_value.select.assert_called_once_with("id", count=CountMethod.exact)
        query.eq.assert_called_once_with("client_ip", "10.0.0.1")
        query.gte.assert_called_once_with("created_at", "2024-05-01T11:00:00+00:00")

    def test_missing_count_is_zero(self) -> None:
        client = MagicMock()
        client.table.return_value.select.return_value.execute.return_value.count = None
        assert SupabaseRecordStore(client).count_where() == 0

    def test_error_is_persistence_fault(self) -> None:
        client = MagicMock()
        client.table.side_effect = RuntimeError("network down")
        with pytest.raises(PersistenceFaultError):
            SupabaseRecordStore(client).count_where(equals={"client_ip": "x"})


class TestListRecent:
    def test_newest_first_with_limit(self) -> None:
        client = MagicMock()
        rows = [{"id": 2}, {"id": 1}]
        chain = client.table.return_value.select.return_value.order.return_value.limit
        chain.return_value.execute.return_value.data = rows

        assert SupabaseRecordStore(client).list_recent(limit=5) == rows
        client.table.return_value.select.assert_called_once_with("*")
        client.table.return_value.select.return_value.order.assert_called_once_with(
            "created_at", desc=True
        )
        chain.assert_called_once_with(5)

    def test_error_is_persistence_fault(self) -> None:
        client = MagicMock()
        client.table.return_value.select.side_effect = RuntimeError("timeout")
        with pytest.raises(PersistenceFaultError) as info:
            SupabaseRecordStore(client).list_recent()
        assert info.value.message == "Error fetching the history"
