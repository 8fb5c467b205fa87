"""Unit tests for the SQLAlchemy-backed report and incident stores."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.db.models import Incident as IncidentDB
from src.db.models import Report as ReportDB
from src.domains.density.models import DensityLevel, IncidentSubmission, ReportSubmission
from src.domains.density.store import SqlIncidentStore, SqlReportStore
from tests.conftest import NOW


def _mock_session_factory(rows: list | None = None):
    session = AsyncMock()
    session.add = MagicMock()
    session.commit = AsyncMock()

    mock_result = MagicMock()
    mock_result.all.return_value = rows or []
    session.execute = AsyncMock(return_value=mock_result)

    factory = MagicMock()
    factory.return_value.__aenter__.return_value = session
    return factory, session


class TestSqlReportStoreQuery:
    @pytest.mark.asyncio
    async def test_maps_rows_to_stored_reports(self):
        rows = [
            SimpleNamespace(place_id="p1", level="high", created_at=NOW),
            SimpleNamespace(place_id="p2", level="weird", created_at=NOW),
        ]
        factory, _ = _mock_session_factory(rows)

        reports = await SqlReportStore(factory).query(["p1", "p2"], NOW)

        assert [(r.place_id, r.level) for r in reports] == [("p1", "high"), ("p2", "weird")]

    @pytest.mark.asyncio
    async def test_empty_id_set_skips_database(self):
        factory, session = _mock_session_factory()
        assert await SqlReportStore(factory).query([], NOW) == []
        session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_filters_and_orders(self):
        factory, session = _mock_session_factory()
        await SqlReportStore(factory).query(["p1", "p1", "p2"], NOW)

        stmt = session.execute.call_args.args[0]
        sql = str(stmt)
        assert "reports.place_id IN" in sql
        assert "reports.created_at >" in sql
        assert "ORDER BY reports.created_at ASC, reports.id ASC" in sql

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        factory, session = _mock_session_factory()
        session.execute.side_effect = ConnectionError("db down")
        with pytest.raises(ConnectionError):
            await SqlReportStore(factory).query(["p1"], NOW)


class TestSqlReportStoreInsert:
    @pytest.mark.asyncio
    async def test_insert_persists_row(self):
        factory, session = _mock_session_factory()
        submission = ReportSubmission(place_id="p1", level="medium", lat=1.5, lng=2.5)

        await SqlReportStore(factory).insert(submission, created_at=NOW)

        row = session.add.call_args.args[0]
        assert isinstance(row, ReportDB)
        assert row.place_id == "p1"
        assert row.level == DensityLevel.MED.value
        assert (row.lat, row.lng) == (1.5, 2.5)
        assert row.source == "user"
        assert row.created_at == NOW
        session.commit.assert_awaited_once()


class TestSqlIncidentStore:
    @pytest.mark.asyncio
    async def test_insert_persists_row(self):
        factory, session = _mock_session_factory()
        incident = IncidentSubmission(place_id="p1", type="blocked_exit", note="north door")

        await SqlIncidentStore(factory).insert(incident, created_at=NOW)

        row = session.add.call_args.args[0]
        assert isinstance(row, IncidentDB)
        assert row.incident_type == "blocked_exit"
        assert row.note == "north door"
        session.commit.assert_awaited_once()
