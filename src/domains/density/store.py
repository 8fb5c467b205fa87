"""Report store interface and its SQLAlchemy implementation.

The scorers depend only on ``ReportStore``; any backend that can insert a
report and return reports for a set of places newer than a cutoff will do.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection
from datetime import datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.models import Incident as IncidentDB
from src.db.models import Report as ReportDB

from .models import IncidentSubmission, ReportSubmission, StoredReport

logger = structlog.get_logger()


class ReportStore(ABC):
    """Durable, append-only storage of density reports."""

    @abstractmethod
    async def insert(self, report: ReportSubmission, created_at: datetime) -> None:
        ...

    @abstractmethod
    async def query(self, place_ids: Collection[str], since: datetime) -> list[StoredReport]:
        """Return reports for ``place_ids`` with ``created_at`` strictly after ``since``.

        Rows come back oldest first; the bulk scorer's tie-break relies on a
        stable order.
        """
        ...


class SqlReportStore(ReportStore):
    """ReportStore backed by the ``reports`` table.

    Every call opens its own session so that independent reads can run
    concurrently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, report: ReportSubmission, created_at: datetime) -> None:
        async with self._session_factory() as session:
            session.add(
                ReportDB(
                    place_id=report.place_id,
                    level=report.level.value,
                    lat=report.lat,
                    lng=report.lng,
                    source=report.source,
                    created_at=created_at,
                )
            )
            await session.commit()

    async def query(self, place_ids: Collection[str], since: datetime) -> list[StoredReport]:
        ids = list(dict.fromkeys(place_ids))
        if not ids:
            return []

        stmt = (
            select(ReportDB.place_id, ReportDB.level, ReportDB.created_at)
            .where(ReportDB.place_id.in_(ids), ReportDB.created_at > since)
            .order_by(ReportDB.created_at.asc(), ReportDB.id.asc())
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.all()

        return [
            StoredReport(place_id=row.place_id, level=row.level, created_at=row.created_at)
            for row in rows
        ]


class SqlIncidentStore:
    """Incident flags attached to places, stored in the ``incidents`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, incident: IncidentSubmission, created_at: datetime) -> int:
        async with self._session_factory() as session:
            row = IncidentDB(
                place_id=incident.place_id,
                incident_type=incident.type,
                note=incident.note,
                created_at=created_at,
            )
            session.add(row)
            await session.commit()
            logger.info("incident_recorded", place_id=incident.place_id, incident_id=row.id)
            return row.id
