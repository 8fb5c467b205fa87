"""FastAPI dependency providers for the density stores and scorer."""

from fastapi import Depends

from src.db.database import async_session_factory
from src.domains.density.config import default_config
from src.domains.density.scorer import DensityScorer
from src.domains.density.store import ReportStore, SqlIncidentStore, SqlReportStore


def get_report_store() -> ReportStore:
    return SqlReportStore(async_session_factory)


def get_incident_store() -> SqlIncidentStore:
    return SqlIncidentStore(async_session_factory)


def get_scorer(
    store: ReportStore = Depends(get_report_store),  # noqa: B008
) -> DensityScorer:
    return DensityScorer(store, default_config)
