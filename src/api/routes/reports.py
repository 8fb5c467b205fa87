"""Report and incident submission endpoints."""

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_incident_store, get_report_store
from src.domains.density.models import IncidentSubmission, ReportSubmission
from src.domains.density.store import ReportStore, SqlIncidentStore

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1", tags=["reports"])


@router.post("/reports")
async def submit_report(
    report: ReportSubmission,
    store: ReportStore = Depends(get_report_store),  # noqa: B008
):
    try:
        await store.insert(report, created_at=datetime.now(UTC))
    except Exception:
        logger.error("report_insert_failed", place_id=report.place_id, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "insert_failed", "message": "Report could not be stored"},
        )

    logger.info(
        "report_recorded",
        place_id=report.place_id,
        level=report.level.value,
        source=report.source,
        has_coordinates=report.lat is not None and report.lng is not None,
    )
    return {"ok": True}


@router.post("/incidents")
async def submit_incident(
    incident: IncidentSubmission,
    store: SqlIncidentStore = Depends(get_incident_store),  # noqa: B008
) -> dict:
    try:
        incident_id = await store.insert(incident, created_at=datetime.now(UTC))
    except Exception:
        logger.error("incident_insert_failed", place_id=incident.place_id, exc_info=True)
        return {"ok": False, "id": None}
    return {"ok": True, "id": incident_id}
