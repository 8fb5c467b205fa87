"""Density classification endpoints for the live map."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.dependencies import get_scorer
from src.domains.density.models import BulkDensityRequest
from src.domains.density.scorer import DensityScorer

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/density", tags=["density"])


@router.get("")
async def get_density(
    place_id: str | None = Query(default=None, max_length=256),
    scorer: DensityScorer = Depends(get_scorer),  # noqa: B008
) -> dict:
    """Current label for one place from its time-decayed recent reports."""
    place_id = (place_id or "").strip()
    if not place_id:
        raise HTTPException(status_code=400, detail="Missing place_id")

    result = await scorer.score_place(place_id)
    return result.to_response()


@router.post("/bulk")
async def get_bulk_density(
    request: BulkDensityRequest,
    scorer: DensityScorer = Depends(get_scorer),  # noqa: B008
) -> dict:
    """Labels for a batch of places, smoothed across nearby places."""
    max_places = scorer.config.bulk.max_places
    if len(request.places) > max_places:
        raise HTTPException(
            status_code=400,
            detail=f"Too many places: {len(request.places)} (max {max_places})",
        )
    if not request.places:
        return {}

    results = await scorer.score_bulk(request.places)
    return {place_id: result.to_response() for place_id, result in results.items()}


@router.get("/config")
async def get_density_config(
    scorer: DensityScorer = Depends(get_scorer),  # noqa: B008
) -> dict:
    """Return the windows, radius and thresholds the scorers currently use."""
    return scorer.config.as_dict()
