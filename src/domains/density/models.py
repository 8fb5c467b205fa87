"""Pydantic models for the crowd density domain."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

UNKNOWN_LABEL = "unknown"

# --- Enums ---


class DensityLevel(StrEnum):
    LOW = "low"
    MED = "med"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def weight(self) -> int:
        return LEVEL_WEIGHTS[self]


LEVEL_WEIGHTS: dict[DensityLevel, int] = {
    DensityLevel.LOW: 1,
    DensityLevel.MED: 2,
    DensityLevel.HIGH: 3,
    DensityLevel.CRITICAL: 4,
}


# --- Stored data ---


class StoredReport(BaseModel):
    """A report row as read back from the report store.

    ``level`` is kept as the raw stored label so that rows carrying labels
    the engine does not understand can be skipped instead of failing.
    """

    model_config = {"frozen": True}

    place_id: str
    level: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # Some backends drop the offset on read; stored times are always UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class Place(BaseModel):
    id: str = Field(min_length=1, max_length=256)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("place id must not be blank")
        return v


# --- Request Models ---


class ReportSubmission(BaseModel):
    place_id: str = Field(min_length=1, max_length=256)
    level: DensityLevel
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    source: str = "user"

    @field_validator("place_id")
    @classmethod
    def _strip_place_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("place_id must not be blank")
        return v

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "medium":
                return DensityLevel.MED
        return v

    @field_validator("source")
    @classmethod
    def _truncate_source(cls, v: str) -> str:
        return (v.strip() or "user")[:32]


class BulkDensityRequest(BaseModel):
    places: list[Place] = Field(default_factory=list)


class IncidentSubmission(BaseModel):
    place_id: str = Field(min_length=1, max_length=256)
    type: str = Field(min_length=1, max_length=64)
    note: str | None = Field(default=None, max_length=1000)

    @field_validator("place_id", "type")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


# --- Scoring Output Models ---


class ScoreResult(BaseModel):
    place_id: str
    # None means no usable signal ("unknown"); only the single scorer emits it
    level: DensityLevel | None
    sample_count: int = Field(ge=0)

    @property
    def label(self) -> str:
        return self.level.value if self.level is not None else UNKNOWN_LABEL

    def to_response(self) -> dict:
        return {"level": self.label, "sample": self.sample_count}
