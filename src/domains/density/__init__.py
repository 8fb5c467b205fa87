"""Crowd density scoring domain."""

from .classification import classify_coarse, classify_fine, majority_level, parse_level
from .config import DensityConfig, default_config
from .geo import haversine_m
from .models import (
    DensityLevel,
    Place,
    ReportSubmission,
    ScoreResult,
    StoredReport,
)
from .scorer import DensityScorer
from .store import ReportStore, SqlIncidentStore, SqlReportStore

__all__ = [
    "DensityConfig",
    "DensityLevel",
    "DensityScorer",
    "Place",
    "ReportStore",
    "ReportSubmission",
    "ScoreResult",
    "SqlIncidentStore",
    "SqlReportStore",
    "StoredReport",
    "classify_coarse",
    "classify_fine",
    "default_config",
    "haversine_m",
    "majority_level",
    "parse_level",
]
