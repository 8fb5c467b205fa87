"""Mapping between density labels, numeric scores and classification ladders."""

import math
from collections import Counter
from collections.abc import Iterable

from .config import CoarseLadder, FineThresholds
from .models import LEVEL_WEIGHTS, DensityLevel

_LEVEL_BY_WEIGHT: dict[int, DensityLevel] = {w: lvl for lvl, w in LEVEL_WEIGHTS.items()}

# Labels seen in stored data that mean the same as a canonical level
_ALIASES: dict[str, DensityLevel] = {"medium": DensityLevel.MED}


def parse_level(raw: object) -> DensityLevel | None:
    """Parse a stored label. Returns None for anything unmapped."""
    if not isinstance(raw, str):
        return None
    key = raw.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return DensityLevel(key)
    except ValueError:
        return None


def level_weight(level: DensityLevel) -> int:
    return LEVEL_WEIGHTS[level]


def level_from_weight(weight: int) -> DensityLevel:
    return _LEVEL_BY_WEIGHT[weight]


def classify_fine(avg: float, thresholds: FineThresholds | None = None) -> DensityLevel:
    """Map a decayed average to a label using the threshold ladder."""
    t = thresholds or FineThresholds()
    if avg >= t.critical:
        return DensityLevel.CRITICAL
    if avg >= t.high:
        return DensityLevel.HIGH
    if avg >= t.med:
        return DensityLevel.MED
    return DensityLevel.LOW


def classify_coarse(avg: float, ladder: CoarseLadder | None = None) -> DensityLevel:
    """Map a neighborhood average to a label by rounding half-up and clamping."""
    lad = ladder or CoarseLadder()
    score = math.floor(avg + 0.5)
    score = max(lad.min_score, min(lad.max_score, score))
    return _LEVEL_BY_WEIGHT[score]


def majority_level(levels: Iterable[DensityLevel]) -> DensityLevel | None:
    """Most frequent level; on a tie the level seen first wins.

    Severity plays no part in tie-breaking: two "med" followed by two "high"
    yields "med".
    """
    counts: Counter[DensityLevel] = Counter()
    for level in levels:
        counts[level] += 1
    if not counts:
        return None
    # Counter preserves first-insertion order and max() keeps the first maximum
    return max(counts, key=lambda lvl: counts[lvl])
