"""Time decay of report influence for the single-place scorer."""

from collections.abc import Iterable
from datetime import datetime

from .classification import parse_level
from .config import DecaySettings
from .models import StoredReport


def age_minutes(created_at: datetime, now: datetime) -> float:
    """Age of a report in minutes; reports stamped in the future count as age 0."""
    return max(0.0, (now - created_at).total_seconds() / 60.0)


def decay_multiplier(age_min: float, settings: DecaySettings | None = None) -> float:
    """Linear decay from 1.0 at age 0 down to the floor at the decay window.

    The result is always in [floor, 1.0] and never increases with age.
    """
    cfg = settings or DecaySettings()
    age_min = max(0.0, age_min)
    return max(cfg.floor, 1.0 - age_min / cfg.window_minutes)


def decayed_average(
    reports: Iterable[StoredReport],
    now: datetime,
    settings: DecaySettings | None = None,
) -> float | None:
    """Decay-weighted mean of level weights.

    Rows with unmapped labels add nothing to either the numerator or the
    denominator. Returns None when no row carries a usable label.
    """
    total = 0.0
    multiplier_sum = 0.0
    for report in reports:
        level = parse_level(report.level)
        if level is None:
            continue
        multiplier = decay_multiplier(age_minutes(report.created_at, now), settings)
        total += level.weight * multiplier
        multiplier_sum += multiplier

    if multiplier_sum <= 0:
        return None
    return total / multiplier_sum
