"""Spatial smoothing of recent density signals across nearby places.

Each place's own recent reports are reduced to a majority level ("current
score"). Every place in the batch, with or without its own signal, is then
labelled from the mean current score of all scored places within the
neighbor radius. Places with no scored neighbor are labelled low.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .classification import classify_coarse, majority_level, parse_level
from .config import CoarseLadder
from .geo import haversine_m
from .models import DensityLevel, Place, ScoreResult, StoredReport


@dataclass(frozen=True)
class PlaceSignal:
    """A place's own recent signal."""

    sample_count: int
    score: int | None


def current_signals(rows: Iterable[StoredReport]) -> dict[str, PlaceSignal]:
    """Group rows by place and reduce each group to its majority level.

    ``sample_count`` counts every raw row; only rows with a mapped label take
    part in the majority vote.
    """
    samples: dict[str, int] = defaultdict(int)
    levels: dict[str, list[DensityLevel]] = defaultdict(list)
    for row in rows:
        samples[row.place_id] += 1
        level = parse_level(row.level)
        if level is not None:
            levels[row.place_id].append(level)

    signals: dict[str, PlaceSignal] = {}
    for place_id, count in samples.items():
        majority = majority_level(levels.get(place_id, []))
        signals[place_id] = PlaceSignal(
            sample_count=count,
            score=majority.weight if majority is not None else None,
        )
    return signals


def smooth(
    places: Sequence[Place],
    signals: dict[str, PlaceSignal],
    radius_m: float,
    ladder: CoarseLadder | None = None,
) -> dict[str, ScoreResult]:
    """Label every place from the scored places within ``radius_m`` of it."""
    scored = [
        (q, signals[q.id].score)
        for q in places
        if q.id in signals and signals[q.id].score is not None
    ]

    results: dict[str, ScoreResult] = {}
    for p in places:
        neighbor_scores = [
            score for q, score in scored if haversine_m(p.lat, p.lng, q.lat, q.lng) <= radius_m
        ]
        if neighbor_scores:
            level = classify_coarse(sum(neighbor_scores) / len(neighbor_scores), ladder)
        else:
            level = DensityLevel.LOW

        own = signals.get(p.id)
        results[p.id] = ScoreResult(
            place_id=p.id,
            level=level,
            sample_count=own.sample_count if own else 0,
        )
    return results
