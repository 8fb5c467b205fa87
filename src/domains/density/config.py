"""Density scoring configuration with sensible defaults.

Every tunable the scorers use lives here so the engine never hardcodes a
window, radius or threshold. Defaults reproduce the behaviour of the live map.
"""

import os
from dataclasses import dataclass, field


@dataclass
class DecaySettings:
    """Linear time decay for the single-place scorer.

    A report at age 0 has multiplier 1.0, falling linearly to ``floor`` at
    ``window_minutes`` and staying there, so older reports in the lookback
    never vanish entirely.
    """

    floor: float = 0.4
    window_minutes: float = 120.0

    def __post_init__(self) -> None:
        if not 0 < self.floor <= 1:
            raise ValueError("decay floor must be in (0, 1]")
        if self.window_minutes <= 0:
            raise ValueError("decay window must be positive")


@dataclass
class FineThresholds:
    """Threshold ladder for decayed averages (single-place scorer).

    Biased toward med/low: a label only escalates on a strong signal.
    """

    critical: float = 3.5
    high: float = 2.5
    med: float = 1.6

    def __post_init__(self) -> None:
        if not self.critical > self.high > self.med:
            raise ValueError("fine thresholds must be strictly descending")


@dataclass
class CoarseLadder:
    """Rounding ladder for neighborhood averages (bulk scorer).

    The average is rounded half-up and clamped to [min_score, max_score],
    both of which must be level weights.
    """

    min_score: int = 1
    max_score: int = 4

    def __post_init__(self) -> None:
        if not 1 <= self.min_score < self.max_score <= 4:
            raise ValueError("coarse ladder bounds must satisfy 1 <= min_score < max_score <= 4")


@dataclass
class SingleWindowSettings:
    lookback_minutes: float = 120.0


@dataclass
class BulkWindowSettings:
    recent_minutes: float = 30.0
    stale_minutes: float = 120.0
    # The stale read never changes a label; it only feeds logging.
    stale_window_enabled: bool = True
    neighbor_radius_m: float = 250.0
    max_places: int = 500

    def __post_init__(self) -> None:
        if self.recent_minutes <= 0 or self.stale_minutes <= 0:
            raise ValueError("bulk windows must be positive")
        if self.stale_minutes < self.recent_minutes:
            raise ValueError("stale window must not be shorter than the recent window")
        if self.neighbor_radius_m < 0:
            raise ValueError("neighbor radius must be non-negative")
        if self.max_places < 1:
            raise ValueError("max_places must be at least 1")


@dataclass
class DensityConfig:
    decay: DecaySettings = field(default_factory=DecaySettings)
    fine: FineThresholds = field(default_factory=FineThresholds)
    coarse: CoarseLadder = field(default_factory=CoarseLadder)
    single: SingleWindowSettings = field(default_factory=SingleWindowSettings)
    bulk: BulkWindowSettings = field(default_factory=BulkWindowSettings)
    scoring_version: str = "density-v1"

    @classmethod
    def from_env(cls) -> "DensityConfig":
        """Load config with env var overrides. Env vars use DENSITY_ prefix."""
        decay: dict = {}
        fine: dict = {}
        single: dict = {}
        bulk: dict = {}

        # Decay overrides
        if v := os.getenv("DENSITY_DECAY_FLOOR"):
            decay["floor"] = float(v)
        if v := os.getenv("DENSITY_DECAY_WINDOW_MINUTES"):
            decay["window_minutes"] = float(v)

        # Threshold overrides
        if v := os.getenv("DENSITY_THRESHOLD_CRITICAL"):
            fine["critical"] = float(v)
        if v := os.getenv("DENSITY_THRESHOLD_HIGH"):
            fine["high"] = float(v)
        if v := os.getenv("DENSITY_THRESHOLD_MED"):
            fine["med"] = float(v)

        # Window overrides
        if v := os.getenv("DENSITY_SINGLE_LOOKBACK_MINUTES"):
            single["lookback_minutes"] = float(v)
        if v := os.getenv("DENSITY_RECENT_WINDOW_MINUTES"):
            bulk["recent_minutes"] = float(v)
        if v := os.getenv("DENSITY_STALE_WINDOW_MINUTES"):
            bulk["stale_minutes"] = float(v)
        if v := os.getenv("DENSITY_STALE_WINDOW_ENABLED"):
            bulk["stale_window_enabled"] = v.lower() in ("1", "true", "yes")
        if v := os.getenv("DENSITY_NEIGHBOR_RADIUS_M"):
            bulk["neighbor_radius_m"] = float(v)
        if v := os.getenv("DENSITY_BULK_MAX_PLACES"):
            bulk["max_places"] = int(v)

        return cls(
            decay=DecaySettings(**decay),
            fine=FineThresholds(**fine),
            single=SingleWindowSettings(**single),
            bulk=BulkWindowSettings(**bulk),
        )

    def as_dict(self) -> dict:
        return {
            "scoring_version": self.scoring_version,
            "decay": {
                "floor": self.decay.floor,
                "window_minutes": self.decay.window_minutes,
            },
            "fine_thresholds": {
                "critical": self.fine.critical,
                "high": self.fine.high,
                "med": self.fine.med,
            },
            "coarse_ladder": {
                "min_score": self.coarse.min_score,
                "max_score": self.coarse.max_score,
            },
            "single": {"lookback_minutes": self.single.lookback_minutes},
            "bulk": {
                "recent_minutes": self.bulk.recent_minutes,
                "stale_minutes": self.bulk.stale_minutes,
                "stale_window_enabled": self.bulk.stale_window_enabled,
                "neighbor_radius_m": self.bulk.neighbor_radius_m,
                "max_places": self.bulk.max_places,
            },
        }


# Module-level default instance
default_config = DensityConfig.from_env()
