"""Density scoring: single-place time decay and bulk neighborhood smoothing.

Both entry points are best-effort. A failing report store is logged and
treated as "no data", so callers always get a structurally valid answer the
map can render.
"""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

import structlog

from .classification import classify_fine
from .config import DensityConfig, default_config
from .decay import decayed_average
from .models import Place, ScoreResult, StoredReport
from .neighborhood import current_signals, smooth
from .store import ReportStore

logger = structlog.get_logger()


class DensityScorer:
    """Turns stored reports into a current density label per place.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(self, store: ReportStore, config: DensityConfig | None = None) -> None:
        self._store = store
        self._config = config or default_config

    @property
    def config(self) -> DensityConfig:
        return self._config

    async def score_place(self, place_id: str, now: datetime | None = None) -> ScoreResult:
        """Score one place from its reports in the lookback window.

        The label comes from the decay-weighted average mapped through the
        fine threshold ladder. ``sample_count`` is the raw number of rows in
        the window, independent of decay.
        """
        now = now or datetime.now(UTC)
        since = now - timedelta(minutes=self._config.single.lookback_minutes)

        try:
            rows = await self._store.query([place_id], since)
        except Exception:
            logger.warning("density_query_failed", place_id=place_id, exc_info=True)
            return ScoreResult(place_id=place_id, level=None, sample_count=0)

        if not rows:
            return ScoreResult(place_id=place_id, level=None, sample_count=0)

        avg = decayed_average(rows, now, self._config.decay)
        level = classify_fine(avg, self._config.fine) if avg is not None else None

        logger.debug(
            "place_density_scored",
            place_id=place_id,
            average=avg,
            level=level.value if level else None,
            sample_count=len(rows),
        )
        return ScoreResult(place_id=place_id, level=level, sample_count=len(rows))

    async def score_bulk(
        self, places: Sequence[Place], now: datetime | None = None
    ) -> dict[str, ScoreResult]:
        """Score a batch of places with neighborhood smoothing.

        Never yields an unknown label: places with no scored neighbor within
        the radius fall back to low.
        """
        if not places:
            return {}

        now = now or datetime.now(UTC)
        cfg = self._config.bulk
        ids = [p.id for p in places]
        recent_since = now - timedelta(minutes=cfg.recent_minutes)

        if cfg.stale_window_enabled:
            stale_since = now - timedelta(minutes=cfg.stale_minutes)
            recent_rows, stale_rows = await asyncio.gather(
                self._query_or_empty(ids, recent_since, "recent"),
                self._query_or_empty(ids, stale_since, "stale"),
            )
        else:
            recent_rows = await self._query_or_empty(ids, recent_since, "recent")
            stale_rows = []

        signals = current_signals(recent_rows)
        results = smooth(places, signals, cfg.neighbor_radius_m, self._config.coarse)

        # Places with reports in the stale window but none recent: the data
        # aged out and they are labelled exactly as if they had none.
        aged_out = {r.place_id for r in stale_rows} - set(signals)

        logger.info(
            "bulk_density_scored",
            place_count=len(results),
            with_recent_signal=sum(1 for s in signals.values() if s.score is not None),
            aged_out=len(aged_out),
            recent_rows=len(recent_rows),
        )
        return results

    async def _query_or_empty(
        self, ids: list[str], since: datetime, window: str
    ) -> list[StoredReport]:
        try:
            return await self._store.query(ids, since)
        except Exception:
            logger.warning(
                "bulk_density_query_failed",
                window=window,
                place_count=len(ids),
                exc_info=True,
            )
            return []
