# debt_radar/services/dashboard.py
from __future__ import annotations

"""
Read-only facade over the pipeline for the presentation layer.

The dashboard owns the current LoadResult. A reload builds a complete new
result first and then swaps the reference, so readers see either the previous
cycle or the new one, never a mix.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from debt_radar import config
from debt_radar.errors import DataNotReady
from debt_radar.models import CanonicalDataset, LoadResult, SeriesKind, TimeSeries, WindowToken
from debt_radar.providers.eurostat_provider import new_client
from debt_radar.services.export import export_csv, export_rows
from debt_radar.services.extrapolator import RealTimeExtrapolator, Subscriber
from debt_radar.services.loader import BatchPolicy, load_cycle
from debt_radar.services.metrics import DerivedMetrics, compute_derived_metrics
from debt_radar.services.period_filter import filter_window

logger = logging.getLogger("debt-radar")


class DebtDashboard:
    def __init__(
        self,
        geo: Optional[str] = None,
        policy: "BatchPolicy | str | None" = None,
        extrapolator: Optional[RealTimeExtrapolator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.geo = (geo or config.GEO).upper()
        self.policy = BatchPolicy.parse(policy or config.BATCH_POLICY)
        self.extrapolator = extrapolator or RealTimeExtrapolator()
        self._transport = transport
        self._result: Optional[LoadResult] = None
        self._reload_lock = asyncio.Lock()

    # -- load cycle --------------------------------------------------------------
    async def reload(self) -> LoadResult:
        """Run a full load cycle, publish it, and restart the real-time counter."""
        async with self._reload_lock:
            async with new_client(transport=self._transport) as client:
                result = await load_cycle(self.geo, self.policy, client=client)
            self._result = result
            if not self.extrapolator.start(result.dataset.debt):
                logger.warning("[dashboard] not enough debt points for the real-time counter")
            return result

    async def aclose(self) -> None:
        await self.extrapolator.aclose()

    def stop(self) -> None:
        self.extrapolator.stop()

    # -- produced interfaces -----------------------------------------------------
    @property
    def last_result(self) -> LoadResult:
        if self._result is None:
            raise DataNotReady("no load cycle has completed yet")
        return self._result

    @property
    def ready(self) -> bool:
        return self._result is not None

    def get_canonical_dataset(self) -> CanonicalDataset:
        return self.last_result.dataset

    def get_filtered_series(
        self,
        kind: "SeriesKind | str",
        token: "WindowToken | str",
        reference_year: Optional[int] = None,
    ) -> TimeSeries:
        series = self.get_canonical_dataset().series(kind)
        return filter_window(series, token, reference_year)

    def get_derived_metrics(self) -> DerivedMetrics:
        return compute_derived_metrics(self.get_canonical_dataset(), self.geo)

    def subscribe_real_time_estimate(self, callback: Subscriber) -> int:
        return self.extrapolator.subscribe(callback)

    def unsubscribe(self, handle: int) -> bool:
        return self.extrapolator.unsubscribe(handle)

    def real_time_snapshot(self) -> Dict[str, Any]:
        ex = self.extrapolator
        return {
            "active": ex.state.active,
            "estimate": ex.estimate(),
            "increaseSinceAnchor": ex.increase_since_anchor(),
            "perSecond": ex.state.per_second_rate if ex.state.active else None,
            "anchorTimestamp": ex.state.anchor_timestamp,
        }

    def export_rows(self) -> List[Dict[str, Any]]:
        return export_rows(self.get_canonical_dataset())

    def export_csv(self) -> str:
        return export_csv(self.get_canonical_dataset())


__all__ = ["DebtDashboard"]
