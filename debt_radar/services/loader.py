# debt_radar/services/loader.py
from __future__ import annotations

"""
One load cycle: fetch -> normalize -> fallback -> assemble.

Live datasets are requested concurrently. Each one that comes back empty
(network error, HTTP error, malformed body, no observations) is replaced by
the fallback resolver's output for that dataset only.

If one of the concurrent fetches *raises* instead, the batch policy decides:

  all_or_nothing  every result of the cycle is discarded and the fully static
                  snapshot is used (historical dashboard behaviour, default);
  per_dataset     only the dataset that raised falls back, its siblings keep
                  their live data.

Either way the cycle is flagged degraded, and a cycle always ends with a
complete, consistent dataset.
"""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Optional, Union

import httpx

from debt_radar import config
from debt_radar.errors import BatchFailure
from debt_radar.models import (
    LIVE_DATASETS,
    CanonicalDataset,
    DatasetKey,
    LoadResult,
    TimeSeries,
)
from debt_radar.providers.eurostat_provider import fetch_live_datasets
from debt_radar.services.fallback import fallback, static_snapshot

logger = logging.getLogger("debt-radar")


class BatchPolicy(str, Enum):
    ALL_OR_NOTHING = "all_or_nothing"
    PER_DATASET = "per_dataset"

    @classmethod
    def parse(cls, raw: "str | BatchPolicy") -> "BatchPolicy":
        if isinstance(raw, BatchPolicy):
            return raw
        s = str(raw or "").strip().lower().replace("-", "_")
        for p in cls:
            if p.value == s:
                return p
        raise ValueError(f"unknown batch policy: {raw!r}")


def _static_result(err: BatchFailure) -> LoadResult:
    return LoadResult(
        dataset=static_snapshot(),
        degraded=True,
        warnings=(f"{err}; showing reference data",),
        sources=MappingProxyType({k.identifier: "static" for k in DatasetKey}),
    )


def assemble(
    results: Dict[DatasetKey, Union[TimeSeries, BaseException]],
    policy: "BatchPolicy | str" = BatchPolicy.ALL_OR_NOTHING,
) -> LoadResult:
    """Turn the settled fetch results of one cycle into a LoadResult."""
    policy = BatchPolicy.parse(policy)
    failures = {k: r for k, r in results.items() if isinstance(r, BaseException)}

    if failures:
        names = ", ".join(f"{k.identifier} ({e.__class__.__name__}: {e})" for k, e in failures.items())
        err = BatchFailure(f"{len(failures)} of {len(results)} requests failed: {names}", failures=failures)
        logger.warning("[loader] batch failure (%s): %s", policy.value, err)
        if policy is BatchPolicy.ALL_OR_NOTHING:
            return _static_result(err)

    resolved: Dict[DatasetKey, TimeSeries] = {}
    sources: Dict[str, str] = {}
    warnings: List[str] = []
    if failures:
        warnings.append(f"{err}; affected datasets use reference data")

    for key in LIVE_DATASETS:
        got = results.get(key)
        if isinstance(got, BaseException) or not got:
            # each dataset is fetched once per cycle, so nothing is held in memory
            # for it yet and the resolver lands on the reference snapshot
            resolved[key] = fallback(key)
            sources[key.identifier] = "static"
            if not isinstance(got, BaseException):
                warnings.append(f"{key.identifier}: live data unavailable, using static data")
        else:
            resolved[key] = got
            sources[key.identifier] = "live"

    for key in (DatasetKey.EU_COMPARISON, DatasetKey.ECONOMIC_INDICATORS):
        sources[key.identifier] = "static"

    dataset = CanonicalDataset(
        debt=resolved[DatasetKey.DEBT],
        gdp_ratio=resolved[DatasetKey.GDP_RATIO],
        population=resolved[DatasetKey.POPULATION],
        eu_comparison=fallback(DatasetKey.EU_COMPARISON),
        economic_indicators=fallback(DatasetKey.ECONOMIC_INDICATORS),
    )
    return LoadResult(
        dataset=dataset,
        degraded=bool(failures),
        warnings=tuple(warnings),
        sources=MappingProxyType(sources),
    )


async def load_cycle(
    geo: Optional[str] = None,
    policy: "BatchPolicy | str | None" = None,
    client: Optional[httpx.AsyncClient] = None,
) -> LoadResult:
    """Run one complete load cycle. Never raises for data problems."""
    geo = (geo or config.GEO).upper()
    policy = BatchPolicy.parse(policy or config.BATCH_POLICY)
    results = await fetch_live_datasets(geo, client=client)
    result = assemble(results, policy)
    logger.info(
        "[loader] cycle complete geo=%s degraded=%s sources=%s",
        geo, result.degraded, dict(result.sources),
    )
    return result


__all__ = ["BatchPolicy", "assemble", "load_cycle"]
