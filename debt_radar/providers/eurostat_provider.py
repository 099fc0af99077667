# debt_radar/providers/eurostat_provider.py
from __future__ import annotations

"""
Eurostat provider (dissemination API) for Debt Radar
- Debt (annual, EUR millions): gov_10dd_edpt1, unit=MIO_EUR, sector=S13, na_item=GD, geo=ISO2
- Debt-to-GDP (annual):       gov_10dd_edpt1, unit=PC_GDP,  sector=S13, na_item=GD, geo=ISO2
- Population (1 Jan):         demo_pjan, sex=T, age=TOTAL, lastTimePeriod=1, geo=ISO2

Returns:
- TimeSeries (tuple of TimePoint, ascending by year)
- () on network failure, HTTP error or malformed body (never None)

Notes:
- Base URL is configurable via EUROSTAT_BASE_URL.
- One attempt per dataset per cycle: no retries, no backoff, transport default timeout.
- An empty result means "use the fallback" to the caller (services/loader.py).
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import httpx

from debt_radar import config
from debt_radar.errors import HttpFailure, MalformedResponse, NetworkFailure
from debt_radar.models import LIVE_DATASETS, DatasetKey, TimeSeries
from debt_radar.providers.sdmx import parse_time_series

logger = logging.getLogger("debt-radar")


# ------------------------------------------------------------------------------
# HTTP helpers
# ------------------------------------------------------------------------------
def new_client(**kwargs: Any) -> httpx.AsyncClient:
    """Shared client for one load cycle. Extra kwargs (e.g. transport=) go to httpx."""
    headers = {"Accept": "application/json", "User-Agent": config.USER_AGENT}
    kwargs.setdefault("timeout", config.TIMEOUT)
    kwargs.setdefault("follow_redirects", True)
    return httpx.AsyncClient(headers=headers, **kwargs)


def build_url(dataset: str) -> str:
    base = config.EUROSTAT_BASE_URL.rstrip("/")
    return f"{base}/{dataset}"


async def _http_get_json(client: httpx.AsyncClient, url: str, params: Mapping[str, str], dataset: str) -> Any:
    try:
        r = await client.get(url, params=dict(params))
    except httpx.RequestError as e:
        raise NetworkFailure(f"{e.__class__.__name__}: {e}", dataset=dataset) from e

    if not r.is_success:
        raise HttpFailure(f"HTTP {r.status_code}", status_code=r.status_code, dataset=dataset)

    try:
        return r.json()
    except ValueError as e:
        raise MalformedResponse(f"body is not JSON: {e}", dataset=dataset) from e


# ------------------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------------------
async def fetch(
    dataset_id: str,
    params: Mapping[str, str],
    client: Optional[httpx.AsyncClient] = None,
) -> TimeSeries:
    """
    GET <base>/<dataset_id>?<params> and normalize the dimensional document.
    Network, HTTP and shape failures are logged and returned as ().
    Anything else propagates to the caller.
    """
    own_client = client is None
    if own_client:
        client = new_client()
    url = build_url(dataset_id)
    try:
        data = await _http_get_json(client, url, params, dataset_id)
        series = parse_time_series(data)
        if not series:
            logger.warning("[Eurostat] %s params=%s returned no observations", dataset_id, dict(params))
        return series
    except (NetworkFailure, HttpFailure, MalformedResponse) as e:
        logger.warning("[Eurostat] %s failed (%s) params=%s: %s", dataset_id, e.__class__.__name__, dict(params), e)
        return ()
    finally:
        if own_client:
            await client.aclose()


async def fetch_dataset(key: DatasetKey, geo: str, client: Optional[httpx.AsyncClient] = None) -> TimeSeries:
    if not key.is_live:
        raise ValueError(f"{key.name} is reference data and is never fetched")
    return await fetch(key.eurostat_dataset, key.params(geo), client=client)


async def fetch_live_datasets(
    geo: str,
    client: Optional[httpx.AsyncClient] = None,
    keys: Iterable[DatasetKey] = LIVE_DATASETS,
) -> Dict[DatasetKey, Union[TimeSeries, BaseException]]:
    """
    Issue every live query concurrently and wait for all of them to settle.
    Each entry is either the normalized series or the exception its fetch raised.
    """
    keys = tuple(keys)
    own_client = client is None
    if own_client:
        client = new_client()
    try:
        results = await asyncio.gather(
            *(fetch_dataset(k, geo, client=client) for k in keys),
            return_exceptions=True,
        )
    finally:
        if own_client:
            await client.aclose()
    return dict(zip(keys, results))


__all__ = ["new_client", "build_url", "fetch", "fetch_dataset", "fetch_live_datasets"]
