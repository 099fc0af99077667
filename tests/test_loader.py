import asyncio

import httpx
import pytest

from conftest import DEBT, RATIO, make_transport
from debt_radar.models import DatasetKey, TimePoint, series_from_pairs
from debt_radar.providers.eurostat_provider import new_client
from debt_radar.services.fallback import (
    DEBT_SNAPSHOT,
    EU_COMPARISON_SNAPSHOT,
    GDP_RATIO_SNAPSHOT,
    POPULATION_SNAPSHOT,
    static_snapshot,
)
from debt_radar.services.loader import BatchPolicy, assemble, load_cycle


def _load(transport, policy=BatchPolicy.ALL_OR_NOTHING):
    async def go():
        async with new_client(transport=transport) as client:
            return await load_cycle("FR", policy, client=client)
    return asyncio.run(go())


def test_normal_cycle_uses_live_data():
    res = _load(make_transport())
    ds = res.dataset
    assert not res.degraded
    assert res.warnings == ()
    assert ds.debt == series_from_pairs(DEBT)
    assert ds.gdp_ratio == series_from_pairs(RATIO)
    assert ds.population == (TimePoint(2024, 68400000.0),)
    assert [p.year for p in ds.per_capita] == [p.year for p in ds.debt]
    assert ds.eu_comparison == EU_COMPARISON_SNAPSHOT
    assert res.sources["gov_10dd_edpt1"] == "live"
    assert res.sources["eu_comparison"] == "static"


def test_batch_failure_discards_the_whole_cycle():
    """Two of three live fetches succeed, one raises: everything is static."""
    res = _load(make_transport({"population": RuntimeError("boom")}))
    assert res.degraded
    assert res.dataset == static_snapshot()
    assert len(res.warnings) == 1
    assert "demo_pjan" in res.warnings[0]
    assert set(res.sources.values()) == {"static"}


def test_batch_failure_per_dataset_policy_keeps_siblings():
    res = _load(make_transport({"population": RuntimeError("boom")}), BatchPolicy.PER_DATASET)
    assert res.degraded
    assert res.dataset.debt == series_from_pairs(DEBT)
    assert res.dataset.gdp_ratio == series_from_pairs(RATIO)
    assert res.dataset.population == POPULATION_SNAPSHOT
    assert res.sources["gov_10dd_edpt1"] == "live"
    assert res.sources["demo_pjan"] == "static"


def test_malformed_response_only_replaces_that_dataset():
    """A response without 'dimension' falls back for that dataset alone."""
    res = _load(make_transport({"ratio": {"value": {"0": 1.0}}}))
    assert not res.degraded
    assert res.dataset.gdp_ratio == GDP_RATIO_SNAPSHOT
    assert res.dataset.debt == series_from_pairs(DEBT)
    assert res.sources["gov_10dd_edpt1_pc_gdp"] == "static"
    assert any("gov_10dd_edpt1_pc_gdp" in w for w in res.warnings)


def test_http_and_network_failures_fall_back_per_dataset():
    res = _load(make_transport({
        "debt": httpx.Response(503),
        "population": httpx.ConnectError("refused"),
    }))
    assert not res.degraded
    assert res.dataset.debt == DEBT_SNAPSHOT
    assert res.dataset.population == POPULATION_SNAPSHOT
    assert res.dataset.gdp_ratio == series_from_pairs(RATIO)
    # per-capita follows the substituted debt series
    assert [p.year for p in res.dataset.per_capita] == [2022, 2023, 2024]


def test_everything_down_still_yields_a_usable_dataset():
    res = _load(make_transport({
        "debt": httpx.ConnectError("down"),
        "ratio": httpx.ConnectError("down"),
        "population": httpx.ConnectError("down"),
    }))
    ds = res.dataset
    assert len(ds.debt) >= 2
    assert ds.gdp_ratio and ds.population and ds.per_capita
    assert ds.eu_comparison and ds.economic_indicators
    # nothing is held over from an earlier request, so every source is the snapshot
    assert set(res.sources.values()) == {"static"}
    assert all("using static data" in w for w in res.warnings)


def test_assemble_from_settled_results():
    results = {
        DatasetKey.DEBT: series_from_pairs(DEBT),
        DatasetKey.GDP_RATIO: (),
        DatasetKey.POPULATION: series_from_pairs([(2024, 68400000.0)]),
    }
    res = assemble(results, "per_dataset")
    assert res.dataset.gdp_ratio == GDP_RATIO_SNAPSHOT
    assert not res.degraded


def test_cancelled_fetch_counts_as_batch_failure():
    results = {
        DatasetKey.DEBT: series_from_pairs(DEBT),
        DatasetKey.GDP_RATIO: asyncio.CancelledError(),
        DatasetKey.POPULATION: series_from_pairs([(2024, 68400000.0)]),
    }
    assert assemble(results).dataset == static_snapshot()


@pytest.mark.parametrize("raw,policy", [
    ("all_or_nothing", BatchPolicy.ALL_OR_NOTHING),
    ("per-dataset", BatchPolicy.PER_DATASET),
    ("PER_DATASET", BatchPolicy.PER_DATASET),
])
def test_batch_policy_parse(raw, policy):
    assert BatchPolicy.parse(raw) is policy


def test_batch_policy_parse_rejects_unknown():
    with pytest.raises(ValueError):
        BatchPolicy.parse("retry")
