import asyncio

import pytest

from conftest import make_transport
from debt_radar.errors import DataNotReady
from debt_radar.models import SeriesKind, WindowToken
from debt_radar.services.dashboard import DebtDashboard
from debt_radar.services.extrapolator import RealTimeExtrapolator
from debt_radar.services.fallback import static_snapshot


def _dashboard(overrides=None, policy="all_or_nothing"):
    return DebtDashboard(
        geo="fr",
        policy=policy,
        extrapolator=RealTimeExtrapolator(interval_ms=10),
        transport=make_transport(overrides),
    )


def test_nothing_is_exposed_before_the_first_cycle():
    dash = _dashboard()
    assert not dash.ready
    with pytest.raises(DataNotReady):
        dash.get_canonical_dataset()
    with pytest.raises(DataNotReady):
        dash.get_derived_metrics()


def test_reload_publishes_dataset_and_starts_counter():
    dash = _dashboard()
    seen = []

    async def go():
        handle = dash.subscribe_real_time_estimate(seen.append)
        await dash.reload()
        await asyncio.sleep(0.05)
        assert dash.unsubscribe(handle)
        n = len(seen)
        await asyncio.sleep(0.03)
        await dash.aclose()
        return n

    n = asyncio.run(go())
    assert dash.geo == "FR"
    assert n >= 1
    assert len(seen) == n
    assert dash.get_canonical_dataset().debt[-1].year == 2024
    assert dash.get_derived_metrics().eu_rank == 4


def test_reload_replaces_dataset_wholesale():
    dash = _dashboard()

    async def go():
        first = await dash.reload()
        held = dash.get_canonical_dataset()
        dash._transport = make_transport({"debt": RuntimeError("boom")})
        second = await dash.reload()
        await dash.aclose()
        return first, held, second

    first, held, second = asyncio.run(go())
    assert first is not second
    # a reader holding the old snapshot still sees the old cycle intact
    assert held is first.dataset
    assert dash.get_canonical_dataset() == static_snapshot()
    assert dash.last_result.degraded


def test_filtered_series_and_export():
    dash = _dashboard()

    async def go():
        await dash.reload()
        dash.stop()

    asyncio.run(go())
    out = dash.get_filtered_series(SeriesKind.GDP_RATIO, WindowToken.Y5, reference_year=2025)
    assert [p.year for p in out] == [2020, 2021, 2022, 2023, 2024]
    assert dash.get_filtered_series("per_capita", "ALL") == dash.get_canonical_dataset().per_capita
    rows = dash.export_rows()
    assert rows[-1]["Year"] == 2024
    assert dash.export_csv().startswith("Year,DebtBnEUR")
    assert dash.real_time_snapshot()["active"] is False
