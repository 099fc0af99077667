import csv
import io

import pytest

from debt_radar import config
from debt_radar.models import CanonicalDataset, series_from_pairs
from debt_radar.services.export import COLUMNS, export_csv, export_rows
from debt_radar.services.fallback import static_snapshot


def test_columns_are_fixed():
    assert COLUMNS == [
        "Year", "DebtBnEUR", "PctGDP", "PerCapitaEUR", "YoYVariationPct", "AssumedRatePct", "InterestChargeBnEUR",
    ]


def test_rows_follow_debt_years():
    rows = export_rows(static_snapshot())
    assert [r["Year"] for r in rows] == [2019, 2020, 2021, 2022, 2023, 2024]
    last = rows[-1]
    assert last["DebtBnEUR"] == pytest.approx(3250.0)
    assert last["PctGDP"] == pytest.approx(112.2)
    assert last["PerCapitaEUR"] == pytest.approx(47515)
    assert last["YoYVariationPct"] == pytest.approx(4.8)
    assert last["AssumedRatePct"] == pytest.approx(2.8)
    assert last["InterestChargeBnEUR"] == pytest.approx(91.0)
    assert rows[0]["YoYVariationPct"] == 0.0


def test_missing_ratio_cells_are_blank_in_csv():
    ds = CanonicalDataset(debt=series_from_pairs([(2023, 3101200.0), (2024, 3250000.0)]))
    text = export_csv(ds)
    parsed = list(csv.DictReader(io.StringIO(text)))
    assert list(parsed[0].keys()) == COLUMNS
    assert parsed[1]["Year"] == "2024"
    assert parsed[1]["PctGDP"] == ""
    # per-capita is always derived, falling back to the default population
    assert float(parsed[1]["PerCapitaEUR"]) == pytest.approx(3250000.0 * 1e6 / config.DEFAULT_POPULATION, abs=1)


def test_per_capita_column_is_filled_for_every_debt_year():
    ds = CanonicalDataset(
        debt=series_from_pairs([(2022, 2956800.0), (2023, 3101200.0), (2024, 3250000.0)]),
        population=series_from_pairs([(2024, 68400000.0)]),
    )
    rows = export_rows(ds)
    assert [r["PerCapitaEUR"] for r in rows] == [43228.0, 45339.0, 47515.0]
