# debt_radar/services/export.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
import csv
import io

from debt_radar import config
from debt_radar.models import CanonicalDataset
from debt_radar.utils.series_math import by_year, yoy_pct_by_year

# Fixed column order of the data table / CSV download
COLUMNS = [
    "Year", "DebtBnEUR", "PctGDP", "PerCapitaEUR", "YoYVariationPct", "AssumedRatePct", "InterestChargeBnEUR",
]


def _round(v: Optional[float], nd: int) -> Optional[float]:
    return None if v is None else round(v, nd)


def export_rows(dataset: CanonicalDataset, rate: Optional[float] = None) -> List[Dict[str, Any]]:
    """One row per debt year. Debt is EUR millions in, EUR billions out."""
    rate = config.ASSUMED_INTEREST_RATE if rate is None else rate
    ratio = by_year(dataset.gdp_ratio)
    per_cap = by_year(dataset.per_capita)
    yoy = yoy_pct_by_year(dataset.debt)
    rows: List[Dict[str, Any]] = []
    for p in dataset.debt:
        rows.append({
            "Year": p.year,
            "DebtBnEUR": round(p.value / 1000.0, 1),
            "PctGDP": _round(ratio.get(p.year), 1),
            "PerCapitaEUR": _round(per_cap.get(p.year), 0),
            "YoYVariationPct": round(yoy.get(p.year, 0.0), 1),
            "AssumedRatePct": round(rate * 100.0, 2),
            "InterestChargeBnEUR": round(p.value * rate / 1000.0, 1),
        })
    return rows


def write_csv(rows: Iterable[Dict[str, Any]], columns: List[str] = COLUMNS) -> str:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
    w.writeheader()
    for r in rows:
        w.writerow({k: r.get(k) for k in columns})
    return buf.getvalue()


def export_csv(dataset: CanonicalDataset, rate: Optional[float] = None) -> str:
    return write_csv(export_rows(dataset, rate))
