# debt_radar/services/metrics.py
from __future__ import annotations

"""
Derived figures shown next to the canonical series.

Debt values are in EUR millions (Eurostat MIO_EUR); every monetary output
here is converted to plain euros unless the name says otherwise.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from debt_radar import config
from debt_radar.models import CanonicalDataset, EuComparison, TimePoint, TimeSeries, make_series
from debt_radar.utils.country_codes import to_iso2
from debt_radar.utils.series_math import last_two, latest, yoy_pct_by_year

MILLION = 1_000_000

UNRANKED = None


@dataclass(frozen=True)
class Trend:
    direction: str  # up | down | neutral
    magnitude: float

    def to_dict(self) -> Dict[str, Any]:
        return {"direction": self.direction, "magnitude": self.magnitude}


NEUTRAL = Trend(direction="neutral", magnitude=0.0)


def latest_population(population: TimeSeries) -> float:
    last = latest(population)
    if last is None or last.value <= 0:
        return config.DEFAULT_POPULATION
    return last.value


def per_capita(debt: TimeSeries, population: TimeSeries) -> TimeSeries:
    # The latest population is applied to every year of debt.
    pop = latest_population(population)
    return make_series(TimePoint(year=p.year, value=p.value * MILLION / pop) for p in debt)


def trend(series: TimeSeries) -> Trend:
    pair = last_two(series)
    if pair is None:
        return NEUTRAL
    previous, last = pair
    change = last.value - previous.value
    if change > 0:
        return Trend(direction="up", magnitude=change)
    if change < 0:
        return Trend(direction="down", magnitude=change)
    return NEUTRAL


def year_over_year_delta(debt: TimeSeries) -> Optional[float]:
    pair = last_two(debt)
    if pair is None:
        return None
    previous, last = pair
    return (last.value - previous.value) * MILLION


def year_over_year_pct(debt: TimeSeries) -> TimeSeries:
    return make_series(TimePoint(year=y, value=v) for y, v in yoy_pct_by_year(debt).items())


def interest_charge_estimate(debt: TimeSeries, rate: Optional[float] = None) -> Optional[float]:
    last = latest(debt)
    if last is None:
        return None
    rate = config.ASSUMED_INTEREST_RATE if rate is None else rate
    return last.value * MILLION * rate


def eu_ranking(eu_comparison: EuComparison, country_code: str) -> Optional[int]:
    """Rank of country_code (ISO2, ISO3 or name) in the table, or UNRANKED."""
    wanted = to_iso2(country_code) or str(country_code or "").strip().upper()
    for entry in eu_comparison:
        if entry.code.upper() == wanted or to_iso2(entry.code) == wanted:
            return entry.rank
    return UNRANKED


@dataclass(frozen=True)
class DerivedMetrics:
    per_capita: TimeSeries
    latest_per_capita: Optional[float]
    trend: Trend  # debt-to-GDP ratio, percentage points
    debt_trend: Trend
    yoy_delta: Optional[float]
    interest_charge: Optional[float]
    assumed_rate: float
    eu_rank: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        pc: List[Dict[str, Any]] = [{"year": p.year, "value": p.value} for p in self.per_capita]
        return {
            "perCapita": pc,
            "latestPerCapita": self.latest_per_capita,
            "trend": self.trend.to_dict(),
            "debtTrend": self.debt_trend.to_dict(),
            "yoyDelta": self.yoy_delta,
            "interestCharge": self.interest_charge,
            "assumedRate": self.assumed_rate,
            "euRank": self.eu_rank,
        }


def compute_derived_metrics(dataset: CanonicalDataset, country_code: Optional[str] = None) -> DerivedMetrics:
    pc = dataset.per_capita
    last_pc = latest(pc)
    return DerivedMetrics(
        per_capita=pc,
        latest_per_capita=last_pc.value if last_pc else None,
        trend=trend(dataset.gdp_ratio),
        debt_trend=trend(dataset.debt),
        yoy_delta=year_over_year_delta(dataset.debt),
        interest_charge=interest_charge_estimate(dataset.debt),
        assumed_rate=config.ASSUMED_INTEREST_RATE,
        eu_rank=eu_ranking(dataset.eu_comparison, country_code or config.GEO),
    )


__all__ = [
    "UNRANKED",
    "Trend",
    "DerivedMetrics",
    "latest_population",
    "per_capita",
    "trend",
    "year_over_year_delta",
    "year_over_year_pct",
    "interest_charge_estimate",
    "eu_ranking",
    "compute_derived_metrics",
]
