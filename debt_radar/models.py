# debt_radar/models.py
from __future__ import annotations

"""
Typed records shared by every stage of the pipeline.

All records are frozen: a load cycle builds new values and never mutates the
ones a reader may already hold.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TimePoint:
    year: int
    value: float


# Ascending by year, one point per year. Build with make_series().
TimeSeries = Tuple[TimePoint, ...]


def make_series(points: Iterable[TimePoint]) -> TimeSeries:
    """Sort by year and keep the last point seen for each year."""
    by_year: Dict[int, TimePoint] = {}
    for p in points:
        by_year[int(p.year)] = TimePoint(year=int(p.year), value=float(p.value))
    return tuple(by_year[y] for y in sorted(by_year))


def series_from_pairs(pairs: Iterable[Tuple[int, float]]) -> TimeSeries:
    return make_series(TimePoint(year=y, value=v) for y, v in pairs)


@dataclass(frozen=True)
class CountryDebtEntry:
    code: str
    name: str
    ratio_pct: float
    rank: int

    def __post_init__(self):
        if int(self.rank) < 1:
            raise ValueError(f"rank must be >= 1, got {self.rank}")


# Ordered by ascending rank, as supplied by the source.
EuComparison = Tuple[CountryDebtEntry, ...]


class WindowToken(str, Enum):
    Y5 = "5Y"
    Y10 = "10Y"
    Y20 = "20Y"
    ALL = "ALL"

    @classmethod
    def parse(cls, raw: "str | WindowToken") -> "WindowToken":
        if isinstance(raw, WindowToken):
            return raw
        s = str(raw or "").strip().upper()
        for token in cls:
            if token.value == s:
                return token
        raise ValueError(f"unknown window token: {raw!r}")


class SeriesKind(str, Enum):
    DEBT = "debt"
    GDP_RATIO = "gdp_ratio"
    PER_CAPITA = "per_capita"
    POPULATION = "population"

    @classmethod
    def parse(cls, raw: "str | SeriesKind") -> "SeriesKind":
        if isinstance(raw, SeriesKind):
            return raw
        s = str(raw or "").strip().lower()
        # the original chart toggles used 'amount' / 'gdp' / 'percap'
        aliases = {"amount": "debt", "gdp": "gdp_ratio", "percap": "per_capita"}
        s = aliases.get(s, s)
        for kind in cls:
            if kind.value == s:
                return kind
        raise ValueError(f"unknown series kind: {raw!r}")


class DatasetKey(Enum):
    """Every dataset the pipeline knows about.

    value = (legacy identifier, Eurostat dataset code or None, pinned filters)
    Reference datasets have no Eurostat code and are never live-fetched.
    """

    DEBT = ("gov_10dd_edpt1", "gov_10dd_edpt1", (("unit", "MIO_EUR"), ("sector", "S13"), ("na_item", "GD")))
    GDP_RATIO = ("gov_10dd_edpt1_pc_gdp", "gov_10dd_edpt1", (("unit", "PC_GDP"), ("sector", "S13"), ("na_item", "GD")))
    POPULATION = ("demo_pjan", "demo_pjan", (("sex", "T"), ("age", "TOTAL"), ("lastTimePeriod", "1")))
    EU_COMPARISON = ("eu_comparison", None, ())
    ECONOMIC_INDICATORS = ("economic_indicators", None, ())

    @property
    def identifier(self) -> str:
        return self.value[0]

    @property
    def eurostat_dataset(self) -> Optional[str]:
        return self.value[1]

    @property
    def is_live(self) -> bool:
        return self.value[1] is not None

    def params(self, geo: str) -> Dict[str, str]:
        if not self.is_live:
            return {}
        out = dict(self.value[2])
        out["geo"] = geo
        return out


LIVE_DATASETS: Tuple[DatasetKey, ...] = tuple(k for k in DatasetKey if k.is_live)


def _frozen_indicators(d: Optional[Mapping[str, TimeSeries]]) -> Mapping[str, TimeSeries]:
    return MappingProxyType({str(k): make_series(v) for k, v in (d or {}).items()})


def _derive_per_capita(debt: TimeSeries, population: TimeSeries) -> TimeSeries:
    from debt_radar.services.metrics import per_capita  # metrics imports this module

    return per_capita(debt, population)


@dataclass(frozen=True)
class CanonicalDataset:
    debt: TimeSeries = ()
    gdp_ratio: TimeSeries = ()
    population: TimeSeries = ()
    eu_comparison: EuComparison = ()
    economic_indicators: Mapping[str, TimeSeries] = field(default_factory=lambda: MappingProxyType({}))
    # derived from debt and population, never supplied by the caller
    per_capita: TimeSeries = field(init=False, default=())

    def __post_init__(self):
        # keep the sorted/deduplicated guarantee whatever the caller passed in
        object.__setattr__(self, "debt", make_series(self.debt))
        object.__setattr__(self, "gdp_ratio", make_series(self.gdp_ratio))
        object.__setattr__(self, "population", make_series(self.population))
        object.__setattr__(self, "per_capita", _derive_per_capita(self.debt, self.population))
        object.__setattr__(self, "eu_comparison", tuple(self.eu_comparison))
        object.__setattr__(self, "economic_indicators", _frozen_indicators(self.economic_indicators))

    def series(self, kind: "SeriesKind | str") -> TimeSeries:
        kind = SeriesKind.parse(kind)
        return {
            SeriesKind.DEBT: self.debt,
            SeriesKind.GDP_RATIO: self.gdp_ratio,
            SeriesKind.PER_CAPITA: self.per_capita,
            SeriesKind.POPULATION: self.population,
        }[kind]

    def to_dict(self) -> Dict[str, object]:
        return {
            "debt": series_to_list(self.debt),
            "gdpRatio": series_to_list(self.gdp_ratio),
            "population": series_to_list(self.population),
            "perCapita": series_to_list(self.per_capita),
            "euComparison": [
                {"code": e.code, "name": e.name, "ratioPct": e.ratio_pct, "rank": e.rank}
                for e in self.eu_comparison
            ],
            "economicIndicators": {
                name: series_to_list(s) for name, s in self.economic_indicators.items()
            },
        }


def series_to_list(series: TimeSeries):
    return [{"year": p.year, "value": p.value} for p in series]


@dataclass(frozen=True)
class ExtrapolationState:
    anchor_timestamp: Optional[float] = None
    base_value: float = 0.0
    per_second_rate: float = 0.0
    active: bool = False


IDLE = ExtrapolationState()


@dataclass(frozen=True)
class LoadResult:
    """Outcome of one load cycle, swapped in atomically by the dashboard."""

    dataset: CanonicalDataset
    degraded: bool = False
    warnings: Tuple[str, ...] = ()
    sources: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = [
    "TimePoint",
    "TimeSeries",
    "make_series",
    "series_from_pairs",
    "series_to_list",
    "CountryDebtEntry",
    "EuComparison",
    "WindowToken",
    "SeriesKind",
    "DatasetKey",
    "LIVE_DATASETS",
    "CanonicalDataset",
    "ExtrapolationState",
    "IDLE",
    "LoadResult",
]
