# debt_radar/services/fallback.py
from __future__ import annotations

"""
Deterministic substitutes for datasets that could not be loaded.

Source hierarchy per dataset:

  1. live datasets (debt, debt-to-GDP, population): the series already held
     in memory for that dataset during the current cycle, if non-empty;
  2. otherwise the embedded reference snapshot below.

Reference datasets (EU comparison table, economic indicator bundle) are never
fetched and always come from the snapshot.

Figures are Eurostat / INSEE values for France as published in 2024–2025.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from debt_radar.errors import UnknownDataset
from debt_radar.models import (
    CanonicalDataset,
    CountryDebtEntry,
    DatasetKey,
    EuComparison,
    TimeSeries,
    series_from_pairs,
)
from debt_radar.utils.series_math import first_non_empty

logger = logging.getLogger("debt-radar")

# ------------------------------------------------------------------------------
# Per-dataset snapshots (short, used when one dataset fails)
# ------------------------------------------------------------------------------
DEBT_SNAPSHOT: TimeSeries = series_from_pairs([
    (2022, 2956800), (2023, 3101200), (2024, 3250000),
])

GDP_RATIO_SNAPSHOT: TimeSeries = series_from_pairs([
    (2022, 111.9), (2023, 110.6), (2024, 112.2),
])

POPULATION_SNAPSHOT: TimeSeries = series_from_pairs([(2024, 68400000)])

EU_COMPARISON_SNAPSHOT: EuComparison = (
    CountryDebtEntry("GR", "Grèce", 172.6, 1),
    CountryDebtEntry("IT", "Italie", 134.6, 2),
    CountryDebtEntry("FR", "France", 110.6, 4),
    CountryDebtEntry("ES", "Espagne", 105.5, 5),
    CountryDebtEntry("BE", "Belgique", 105.0, 6),
    CountryDebtEntry("DE", "Allemagne", 63.7, 15),
)

ECONOMIC_INDICATORS_SNAPSHOT: Mapping[str, TimeSeries] = MappingProxyType({
    "gdpGrowth": series_from_pairs([(2020, -8.0), (2021, 6.8), (2022, 2.5), (2023, 0.9)]),
    "inflation": series_from_pairs([(2020, 0.5), (2021, 2.1), (2022, 5.9), (2023, 4.9)]),
    "unemployment": series_from_pairs([(2020, 8.0), (2021, 7.9), (2022, 7.3), (2023, 7.4)]),
    "interestRates": series_from_pairs([(2020, 0.25), (2021, 0.15), (2022, 2.1), (2023, 3.2)]),
})

# ------------------------------------------------------------------------------
# Full static dataset (used when a whole load cycle is discarded)
# ------------------------------------------------------------------------------
_STATIC_DEBT = series_from_pairs([
    (2019, 2380000), (2020, 2650000), (2021, 2813000),
    (2022, 2956800), (2023, 3101200), (2024, 3250000),
])

_STATIC_GDP_RATIO = series_from_pairs([
    (2019, 98.1), (2020, 114.6), (2021, 112.9),
    (2022, 111.9), (2023, 110.6), (2024, 112.2),
])

_STATIC_EU_COMPARISON: EuComparison = (
    CountryDebtEntry("GR", "Grèce", 172.6, 1),
    CountryDebtEntry("IT", "Italie", 134.6, 2),
    CountryDebtEntry("PT", "Portugal", 120.2, 3),
    CountryDebtEntry("FR", "France", 110.6, 4),
    CountryDebtEntry("ES", "Espagne", 105.5, 5),
    CountryDebtEntry("BE", "Belgique", 105.0, 6),
    CountryDebtEntry("AT", "Autriche", 82.4, 7),
    CountryDebtEntry("DE", "Allemagne", 63.7, 15),
)

_STATIC_ECONOMIC = {
    "gdpGrowth": series_from_pairs([(2020, -8.0), (2021, 6.8), (2022, 2.5), (2023, 0.9), (2024, 1.1)]),
    "inflation": series_from_pairs([(2020, 0.5), (2021, 2.1), (2022, 5.9), (2023, 4.9), (2024, 2.8)]),
    "unemployment": series_from_pairs([(2020, 8.0), (2021, 7.9), (2022, 7.3), (2023, 7.4), (2024, 7.5)]),
    "interestRates": series_from_pairs([(2020, 0.25), (2021, 0.15), (2022, 2.1), (2023, 3.2), (2024, 2.9)]),
}


def static_snapshot() -> CanonicalDataset:
    return CanonicalDataset(
        debt=_STATIC_DEBT,
        gdp_ratio=_STATIC_GDP_RATIO,
        population=POPULATION_SNAPSHOT,
        eu_comparison=_STATIC_EU_COMPARISON,
        economic_indicators=_STATIC_ECONOMIC,
    )


# ------------------------------------------------------------------------------
# Resolver
# ------------------------------------------------------------------------------
FallbackValue = Union[TimeSeries, EuComparison, Mapping[str, TimeSeries]]
InMemory = Optional[Mapping[DatasetKey, TimeSeries]]
FallbackSupplier = Callable[[InMemory], FallbackValue]


def _in_memory_then(key: DatasetKey, snapshot: TimeSeries) -> FallbackSupplier:
    def supply(current: InMemory) -> FallbackValue:
        return first_non_empty((current or {}).get(key), snapshot)
    return supply


FALLBACKS: Mapping[DatasetKey, FallbackSupplier] = MappingProxyType({
    DatasetKey.DEBT: _in_memory_then(DatasetKey.DEBT, DEBT_SNAPSHOT),
    DatasetKey.GDP_RATIO: _in_memory_then(DatasetKey.GDP_RATIO, GDP_RATIO_SNAPSHOT),
    DatasetKey.POPULATION: _in_memory_then(DatasetKey.POPULATION, POPULATION_SNAPSHOT),
    DatasetKey.EU_COMPARISON: lambda current: EU_COMPARISON_SNAPSHOT,
    DatasetKey.ECONOMIC_INDICATORS: lambda current: ECONOMIC_INDICATORS_SNAPSHOT,
})

_BY_IDENTIFIER: Dict[str, DatasetKey] = {k.identifier: k for k in DatasetKey}


def resolve_key(dataset_id: Any) -> DatasetKey:
    """DatasetKey, enum name ('DEBT') or legacy identifier ('demo_pjan')."""
    if isinstance(dataset_id, DatasetKey):
        return dataset_id
    s = str(dataset_id or "").strip()
    if s in _BY_IDENTIFIER:
        return _BY_IDENTIFIER[s]
    try:
        return DatasetKey[s.upper()]
    except KeyError:
        raise UnknownDataset(f"unknown dataset: {dataset_id!r}", dataset=s) from None


def fallback(dataset_id: Any, current: InMemory = None) -> FallbackValue:
    """Substitute for dataset_id. Unknown ids give an empty result; never raises."""
    try:
        key = resolve_key(dataset_id)
    except UnknownDataset as e:
        logger.warning("[fallback] %s", e)
        return ()
    return FALLBACKS[key](current)


__all__ = [
    "DEBT_SNAPSHOT",
    "GDP_RATIO_SNAPSHOT",
    "POPULATION_SNAPSHOT",
    "EU_COMPARISON_SNAPSHOT",
    "ECONOMIC_INDICATORS_SNAPSHOT",
    "FALLBACKS",
    "static_snapshot",
    "resolve_key",
    "fallback",
]
