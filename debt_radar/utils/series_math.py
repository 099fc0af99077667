from __future__ import annotations
from typing import Dict, Optional, Tuple
from math import isfinite

from debt_radar.models import TimePoint, TimeSeries

def latest(series: TimeSeries) -> Optional[TimePoint]:
    # assumes series is already sorted ascending (make_series)
    if not series:
        return None
    return series[-1]

def last_two(series: TimeSeries) -> Optional[Tuple[TimePoint, TimePoint]]:
    """(previous, latest) or None when fewer than two points."""
    if len(series) < 2:
        return None
    return series[-2], series[-1]

def by_year(series: TimeSeries) -> Dict[int, float]:
    return {p.year: p.value for p in series}

def pct_change(cur: float, prev: float) -> Optional[float]:
    try:
        c, p = float(cur), float(prev)
    except Exception:
        return None
    if p == 0 or not isfinite(c) or not isfinite(p):
        return None
    return (c / p - 1.0) * 100.0

def yoy_pct_by_year(series: TimeSeries) -> Dict[int, float]:
    """Given an annual series, return {year: pct change vs year-1}.

    Years whose previous calendar year is missing get 0.0, as the data table did.
    """
    values = by_year(series)
    out: Dict[int, float] = {}
    for p in series:
        prev = values.get(p.year - 1)
        change = pct_change(p.value, prev) if prev is not None else None
        out[p.year] = change if change is not None else 0.0
    return out

def first_non_empty(*series: Optional[TimeSeries]) -> TimeSeries:
    for s in series:
        if s:
            return s
    return ()
