# debt_radar/services/period_filter.py
from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from debt_radar.models import TimeSeries, WindowToken

_YEARS_BACK: Dict[WindowToken, Optional[int]] = {
    WindowToken.Y5: 5,
    WindowToken.Y10: 10,
    WindowToken.Y20: 20,
    WindowToken.ALL: None,
}


def window_bound(token: "WindowToken | str", reference_year: Optional[int] = None) -> Optional[int]:
    """Inclusive lower year for token; None means no bound (ALL)."""
    back = _YEARS_BACK[WindowToken.parse(token)]
    if back is None:
        return None
    ref = reference_year if reference_year is not None else date.today().year
    return int(ref) - back


def filter_window(
    series: TimeSeries,
    token: "WindowToken | str",
    reference_year: Optional[int] = None,
) -> TimeSeries:
    """
    Keep points with year >= bound, in their original order.
    There is no upper bound: a placeholder for a future year stays in.
    """
    bound = window_bound(token, reference_year)
    if bound is None:
        return tuple(series)
    return tuple(p for p in series if p.year >= bound)


__all__ = ["window_bound", "filter_window"]
