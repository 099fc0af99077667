# debt_radar/providers/sdmx.py
from __future__ import annotations

"""
Eurostat JSON-stat parsing.

The dissemination API answers with a dimensional document:

    {
      "dimension": {"geo": {...}, "time": {"category": {"index": {"2023": 0, "2024": 1}}}},
      "value": {"0": 3101200.0, "1": 3250000.0}
    }

Every dimension except time is pinned by the query filters, so observation
offsets map one-to-one onto time labels.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from debt_radar.errors import MalformedResponse
from debt_radar.models import TimePoint, TimeSeries, make_series

logger = logging.getLogger("debt-radar")


def _time_axis_key(dimension: Mapping[str, Any]) -> str:
    # 'time' or 'TIME' depending on dataset
    for key in dimension.keys():
        if str(key).lower() == "time":
            return key
    return "time"


def _lookup_value(values: Mapping[Any, Any], offset: Any) -> Optional[Any]:
    # value keys are strings in the JSON, but accept int keys too
    if str(offset) in values:
        return values[str(offset)]
    try:
        return values.get(int(offset))
    except (TypeError, ValueError):
        return None


def parse_time_series(payload: Any) -> TimeSeries:
    """
    Strict parse of a dimensional document into a TimeSeries.
    Raises MalformedResponse when the time axis cannot be read.
    Documents without 'dimension' or 'value' are simply empty.
    """
    if not isinstance(payload, Mapping):
        raise MalformedResponse(f"expected a JSON object, got {type(payload).__name__}")
    if "dimension" not in payload or "value" not in payload:
        return ()

    dim = payload.get("dimension")
    values = payload.get("value")
    if not isinstance(dim, Mapping) or not isinstance(values, Mapping):
        raise MalformedResponse("'dimension' and 'value' must be objects")

    time_dim = dim.get(_time_axis_key(dim))
    try:
        time_index: Dict[str, Any] = time_dim["category"]["index"]
    except (KeyError, TypeError):
        raise MalformedResponse("no time axis in 'dimension'")
    if not isinstance(time_index, Mapping):
        raise MalformedResponse("time axis 'category.index' is not an object")

    points = []
    # Labels are 'YYYY'; lexicographic order is chronological.
    for label in sorted(time_index.keys()):
        v = _lookup_value(values, time_index[label])
        if v is None:
            continue
        try:
            points.append(TimePoint(year=int(str(label)[:4]), value=float(v)))
        except (TypeError, ValueError):
            raise MalformedResponse(f"cannot read observation {label!r}={v!r}")
    return make_series(points)


def normalize(payload: Any) -> TimeSeries:
    """Parse a dimensional document; anything unreadable becomes an empty series."""
    try:
        return parse_time_series(payload)
    except MalformedResponse as e:
        logger.warning("[Eurostat] malformed response: %s", e)
        return ()


__all__ = ["parse_time_series", "normalize"]
