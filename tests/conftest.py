import httpx
import pytest

DEBT = [(2019, 2380000.0), (2020, 2650000.0), (2021, 2813000.0),
        (2022, 2956800.0), (2023, 3101200.0), (2024, 3250000.0)]
RATIO = [(2019, 98.1), (2020, 114.6), (2021, 112.9), (2022, 111.9), (2023, 110.6), (2024, 112.2)]
POPULATION = [(2024, 68400000.0)]


def eurostat_doc(pairs, time_key="time", nulls=()):
    """Build a minimal Eurostat JSON-stat document with only 'time' varying."""
    index = {str(y): i for i, (y, _) in enumerate(pairs)}
    values = {str(i): (None if y in nulls else v) for i, (y, v) in enumerate(pairs)}
    return {
        "version": "2.0",
        "class": "dataset",
        "id": ["freq", "geo", time_key],
        "dimension": {
            "freq": {"category": {"index": {"A": 0}}},
            "geo": {"category": {"index": {"FR": 0}}},
            time_key: {"category": {"index": index}},
        },
        "value": values,
    }


def route(request: httpx.Request):
    """Which live dataset a request is for: 'debt', 'ratio' or 'population'."""
    path = request.url.path
    if path.endswith("/demo_pjan"):
        return "population"
    if path.endswith("/gov_10dd_edpt1"):
        unit = request.url.params.get("unit")
        return "ratio" if unit == "PC_GDP" else "debt"
    return None


def make_transport(overrides=None, calls=None):
    """
    MockTransport serving DEBT / RATIO / POPULATION.
    overrides maps 'debt' | 'ratio' | 'population' to an httpx.Response,
    a payload dict, or an exception instance to raise.
    """
    overrides = overrides or {}
    defaults = {"debt": DEBT, "ratio": RATIO, "population": POPULATION}

    def handler(request: httpx.Request) -> httpx.Response:
        name = route(request)
        if calls is not None:
            calls.append((name, dict(request.url.params)))
        if name is None:
            return httpx.Response(404, json={"error": "unknown dataset"})
        if name in overrides:
            o = overrides[name]
            if isinstance(o, BaseException):
                raise o
            if isinstance(o, httpx.Response):
                return o
            return httpx.Response(200, json=o)
        return httpx.Response(200, json=eurostat_doc(defaults[name]))

    return httpx.MockTransport(handler)


@pytest.fixture
def transport():
    return make_transport()
