# debt_radar/routes/debt.py: JSON surface over the debt pipeline
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from debt_radar.models import SeriesKind, WindowToken, series_to_list
from debt_radar.services.dashboard import DebtDashboard

router = APIRouter(tags=["debt"])

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _dashboard(request: Request) -> DebtDashboard:
    dash = getattr(request.app.state, "dashboard", None)
    if dash is None or not dash.ready:
        raise HTTPException(status_code=503, detail="data not loaded yet")
    return dash

def _status(dash: DebtDashboard) -> Dict[str, Any]:
    res = dash.last_result
    return {
        "degraded": res.degraded,
        "warnings": list(res.warnings),
        "sources": dict(res.sources),
        "loadedAt": res.loaded_at.isoformat(),
    }

# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------

@router.get("/v1/debt/dataset", summary="Canonical dataset of the current load cycle")
def get_dataset(request: Request) -> Dict[str, Any]:
    dash = _dashboard(request)
    out = dash.get_canonical_dataset().to_dict()
    out["status"] = _status(dash)
    return out


@router.get("/v1/debt/series/{kind}", summary="One series sliced to a trailing window")
def get_series(
    request: Request,
    kind: str,
    window: str = Query("5Y", description="5Y | 10Y | 20Y | ALL"),
    reference_year: Optional[int] = Query(None, description="Defaults to the current year"),
) -> Dict[str, Any]:
    dash = _dashboard(request)
    try:
        k = SeriesKind.parse(kind)
        token = WindowToken.parse(window)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    series = dash.get_filtered_series(k, token, reference_year)
    return {"kind": k.value, "window": token.value, "series": series_to_list(series)}


@router.get("/v1/debt/metrics", summary="Derived KPIs")
def get_metrics(request: Request) -> Dict[str, Any]:
    dash = _dashboard(request)
    out = dash.get_derived_metrics().to_dict()
    out["status"] = _status(dash)
    return out


@router.get("/v1/debt/realtime", summary="Current real-time debt estimate")
def get_realtime(request: Request) -> Dict[str, Any]:
    return _dashboard(request).real_time_snapshot()


@router.get("/v1/debt/export.csv", summary="Data table as CSV", response_class=PlainTextResponse)
def get_export(request: Request) -> PlainTextResponse:
    csv_text = _dashboard(request).export_csv()
    return PlainTextResponse(
        csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="dette-publique.csv"'},
    )


@router.post("/v1/debt/reload", summary="Run a new load cycle")
async def post_reload(request: Request) -> Dict[str, Any]:
    dash = getattr(request.app.state, "dashboard", None)
    if dash is None:
        raise HTTPException(status_code=503, detail="dashboard not configured")
    await dash.reload()
    return {"ok": True, "status": _status(dash)}
