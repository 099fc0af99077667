# debt_radar/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from debt_radar import config
from debt_radar.routes.debt import router as debt_router
from debt_radar.services.dashboard import DebtDashboard

logger = logging.getLogger("debt-radar")
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))


def create_app(dashboard: Optional[DebtDashboard] = None, load_on_startup: bool = True) -> FastAPI:
    """
    Build the API. The first load cycle runs in the lifespan hook, so the
    service only answers data routes once a complete dataset exists.
    """
    dash = dashboard or DebtDashboard()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.dashboard = dash
        if load_on_startup:
            result = await dash.reload()
            if result.degraded:
                logger.warning("[init] started on degraded data: %s", "; ".join(result.warnings))
            else:
                logger.info("[init] first load cycle done (geo=%s)", dash.geo)
        try:
            yield
        finally:
            await dash.aclose()
            logger.info("[shutdown] real-time counter stopped")

    app = FastAPI(
        title="Debt Radar API",
        description="Public debt series, derived KPIs and a real-time debt estimate",
        version="2025.10.19",
        lifespan=lifespan,
    )
    app.include_router(debt_router)

    @app.get("/")
    def root():
        return {
            "ok": True,
            "geo": dash.geo,
            "ready": dash.ready,
            "routes": [
                "/v1/debt/dataset",
                "/v1/debt/series/{kind}",
                "/v1/debt/metrics",
                "/v1/debt/realtime",
                "/v1/debt/export.csv",
            ],
        }

    @app.get("/healthz")
    def healthz():
        # keep this super fast
        return {"status": "ok"}

    return app


app = create_app()
