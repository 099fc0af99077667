# debt_radar/config.py
from __future__ import annotations

"""
Runtime configuration for Debt Radar.

Everything is read once from the environment at import time, with defaults
that reproduce the public dashboard (France, Eurostat dissemination API).
"""

import os

# ------------------------------------------------------------------------------
# Eurostat
# ------------------------------------------------------------------------------
EUROSTAT_BASE_URL = os.getenv(
    "EUROSTAT_BASE_URL",
    "https://ec.europa.eu/eurostat/api/dissemination/statistics/1.0/data",
)
# httpx's own default; one attempt per dataset per cycle, no retries
TIMEOUT = float(os.getenv("EUROSTAT_TIMEOUT_SEC", "5.0"))

USER_AGENT = "debt-radar/1.0 (+eurostat_provider)"

# ------------------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------------------
GEO = os.getenv("DEBT_RADAR_GEO", "FR").strip().upper()

# all_or_nothing | per_dataset
BATCH_POLICY = os.getenv("DEBT_RADAR_BATCH_POLICY", "all_or_nothing").strip().lower()

# Assumed average rate on the debt stock; not fetched.
ASSUMED_INTEREST_RATE = float(os.getenv("DEBT_RADAR_INTEREST_RATE", "0.028"))

# Used for per-capita figures when no population point is available.
DEFAULT_POPULATION = float(os.getenv("DEBT_RADAR_DEFAULT_POPULATION", "68000000"))

# Real-time counter cadence
UPDATE_INTERVAL_MS = int(os.getenv("DEBT_RADAR_UPDATE_INTERVAL_MS", "1000"))

LOG_LEVEL = os.getenv("DEBT_RADAR_LOG_LEVEL", "INFO").upper()
