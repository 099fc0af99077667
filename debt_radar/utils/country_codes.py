# debt_radar/utils/country_codes.py
from __future__ import annotations
from typing import Optional, Dict
import re

import pycountry

# French display names used by the EU comparison table, plus the Eurostat
# code quirks (EL for Greece, UK for the United Kingdom).
_BUILTIN: Dict[str, Dict[str, str]] = {
    "grece":      {"name": "Greece", "iso_alpha_2": "GR", "iso_alpha_3": "GRC"},
    "grèce":      {"name": "Greece", "iso_alpha_2": "GR", "iso_alpha_3": "GRC"},
    "el":         {"name": "Greece", "iso_alpha_2": "GR", "iso_alpha_3": "GRC"},
    "italie":     {"name": "Italy", "iso_alpha_2": "IT", "iso_alpha_3": "ITA"},
    "espagne":    {"name": "Spain", "iso_alpha_2": "ES", "iso_alpha_3": "ESP"},
    "belgique":   {"name": "Belgium", "iso_alpha_2": "BE", "iso_alpha_3": "BEL"},
    "autriche":   {"name": "Austria", "iso_alpha_2": "AT", "iso_alpha_3": "AUT"},
    "allemagne":  {"name": "Germany", "iso_alpha_2": "DE", "iso_alpha_3": "DEU"},
    "uk":         {"name": "United Kingdom", "iso_alpha_2": "GB", "iso_alpha_3": "GBR"},
}

def _norm(text: str) -> str:
    t = re.sub(r"[\u200b\s]+", " ", (text or "")).strip().lower()
    t = t.replace(".", "").replace("’", "'")
    return t

def get_country_codes(country: str) -> Dict[str, Optional[str]]:
    """
    Return a dict with: name, iso_alpha_2, iso_alpha_3
    Never raises; returns None values on failure.
    """
    if not country:
        return {"name": None, "iso_alpha_2": None, "iso_alpha_3": None}

    key = _norm(country)

    # 1) builtin quick map
    if key in _BUILTIN:
        return dict(_BUILTIN[key])

    # 2) pycountry lookup (names, ISO2, ISO3, numeric)
    try:
        m = pycountry.countries.lookup(country.strip())
        return {
            "name": getattr(m, "name", country),
            "iso_alpha_2": getattr(m, "alpha_2", None),
            "iso_alpha_3": getattr(m, "alpha_3", None),
        }
    except LookupError:
        pass

    return {"name": country, "iso_alpha_2": None, "iso_alpha_3": None}

def to_iso2(country: str) -> Optional[str]:
    """Best-effort ISO2 for a name or code; None when unresolvable."""
    return get_country_codes(country).get("iso_alpha_2")
