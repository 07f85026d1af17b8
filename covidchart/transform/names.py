# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Canonical country labels for the daily report ``Country/Region`` column.

The upstream reports renamed entities several times and, for a few weeks,
listed special administrative regions and overseas territories as countries
of their own. Two tables undo that:

* ``REGION_FOLDS`` maps a region that was reported as a country onto its
  sovereign state. The region label survives as a province of that state.
* ``COUNTRY_RENAMES`` maps spelling variants and historical names onto the
  label currently used upstream.

Both tables are read-only and every value is itself canonical, which keeps
:func:`canonicalize` idempotent.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

REGION_FOLDS: Mapping[str, str] = MappingProxyType(
    {
        # Special administrative regions
        "Hong Kong": "China",
        "Hong Kong SAR": "China",
        "Macau": "China",
        "Macao SAR": "China",
        # Overseas departments and collectivities
        "French Guiana": "France",
        "Guadeloupe": "France",
        "Martinique": "France",
        "Mayotte": "France",
        "Reunion": "France",
        "Saint Barthelemy": "France",
        "St. Martin": "France",
        "Saint Martin": "France",
        # Crown dependencies and overseas territories
        "Channel Islands": "United Kingdom",
        "Guernsey": "United Kingdom",
        "Jersey": "United Kingdom",
        "Gibraltar": "United Kingdom",
        "Cayman Islands": "United Kingdom",
        "North Ireland": "United Kingdom",
        "Faroe Islands": "Denmark",
        "Greenland": "Denmark",
        "Aruba": "Netherlands",
        "Curacao": "Netherlands",
        "Curaçao": "Netherlands",
        "Puerto Rico": "US",
        "Guam": "US",
    }
)

COUNTRY_RENAMES: Mapping[str, str] = MappingProxyType(
    {
        "Mainland China": "China",
        "UK": "United Kingdom",
        "United Kingdom of Great Britain and Northern Ireland": "United Kingdom",
        "Kingdom of Eswatini": "Eswatini",
        "Swaziland": "Eswatini",
        "Czech Republic": "Czechia",
        "Ivory Coast": "Cote d'Ivoire",
        "Côte d'Ivoire": "Cote d'Ivoire",
        "South Korea": "Korea, South",
        "Republic of Korea": "Korea, South",
        "Iran (Islamic Republic of)": "Iran",
        "Republic of Moldova": "Moldova",
        "Russian Federation": "Russia",
        "Viet Nam": "Vietnam",
        "Taiwan": "Taiwan*",
        "Taipei and environs": "Taiwan*",
        "occupied Palestinian territory": "West Bank and Gaza",
        "Palestine": "West Bank and Gaza",
        "The Bahamas": "Bahamas",
        "Bahamas, The": "Bahamas",
        "The Gambia": "Gambia",
        "Gambia, The": "Gambia",
        "Republic of Ireland": "Ireland",
        "Vatican City": "Holy See",
        "Cape Verde": "Cabo Verde",
        "East Timor": "Timor-Leste",
        "Republic of the Congo": "Congo (Brazzaville)",
        "Macedonia": "North Macedonia",
        "Others": "Diamond Princess",
        "Cruise Ship": "Diamond Princess",
    }
)

_CANONICAL: Mapping[str, str] = MappingProxyType({**COUNTRY_RENAMES, **REGION_FOLDS})


def canonicalize(raw_name: str) -> str:
    """Return the canonical label for ``raw_name``.

    Unknown names pass through unchanged apart from surrounding whitespace.
    """

    name = (raw_name or "").strip()
    return _CANONICAL.get(name, name)


def folded_region(raw_name: str) -> Optional[str]:
    """Return the region label when ``raw_name`` was folded into a sovereign state."""

    name = (raw_name or "").strip()
    if name in REGION_FOLDS:
        return name
    return None


__all__ = ["COUNTRY_RENAMES", "REGION_FOLDS", "canonicalize", "folded_region"]
