# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Header resolution for the daily report CSVs.

The upstream column names changed over time (``Country/Region`` became
``Country_Region``, ``Lat`` replaced ``Latitude`` and so on). ``resolve`` maps
whichever variant a file uses onto :class:`Column`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence


class Column(str, Enum):
    COUNTRY = "country"
    PROVINCE = "province"
    SUB_REGION = "sub_region"
    LAST_UPDATE = "last_update"
    CONFIRMED = "confirmed"
    DEATHS = "deaths"
    RECOVERED = "recovered"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"


HEADER_SYNONYMS: Mapping[str, Column] = MappingProxyType(
    {
        "Country/Region": Column.COUNTRY,
        "Country_Region": Column.COUNTRY,
        "Province/State": Column.PROVINCE,
        "Province_State": Column.PROVINCE,
        "Admin2": Column.SUB_REGION,
        "Last Update": Column.LAST_UPDATE,
        "Last_Update": Column.LAST_UPDATE,
        "Confirmed": Column.CONFIRMED,
        "Deaths": Column.DEATHS,
        "Recovered": Column.RECOVERED,
        "Latitude": Column.LATITUDE,
        "Lat": Column.LATITUDE,
        "Longitude": Column.LONGITUDE,
        "Long_": Column.LONGITUDE,
    }
)

REQUIRED_COLUMNS: tuple[Column, ...] = (Column.COUNTRY,)


class MissingRequiredColumn(ValueError):
    """Raised when a header lacks a column every report must carry."""

    def __init__(self, column: Column, header: Sequence[str]) -> None:
        self.column = column
        self.header = list(header)
        super().__init__(f"missing required column '{column.value}' in header {self.header}")


@dataclass(frozen=True)
class Schema:
    """Column positions resolved from one header row."""

    indices: Mapping[Column, int]
    width: int

    def index(self, column: Column) -> Optional[int]:
        return self.indices.get(column)

    def __contains__(self, column: object) -> bool:
        return column in self.indices


def _clean_header_cell(cell: str) -> str:
    return (cell or "").replace("\ufeff", "").strip()


def resolve(header_row: Sequence[str]) -> Schema:
    """Resolve ``header_row`` into a :class:`Schema`.

    Unknown columns are ignored. When a logical column appears twice the
    first occurrence wins.
    """

    indices: dict[Column, int] = {}
    for position, cell in enumerate(header_row):
        column = HEADER_SYNONYMS.get(_clean_header_cell(cell))
        if column is not None:
            indices.setdefault(column, position)
    for column in REQUIRED_COLUMNS:
        if column not in indices:
            raise MissingRequiredColumn(column, header_row)
    return Schema(indices=MappingProxyType(indices), width=len(header_row))


__all__ = [
    "Column",
    "HEADER_SYNONYMS",
    "MissingRequiredColumn",
    "REQUIRED_COLUMNS",
    "Schema",
    "resolve",
]
