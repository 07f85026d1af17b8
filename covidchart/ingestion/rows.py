"""Typed records for single daily report rows."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from .schema import Column, Schema

# Tried in order; the upstream switched formats twice during 2020.
LAST_UPDATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y %H:%M",
    "%m/%d/%y %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
)


@dataclass(frozen=True)
class Record:
    country: str
    province: str = ""
    sub_region: str = ""
    confirmed: int = 0
    deaths: int = 0
    recovered: int = 0
    last_update: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


def parse_count(value: str | None) -> int:
    """Parse a non-negative integer counter; anything else counts as zero."""

    if value is None:
        return 0
    text = value.strip()
    if not text:
        return 0
    try:
        number = int(text)
    except ValueError:
        return 0
    return number if number > 0 else 0


def parse_coordinate(value: str | None) -> Optional[float]:
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_last_update(value: str | None) -> Optional[datetime]:
    """Parse an upstream ``Last Update`` cell as a UTC timestamp."""

    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    for fmt in LAST_UPDATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)
    return None


def _cell(cells: Sequence[str], schema: Schema, column: Column) -> Optional[str]:
    index = schema.index(column)
    if index is None:
        return None
    return cells[index]


def parse_row(cells: Sequence[str], schema: Schema) -> Optional[Record]:
    """Convert one data row into a :class:`Record`.

    Returns ``None`` when the row width does not match the header or the row
    has no country. Individual cells that fail to convert degrade to zero or
    ``None`` and never drop the row.
    """

    if len(cells) != schema.width:
        return None
    country = (_cell(cells, schema, Column.COUNTRY) or "").strip()
    if not country:
        return None
    province = (_cell(cells, schema, Column.PROVINCE) or "").strip()
    # A sub-region is only meaningful beneath a province.
    sub_region = (_cell(cells, schema, Column.SUB_REGION) or "").strip() if province else ""
    return Record(
        country=country,
        province=province,
        sub_region=sub_region,
        confirmed=parse_count(_cell(cells, schema, Column.CONFIRMED)),
        deaths=parse_count(_cell(cells, schema, Column.DEATHS)),
        recovered=parse_count(_cell(cells, schema, Column.RECOVERED)),
        last_update=parse_last_update(_cell(cells, schema, Column.LAST_UPDATE)),
        latitude=parse_coordinate(_cell(cells, schema, Column.LATITUDE)),
        longitude=parse_coordinate(_cell(cells, schema, Column.LONGITUDE)),
    )


__all__ = [
    "LAST_UPDATE_FORMATS",
    "Record",
    "parse_coordinate",
    "parse_count",
    "parse_last_update",
    "parse_row",
]
