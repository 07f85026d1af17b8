# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Discover and read the upstream ``MM-DD-YYYY.csv`` daily reports."""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from covidchart.common.logs import reason_counts
from covidchart.transform.aggregate import Entity, fold

from .rows import Record, parse_row
from .schema import resolve

LOGGER = logging.getLogger(__name__)

DAILY_REPORT_DATE_FORMAT = "%m-%d-%Y"


def report_date(path: Path) -> Optional[date]:
    """Return the date encoded in a daily report file name, if any."""

    if path.suffix != ".csv":
        return None
    try:
        return datetime.strptime(path.stem, DAILY_REPORT_DATE_FORMAT).date()
    except ValueError:
        return None


def discover_daily_reports(data_dir: Path) -> List[Tuple[date, Path]]:
    """Return ``(date, path)`` pairs for every daily report, oldest first.

    Ordering comes from the date in each file name, not from the directory
    listing. Each date appears once: ``1-22-2020.csv`` and ``01-22-2020.csv``
    name the same day, and the zero-padded spelling wins.
    """

    found: List[Tuple[date, Path]] = []
    for path in Path(data_dir).iterdir():
        if not path.is_file():
            continue
        day = report_date(path)
        if day is None:
            continue
        found.append((day, path))
    found.sort(key=lambda item: (item[0], item[1].stem != item[0].strftime(DAILY_REPORT_DATE_FORMAT), item[1].name))

    unique: List[Tuple[date, Path]] = []
    for day, path in found:
        if unique and unique[-1][0] == day:
            LOGGER.warning("%s: ignored, duplicates %s for %s", path.name, unique[-1][1].name, day.isoformat())
            continue
        unique.append((day, path))
    return unique


def read_daily_report(path: Path) -> Dict[str, Entity]:
    """Parse one daily report into a country tree.

    Raises :class:`~covidchart.ingestion.schema.MissingRequiredColumn` when
    the header has no country column.
    """

    records: List[Record] = []
    skipped: List[str] = []
    with Path(path).open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.reader(handle)
        try:
            header = next(reader)
        except StopIteration:
            header = []
        schema = resolve(header)
        for cells in reader:
            if not cells:
                continue
            record = parse_row(cells, schema)
            if record is None:
                skipped.append("width_mismatch" if len(cells) != schema.width else "no_country")
                continue
            records.append(record)
    if skipped:
        LOGGER.debug("%s: skipped rows %s", Path(path).name, reason_counts(skipped))
    return fold(records)


__all__ = [
    "DAILY_REPORT_DATE_FORMAT",
    "discover_daily_reports",
    "read_daily_report",
    "report_date",
]
