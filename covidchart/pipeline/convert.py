# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Convert every daily report to JSON and write the rolling summary."""

from __future__ import annotations

import csv
import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from covidchart.common.run_io import ensure_dir, write_json
from covidchart.ingestion.daily_reports import discover_daily_reports, read_daily_report
from covidchart.ingestion.schema import MissingRequiredColumn
from covidchart.transform.aggregate import tree_to_payload
from covidchart.transform.summary import SummaryBuilder, WorldSummary

LOGGER = logging.getLogger(__name__)

OUTPUT_DATE_FORMAT = "%Y-%m-%d"


class CycleCancelled(RuntimeError):
    """Raised inside a cycle once its cancellation token is set."""


@dataclass
class ConversionReport:
    written: List[date] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    summary: Optional[WorldSummary] = None

    @property
    def latest(self) -> Optional[date]:
        return self.written[-1] if self.written else None


def output_path_for(output_dir: Path, day: date) -> Path:
    return Path(output_dir) / f"{day.strftime(OUTPUT_DATE_FORMAT)}.json"


def _check_cancel(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise CycleCancelled("conversion cancelled")


def convert_daily_reports(
    data_dir: Path,
    output_dir: Path,
    summary_path: Path,
    *,
    cancel: Optional[threading.Event] = None,
) -> ConversionReport:
    """Convert each report under ``data_dir`` oldest first, then write the summary.

    A file with an unusable header or an unwritable output is skipped; the
    rest of the cycle carries on. Failing to write the summary propagates.
    """

    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(f"daily report directory missing: {data_dir}")
    ensure_dir(output_dir)

    report = ConversionReport()
    builder = SummaryBuilder()
    for day, path in discover_daily_reports(data_dir):
        _check_cancel(cancel)
        try:
            tree = read_daily_report(path)
        except MissingRequiredColumn as exc:
            LOGGER.warning("%s: skipped, %s", path.name, exc)
            report.skipped.append(path.name)
            continue
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            LOGGER.warning("%s: skipped, could not read: %s", path.name, exc)
            report.skipped.append(path.name)
            continue

        target = output_path_for(output_dir, day)
        try:
            write_json(target, tree_to_payload(tree), indent=None)
        except OSError as exc:
            LOGGER.warning("%s: failed to write %s: %s", path.name, target, exc)
            report.skipped.append(path.name)
            continue
        builder.add_day(day, tree)
        report.written.append(day)

    _check_cancel(cancel)
    summary = builder.build()
    write_json(summary_path, summary.to_payload(), indent=None)
    report.summary = summary
    LOGGER.info(
        "Converted %d daily reports (skipped %d), latest=%s, summary=%s",
        len(report.written),
        len(report.skipped),
        report.latest.isoformat() if report.latest else "none",
        summary_path,
    )
    return report


__all__ = [
    "ConversionReport",
    "CycleCancelled",
    "OUTPUT_DATE_FORMAT",
    "convert_daily_reports",
    "output_path_for",
]
