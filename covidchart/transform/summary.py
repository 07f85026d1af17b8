# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Rolling per-country series built from one cycle's daily trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .aggregate import CDR, Entity, cdr_sum

SUMMARY_DATE_FORMAT = "%Y/%m/%d"


@dataclass(frozen=True)
class DailySeriesPoint:
    date: date
    cdr: CDR

    def to_payload(self) -> Dict[str, Any]:
        return {"date": self.date.strftime(SUMMARY_DATE_FORMAT), "cdr": list(self.cdr)}


@dataclass
class EntitySummary:
    daily: List[DailySeriesPoint] = field(default_factory=list)
    cdr: CDR = CDR()

    def append(self, point: DailySeriesPoint) -> None:
        if self.daily and point.date <= self.daily[-1].date:
            raise ValueError(
                f"series point {point.date.isoformat()} does not follow {self.daily[-1].date.isoformat()}"
            )
        self.daily.append(point)
        self.cdr = point.cdr

    def to_payload(self) -> Dict[str, Any]:
        return {"daily": [point.to_payload() for point in self.daily], "cdr": list(self.cdr)}


@dataclass
class WorldSummary:
    countrys: Dict[str, EntitySummary] = field(default_factory=dict)
    cdr: CDR = CDR()

    def to_payload(self) -> Dict[str, Any]:
        return {
            "countrys": {name: summary.to_payload() for name, summary in self.countrys.items()},
            "cdr": list(self.cdr),
        }


class SummaryBuilder:
    """Accumulate daily trees in ascending date order.

    ``add_day`` must be called once per date with strictly increasing dates;
    ``build`` derives the global total from each entity's latest triple.
    """

    def __init__(self) -> None:
        self._countrys: Dict[str, EntitySummary] = {}
        self._last_day: Optional[date] = None

    @property
    def last_day(self) -> Optional[date]:
        return self._last_day

    def add_day(self, day: date, tree: Mapping[str, Entity]) -> None:
        if self._last_day is not None and day <= self._last_day:
            raise ValueError(
                f"daily reports must be added in ascending order: {day.isoformat()} after "
                f"{self._last_day.isoformat()}"
            )
        self._last_day = day
        for name, entity in tree.items():
            summary = self._countrys.get(name)
            if summary is None:
                summary = self._countrys[name] = EntitySummary()
            summary.append(DailySeriesPoint(day, entity.cdr))

    def build(self) -> WorldSummary:
        countrys = dict(self._countrys)
        return WorldSummary(countrys=countrys, cdr=cdr_sum(item.cdr for item in countrys.values()))


def build_summary(dated_trees: Iterable[Tuple[date, Mapping[str, Entity]]]) -> WorldSummary:
    builder = SummaryBuilder()
    for day, tree in dated_trees:
        builder.add_day(day, tree)
    return builder.build()


__all__ = [
    "DailySeriesPoint",
    "EntitySummary",
    "SUMMARY_DATE_FORMAT",
    "SummaryBuilder",
    "WorldSummary",
    "build_summary",
]
