# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Fold daily report rows into a country → province → sub-region tree.

Totals are always recomputed bottom-up: a node with children reports the sum
of its children and nothing else. Rows that sit directly on a node which also
has children in the same file are kept as a child named after the node, so
no counts are lost and none are counted twice. That is the only case in
which a node gets a child no row named.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, NamedTuple, Optional

from covidchart.ingestion.rows import Record

from .names import canonicalize, folded_region


class CDR(NamedTuple):
    """Confirmed, deaths, recovered."""

    confirmed: int = 0
    deaths: int = 0
    recovered: int = 0

    def plus(self, other: "CDR") -> "CDR":
        return CDR(
            self.confirmed + other.confirmed,
            self.deaths + other.deaths,
            self.recovered + other.recovered,
        )


def cdr_sum(values: Iterable[CDR]) -> CDR:
    total = CDR()
    for value in values:
        total = total.plus(value)
    return total


@dataclass
class Entity:
    confirmed: int = 0
    deaths: int = 0
    recovered: int = 0
    last_update: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    children: Dict[str, "Entity"] = field(default_factory=dict)

    @property
    def cdr(self) -> CDR:
        return CDR(self.confirmed, self.deaths, self.recovered)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "confirmed": self.confirmed,
            "deaths": self.deaths,
            "recovered": self.recovered,
        }
        if self.last_update is not None:
            payload["last_update"] = int(self.last_update.timestamp())
        if self.latitude is not None:
            payload["latitude"] = self.latitude
        if self.longitude is not None:
            payload["longitude"] = self.longitude
        if self.children:
            payload["children"] = {name: child.to_payload() for name, child in self.children.items()}
        return payload


@dataclass
class _Accumulator:
    own: CDR = CDR()
    rows: int = 0
    last_update: Optional[datetime] = None
    coordinates: set = field(default_factory=set)
    children: Dict[str, "_Accumulator"] = field(default_factory=dict)

    def child(self, name: str) -> "_Accumulator":
        node = self.children.get(name)
        if node is None:
            node = self.children[name] = _Accumulator()
        return node

    def add(self, record: Record) -> None:
        self.own = self.own.plus(CDR(record.confirmed, record.deaths, record.recovered))
        self.rows += 1
        if record.last_update is not None and (
            self.last_update is None or record.last_update > self.last_update
        ):
            self.last_update = record.last_update
        if record.coordinates is not None:
            self.coordinates.add(record.coordinates)

    def absorb_own(self, other: "_Accumulator") -> None:
        self.own = self.own.plus(other.own)
        self.rows += other.rows
        if other.last_update is not None and (
            self.last_update is None or other.last_update > self.last_update
        ):
            self.last_update = other.last_update
        self.coordinates |= other.coordinates

    def finalize(self, name: str) -> Entity:
        if self.children and self.rows:
            self.child(name).absorb_own(self)
            self.own, self.rows, self.last_update, self.coordinates = CDR(), 0, None, set()
        if self.children:
            children = {key: self.children[key].finalize(key) for key in sorted(self.children)}
            total = cdr_sum(child.cdr for child in children.values())
            return Entity(*total, children=children)
        latitude = longitude = None
        if len(self.coordinates) == 1:
            latitude, longitude = next(iter(self.coordinates))
        return Entity(
            *self.own,
            last_update=self.last_update,
            latitude=latitude,
            longitude=longitude,
        )


def fold(records: Iterable[Record]) -> Dict[str, Entity]:
    """Aggregate ``records`` into a mapping of canonical country → :class:`Entity`.

    The result does not depend on the order of ``records``.
    """

    roots: Dict[str, _Accumulator] = {}
    for record in records:
        country = canonicalize(record.country)
        province = record.province or folded_region(record.country) or ""
        node = roots.get(country)
        if node is None:
            node = roots[country] = _Accumulator()
        if province:
            node = node.child(province)
            if record.sub_region:
                node = node.child(record.sub_region)
        node.add(record)
    return {name: roots[name].finalize(name) for name in sorted(roots)}


def tree_to_payload(tree: Dict[str, Entity]) -> Dict[str, Any]:
    return {name: entity.to_payload() for name, entity in tree.items()}


__all__ = ["CDR", "Entity", "cdr_sum", "fold", "tree_to_payload"]
