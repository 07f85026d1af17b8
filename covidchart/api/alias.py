# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Swappable pointers from stable URLs to the latest dated JSON files.

Readers share the lock; a writer holds it only for the pointer assignment.
File discovery and sorting happen before the lock is taken.
"""

from __future__ import annotations

import logging
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Protocol, Sequence, runtime_checkable

LOGGER = logging.getLogger(__name__)

_DATED_JSON = re.compile(r"^\d{4}-\d{2}-\d{2}\.json$")


@runtime_checkable
class Alias(Protocol):
    """Capability every published pointer offers."""

    def get_path(self) -> Path:
        ...

    def set_path(self, path: Path) -> None:
        ...


class _ReadWriteLock:
    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class AliasHandler:
    def __init__(self, path: Path | str = "") -> None:
        self._lock = _ReadWriteLock()
        self._path = Path(path)

    def get_path(self) -> Path:
        with self._lock.read():
            return self._path

    def set_path(self, path: Path) -> None:
        path = Path(path)
        with self._lock.write():
            self._path = path


class AliasRegistry:
    """Named alias slots, most recent first (``today``, ``-1day``, ...)."""

    def __init__(self, slots: Sequence[str], default_path: Path | str) -> None:
        if not slots:
            raise ValueError("at least one alias slot is required")
        self._slots: Dict[str, Alias] = {name: AliasHandler(default_path) for name in slots}

    @property
    def names(self) -> List[str]:
        return list(self._slots)

    def __getitem__(self, name: str) -> Alias:
        return self._slots[name]

    def aliases(self) -> List[Alias]:
        return list(self._slots.values())

    def paths(self) -> Dict[str, Path]:
        return {name: alias.get_path() for name, alias in self._slots.items()}

    def publish_latest(self, output_dir: Path) -> List[Path]:
        return set_json_data_path(self.aliases(), output_dir)


def list_dated_outputs(output_dir: Path) -> List[Path]:
    """Return ``YYYY-MM-DD.json`` files in ``output_dir``, newest first."""

    directory = Path(output_dir)
    if not directory.is_dir():
        return []
    found = [path for path in directory.iterdir() if path.is_file() and _DATED_JSON.match(path.name)]
    return sorted(found, key=lambda path: path.name, reverse=True)


def set_json_data_path(aliases: Sequence[Alias], output_dir: Path) -> List[Path]:
    """Point ``aliases`` at the newest dated outputs, most recent first.

    Slots beyond the number of available files keep their current path.
    Returns the paths that were assigned.
    """

    files = list_dated_outputs(output_dir)
    assigned: List[Path] = []
    for alias, path in zip(aliases, files):
        alias.set_path(path)
        assigned.append(path)
    if assigned:
        LOGGER.info("Published aliases: %s", ", ".join(path.name for path in assigned))
    return assigned


__all__ = [
    "Alias",
    "AliasHandler",
    "AliasRegistry",
    "list_dated_outputs",
    "set_json_data_path",
]
