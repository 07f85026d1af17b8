"""Logging setup shared by the ``covidchart`` CLI and the web app."""
from __future__ import annotations

import logging
import os
from typing import Iterable, Optional, Union

import pandas as pd

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
ACCESS_LOGGER_NAME = "covidchart.access"

_HANDLER_MARKER = "_covidchart_handler"

LevelLike = Union[str, int, None]


def _to_level(value: LevelLike, *, env_var: str, default: int) -> int:
    if value is None:
        value = os.getenv(env_var)
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).strip().upper(), default)


def configure_logging(*, level: LevelLike = None, access_level: LevelLike = None) -> None:
    """Install the covidchart handler on the root logger and set levels.

    ``level`` falls back to ``COVIDCHART_LOG_LEVEL`` (INFO) and
    ``access_level`` to ``COVIDCHART_ACCESS_LOG_LEVEL`` (INFO). Safe to call
    more than once; the handler is only added the first time.
    """

    root = logging.getLogger()
    root.setLevel(_to_level(level, env_var="COVIDCHART_LOG_LEVEL", default=logging.INFO))
    if not any(getattr(handler, _HANDLER_MARKER, False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, _HANDLER_MARKER, True)
        root.addHandler(handler)
    # Access lines can be muted without touching pipeline logging.
    logging.getLogger(ACCESS_LOGGER_NAME).setLevel(
        _to_level(access_level, env_var="COVIDCHART_ACCESS_LOG_LEVEL", default=logging.INFO)
    )


def reason_counts(reasons: Optional[Iterable[str]]) -> dict[str, int]:
    """Count skip reasons for one report, sorted by reason."""

    if reasons is None:
        return {}
    series = pd.Series(list(reasons), dtype="string")
    if series.empty:
        return {}
    counts = series.fillna("unknown").value_counts().sort_index()
    return {str(reason): int(count) for reason, count in counts.items()}
