# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Common utilities shared across covidchart components."""

from .logs import ACCESS_LOGGER_NAME, configure_logging, reason_counts
from .run_io import ensure_dir, write_json

__all__ = [
    "ACCESS_LOGGER_NAME",
    "configure_logging",
    "reason_counts",
    "ensure_dir",
    "write_json",
]
