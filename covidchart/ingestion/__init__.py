# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Upstream mirroring and daily report parsing."""

from .git_sync import GitState, GitSync, GitSyncError, GitTimeoutError, SyncOutcome
from .rows import Record, parse_row
from .schema import Column, MissingRequiredColumn, Schema, resolve

__all__ = [
    "Column",
    "GitState",
    "GitSync",
    "GitSyncError",
    "GitTimeoutError",
    "MissingRequiredColumn",
    "Record",
    "Schema",
    "SyncOutcome",
    "parse_row",
    "resolve",
]
