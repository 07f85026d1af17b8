# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Name canonicalisation, tree aggregation and rolling summaries."""

from .aggregate import CDR, Entity, fold, tree_to_payload
from .names import canonicalize, folded_region
from .summary import SummaryBuilder, WorldSummary, build_summary

__all__ = [
    "CDR",
    "Entity",
    "SummaryBuilder",
    "WorldSummary",
    "build_summary",
    "canonicalize",
    "fold",
    "folded_region",
    "tree_to_payload",
]
