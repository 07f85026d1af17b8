# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Mirror, normalise and publish the CSSE COVID-19 daily reports."""

__version__ = "1.0.0"
