# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

DEFAULTS: Dict[str, Any] = {
    "data_repo_url": "https://github.com/CSSEGISandData/COVID-19",
    "git_path": "./data/git/COVID-19",
    "repo_data_subdir": "csse_covid_19_data/csse_covid_19_daily_reports",
    "public_path": "./www",
    "convert_data_path": "./www/data/daily_reports/json",
    "summary_data_path": "./www/data/daily_reports/summary.json",
    "default_json_name": "2020-01-22.json",
    "git_timeout_s": 60.0,
    "update_interval_s": 3600.0,
    "cycle_timeout_s": 1800.0,
    "monitor_interval_s": 60.0,
    "monitor_timeout_s": 3.0,
    "alias_slots": ("today", "-1day", "-2day"),
}


@dataclass(frozen=True)
class Settings:
    data_repo_url: str
    git_path: Path
    repo_data_subdir: str
    public_path: Path
    convert_data_path: Path
    summary_data_path: Path
    default_json_name: str
    git_timeout_s: float
    update_interval_s: float
    cycle_timeout_s: float
    monitor_interval_s: float
    monitor_timeout_s: float
    alias_slots: Tuple[str, ...]

    @property
    def repo_data_path(self) -> Path:
        """Directory inside the mirror holding the ``MM-DD-YYYY.csv`` reports."""

        return self.git_path / self.repo_data_subdir

    @property
    def default_json_path(self) -> Path:
        return self.convert_data_path / self.default_json_name


def _default_config_path() -> Path:
    env_path = os.getenv("COVIDCHART_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path(__file__).resolve().parent.parent / "config.yaml"


@lru_cache(maxsize=1)
def load() -> Dict[str, Any]:
    """Load the application configuration from YAML."""

    path = _default_config_path()
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        return {}
    return data


def _coerce(name: str, value: Any) -> Any:
    if name.endswith("_path"):
        return Path(str(value)).expanduser()
    if name.endswith("_s"):
        return float(value)
    if name == "alias_slots":
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",")]
        return tuple(str(item) for item in value if str(item).strip())
    return str(value)


def build_settings(overrides: Dict[str, Any] | None = None) -> Settings:
    """Overlay ``overrides`` on :data:`DEFAULTS` and return typed settings.

    Unknown keys are ignored so older config files keep loading.
    """

    merged = dict(DEFAULTS)
    for key, value in (overrides or {}).items():
        if key in DEFAULTS and value is not None:
            merged[key] = value
    values = {f.name: _coerce(f.name, merged[f.name]) for f in fields(Settings)}
    return Settings(**values)


def get_settings() -> Settings:
    cfg = load()
    app_cfg = cfg.get("app", {}) if isinstance(cfg, dict) else {}
    if not isinstance(app_cfg, dict):
        app_cfg = {}
    return build_settings(app_cfg)


__all__ = ["DEFAULTS", "Settings", "build_settings", "get_settings", "load"]
