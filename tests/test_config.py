from __future__ import annotations

from pathlib import Path

import pytest

from covidchart import config as covidchart_config
from covidchart.config import DEFAULTS, build_settings, get_settings


def test_defaults_without_config_file() -> None:
    settings = get_settings()
    assert settings.git_timeout_s == 60.0
    assert settings.update_interval_s == 3600.0
    assert settings.monitor_timeout_s == 3.0
    assert settings.alias_slots == ("today", "-1day", "-2day")
    assert settings.default_json_path.name == "2020-01-22.json"
    assert settings.repo_data_path == Path(DEFAULTS["git_path"]) / DEFAULTS["repo_data_subdir"]


def test_yaml_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "app:\n"
        "  git_path: /srv/mirror\n"
        "  git_timeout_s: 15\n"
        "  alias_slots: ['today', '-1day']\n"
        "  unknown_key: ignored\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("COVIDCHART_CONFIG_PATH", str(config_path))
    covidchart_config.load.cache_clear()

    settings = get_settings()

    assert settings.git_path == Path("/srv/mirror")
    assert settings.git_timeout_s == 15.0
    assert settings.alias_slots == ("today", "-1day")
    assert settings.update_interval_s == 3600.0


def test_packaged_config_matches_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("COVIDCHART_CONFIG_PATH")
    covidchart_config.load.cache_clear()
    assert get_settings() == build_settings()


def test_alias_slots_from_comma_string() -> None:
    assert build_settings({"alias_slots": "today, -1day"}).alias_slots == ("today", "-1day")
