from __future__ import annotations

import os
import shutil
import subprocess
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from covidchart import config as covidchart_config
from covidchart.config import Settings, build_settings

GIT_AVAILABLE = shutil.which("git") is not None

_GIT_IDENTITY = [
    "-c",
    "user.name=covidchart-tests",
    "-c",
    "user.email=tests@covidchart.invalid",
    "-c",
    "commit.gpgsign=false",
]


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # Keep a developer's config file out of the tests.
    monkeypatch.setenv("COVIDCHART_CONFIG_PATH", str(tmp_path / "absent-config.yaml"))
    covidchart_config.load.cache_clear()
    yield
    covidchart_config.load.cache_clear()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    www = tmp_path / "www"
    return build_settings(
        {
            "git_path": tmp_path / "git" / "COVID-19",
            "public_path": www,
            "convert_data_path": www / "data" / "daily_reports" / "json",
            "summary_data_path": www / "data" / "daily_reports" / "summary.json",
            "git_timeout_s": 30,
            "cycle_timeout_s": 30,
            "monitor_timeout_s": 0.5,
        }
    )


@pytest.fixture()
def write_report() -> Callable[[Path, str, str], Path]:
    """Write a dedented CSV report named ``name`` into ``directory``."""

    def _write(directory: Path, name: str, text: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
        return path

    return _write


def _run_git(cwd: Path, *args: str) -> str:
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    completed = subprocess.run(
        ["git", *_GIT_IDENTITY, *args],
        cwd=str(cwd),
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )
    return completed.stdout


@pytest.fixture()
def upstream_repo(tmp_path: Path) -> Path:
    """A local repository standing in for the upstream data repository."""

    if not GIT_AVAILABLE:
        pytest.skip("git executable not available")
    repo = tmp_path / "upstream"
    repo.mkdir()
    _run_git(repo, "init", "--quiet")
    reports = repo / "csse_covid_19_data" / "csse_covid_19_daily_reports"
    reports.mkdir(parents=True)
    (reports / "01-22-2020.csv").write_text(
        "Province/State,Country/Region,Last Update,Confirmed,Deaths,Recovered\n"
        "Hubei,Mainland China,1/22/2020 17:00,444,17,28\n",
        encoding="utf-8",
    )
    _run_git(repo, "add", "-A")
    _run_git(repo, "commit", "--quiet", "-m", "first report")
    return repo


@pytest.fixture()
def run_git() -> Callable[..., str]:
    return _run_git
