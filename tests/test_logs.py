from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from covidchart.api.app import create_app
from covidchart.common.logs import ACCESS_LOGGER_NAME, LOG_FORMAT, configure_logging, reason_counts
from covidchart.config import Settings


@pytest.fixture()
def quiet_root(monkeypatch: pytest.MonkeyPatch):
    """A root logger at WARNING, as an ASGI server leaves it; restored afterwards."""

    monkeypatch.delenv("COVIDCHART_LOG_LEVEL", raising=False)
    monkeypatch.delenv("COVIDCHART_ACCESS_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    access = logging.getLogger(ACCESS_LOGGER_NAME)
    saved = (root.level, list(root.handlers), access.level)
    root.setLevel(logging.WARNING)
    access.setLevel(logging.NOTSET)
    yield root
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    access.setLevel(saved[2])


def test_configure_logging_adds_one_handler(quiet_root: logging.Logger) -> None:
    configure_logging()
    configure_logging(level="debug")

    ours = [handler for handler in quiet_root.handlers if getattr(handler, "_covidchart_handler", False)]
    assert len(ours) == 1
    assert ours[0].formatter is not None
    assert ours[0].formatter._fmt == LOG_FORMAT
    assert quiet_root.level == logging.DEBUG


def test_access_level_is_independent(quiet_root: logging.Logger, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COVIDCHART_ACCESS_LOG_LEVEL", "WARNING")
    configure_logging()
    assert logging.getLogger("covidchart.pipeline.run").isEnabledFor(logging.INFO)
    assert not logging.getLogger(ACCESS_LOGGER_NAME).isEnabledFor(logging.INFO)


def test_served_app_enables_access_and_pipeline_logs(quiet_root: logging.Logger, settings: Settings) -> None:
    assert not logging.getLogger(ACCESS_LOGGER_NAME).isEnabledFor(logging.INFO)

    app = create_app(settings, run_scheduler=False)
    with TestClient(app) as client:
        client.get("/data/daily_reports/today.json")
        assert logging.getLogger(ACCESS_LOGGER_NAME).isEnabledFor(logging.INFO)
        assert logging.getLogger("covidchart.pipeline.convert").isEnabledFor(logging.INFO)


def test_reason_counts() -> None:
    assert reason_counts(["width_mismatch", "no_country", "width_mismatch"]) == {
        "no_country": 1,
        "width_mismatch": 2,
    }
    assert reason_counts([]) == {}
    assert reason_counts(None) == {}
