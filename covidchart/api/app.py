# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from covidchart import __version__
from covidchart.api.alias import Alias, AliasRegistry
from covidchart.api.models import MonitorSnapshot
from covidchart.api.monitor import MonitorTimeout, RequestMonitor, ResponseInfo
from covidchart.common.logs import configure_logging
from covidchart.common.run_io import ensure_dir
from covidchart.config import Settings, get_settings
from covidchart.pipeline.run import Scheduler, Syncer, build_git_sync

MONITOR_PATH = "/api/unko.in/1/monitor"
ALIAS_ROUTE_TEMPLATE = "/data/daily_reports/{name}.json"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _alias_endpoint(alias: Alias):
    async def serve_alias() -> FileResponse:
        path = alias.get_path()
        if not path.is_file():
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(path, media_type=JSON_MEDIA_TYPE)

    return serve_alias


def create_app(
    settings: Optional[Settings] = None,
    *,
    sync: Optional[Syncer] = None,
    run_scheduler: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="covidchart", version=__version__)

    aliases = AliasRegistry(settings.alias_slots, settings.default_json_path)
    monitor = RequestMonitor(
        interval=settings.monitor_interval_s,
        timeout=settings.monitor_timeout_s,
    )
    scheduler = Scheduler(settings, sync or build_git_sync(settings), aliases)

    app.state.settings = settings
    app.state.aliases = aliases
    app.state.monitor = monitor
    app.state.scheduler = scheduler
    app.state.scheduler_task = None

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    @app.middleware("http")
    async def _record_response(request: Request, call_next):
        start = _utcnow()
        status = 500
        size = 0
        try:
            response = await call_next(request)
            status = response.status_code
            size = int(response.headers.get("content-length") or 0)
            return response
        finally:
            client = request.client
            monitor.record(
                ResponseInfo(
                    uri=str(request.url.path) + (f"?{request.url.query}" if request.url.query else ""),
                    user_agent=request.headers.get("user-agent", ""),
                    status=status,
                    size=size,
                    start=start,
                    end=_utcnow(),
                    method=request.method,
                    host=request.headers.get("host", ""),
                    protocol=f"HTTP/{request.scope.get('http_version', '1.1')}",
                    addr=f"{client.host}:{client.port}" if client else "",
                )
            )

    @app.on_event("startup")
    async def _startup() -> None:
        configure_logging()
        ensure_dir(settings.public_path)
        ensure_dir(settings.convert_data_path)
        aliases.publish_latest(settings.convert_data_path)
        await monitor.start()
        if run_scheduler:
            app.state.scheduler_task = asyncio.create_task(scheduler.run(), name="update-scheduler")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        task = app.state.scheduler_task
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            app.state.scheduler_task = None
        await monitor.stop()

    @app.get(MONITOR_PATH, response_model=MonitorSnapshot)
    async def monitor_snapshot() -> MonitorSnapshot:
        """Response counters for the last completed minute."""
        try:
            result = await monitor.get_snapshot()
        except MonitorTimeout as exc:
            logger.warning("Monitoring snapshot unavailable: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to fetch monitoring data") from exc
        return MonitorSnapshot.from_result(result)

    for name in aliases.names:
        app.add_api_route(
            ALIAS_ROUTE_TEMPLATE.format(name=name),
            _alias_endpoint(aliases[name]),
            methods=["GET"],
            include_in_schema=False,
        )

    app.mount(
        "/",
        StaticFiles(directory=str(settings.public_path), html=True, check_dir=False),
        name="static",
    )
    return app


app = create_app()
