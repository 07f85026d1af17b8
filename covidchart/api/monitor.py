# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Per-minute response counters owned by a single asyncio task.

Only the monitor task touches the counters. Request handlers send
:class:`ResponseInfo` messages and snapshot requests through one queue;
``get_snapshot`` always returns the last completed minute.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Union

from covidchart.common.logs import ACCESS_LOGGER_NAME

LOGGER = logging.getLogger(__name__)
ACCESS_LOGGER = logging.getLogger(ACCESS_LOGGER_NAME)

DEFAULT_INTERVAL_S = 60.0
DEFAULT_TIMEOUT_S = 3.0


class MonitorTimeout(RuntimeError):
    """Raised when the monitor does not answer a snapshot request in time."""


@dataclass(frozen=True)
class ResponseInfo:
    uri: str
    user_agent: str
    status: int
    size: int
    start: datetime
    end: datetime
    method: str
    host: str
    protocol: str
    addr: str

    @property
    def elapsed_ns(self) -> int:
        delta = self.end - self.start
        return (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000


@dataclass
class ResultMonitor:
    response_time_sum: int = 0
    response_count: int = 0
    response_code_ok_count: int = 0
    response_code_ng_count: int = 0

    def record(self, info: ResponseInfo) -> None:
        self.response_count += 1
        self.response_time_sum += info.elapsed_ns
        if info.status < 400:
            self.response_code_ok_count += 1
        else:
            self.response_code_ng_count += 1

    def to_payload(self) -> Dict[str, Any]:
        return {
            "ResponseTimeSum": self.response_time_sum,
            "ResponseCount": self.response_count,
            "ResponseCodeOkCount": self.response_code_ok_count,
            "ResponseCodeNgCount": self.response_code_ng_count,
        }


@dataclass(frozen=True)
class _SnapshotRequest:
    reply: "asyncio.Future[ResultMonitor]"


_ROTATE = object()

_Message = Union[ResponseInfo, _SnapshotRequest, object]


class RequestMonitor:
    def __init__(
        self,
        *,
        interval: float = DEFAULT_INTERVAL_S,
        timeout: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.interval = interval
        self.timeout = timeout
        self._inbox: Optional["asyncio.Queue[_Message]"] = None
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._inbox = asyncio.Queue()
        self._task = asyncio.create_task(self._run(self._inbox), name="request-monitor")

    async def stop(self) -> None:
        task = self._task
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        LOGGER.info("Request monitor stopped")

    def record(self, info: ResponseInfo) -> None:
        """Queue one finished response; dropped when the monitor is not running."""

        if not self.running or self._inbox is None:
            return
        self._inbox.put_nowait(info)

    async def rotate(self) -> None:
        """Close the current minute now instead of waiting for the tick."""

        if self.running and self._inbox is not None:
            await self._inbox.put(_ROTATE)

    async def get_snapshot(self, timeout: Optional[float] = None) -> ResultMonitor:
        wait = self.timeout if timeout is None else timeout
        if not self.running or self._inbox is None:
            raise MonitorTimeout("request monitor is not running")
        reply: "asyncio.Future[ResultMonitor]" = asyncio.get_running_loop().create_future()
        self._inbox.put_nowait(_SnapshotRequest(reply))
        try:
            return await asyncio.wait_for(reply, timeout=wait)
        except asyncio.TimeoutError:
            raise MonitorTimeout(f"request monitor did not answer within {wait:.1f}s") from None

    async def _run(self, inbox: "asyncio.Queue[_Message]") -> None:
        loop = asyncio.get_running_loop()
        live = ResultMonitor()
        last = ResultMonitor()
        next_tick = loop.time() + self.interval
        while True:
            remaining = next_tick - loop.time()
            if remaining <= 0:
                last, live = live, ResultMonitor()
                next_tick = loop.time() + self.interval
                continue
            try:
                message = await asyncio.wait_for(inbox.get(), timeout=remaining)
            except asyncio.TimeoutError:
                continue
            if isinstance(message, ResponseInfo):
                live.record(message)
                _log_access(message)
            elif isinstance(message, _SnapshotRequest):
                if not message.reply.done():
                    message.reply.set_result(replace(last))
            elif message is _ROTATE:
                last, live = live, ResultMonitor()
                next_tick = loop.time() + self.interval


def _log_access(info: ResponseInfo) -> None:
    ACCESS_LOGGER.info(
        "addr=%s host=%s method=%s uri=%s protocol=%s status=%d size=%d ua=%r elapse_ms=%.3f",
        info.addr,
        info.host,
        info.method,
        info.uri,
        info.protocol,
        info.status,
        info.size,
        info.user_agent,
        info.elapsed_ns / 1_000_000,
    )


__all__ = [
    "DEFAULT_INTERVAL_S",
    "DEFAULT_TIMEOUT_S",
    "MonitorTimeout",
    "RequestMonitor",
    "ResponseInfo",
    "ResultMonitor",
]
