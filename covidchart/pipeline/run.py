from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from covidchart.api.alias import AliasRegistry
from covidchart.config import Settings
from covidchart.ingestion.git_sync import GitSync, GitSyncError, SyncOutcome

from .convert import ConversionReport, CycleCancelled, convert_daily_reports

LOGGER = logging.getLogger(__name__)

STATUS_UPDATED = "updated"
STATUS_NO_UPDATE = "no_update"
STATUS_SYNC_FAILED = "sync_failed"
STATUS_FAILED = "failed"
STATUS_CANCELLED = "cancelled"
STATUS_TIMED_OUT = "timed_out"


class Syncer(Protocol):
    def is_cloned(self) -> bool:
        ...

    def sync(self, *, deadline: float, cancel: Optional[threading.Event] = None) -> SyncOutcome:
        ...


@dataclass
class CycleResult:
    status: str
    outcome: Optional[SyncOutcome] = None
    report: Optional[ConversionReport] = None
    error: Optional[str] = None

    @property
    def publishable(self) -> bool:
        return self.status == STATUS_UPDATED and self.report is not None


def build_git_sync(settings: Settings) -> GitSync:
    return GitSync(settings.git_path, settings.data_repo_url)


def run_cycle(
    settings: Settings,
    sync: Syncer,
    *,
    cancel: Optional[threading.Event] = None,
    force: bool = False,
) -> CycleResult:
    """Run sync → convert → summarise once.

    Sync, conversion and cancellation failures come back as the result
    status; only programming errors propagate.

    With ``force`` an existing mirror is converted even when the sync reported
    no update or failed; the startup cycle uses this to rebuild outputs.
    """

    deadline = time.monotonic() + settings.git_timeout_s
    outcome: Optional[SyncOutcome] = None
    try:
        outcome = sync.sync(deadline=deadline, cancel=cancel)
    except GitSyncError as exc:
        if exc.kind == "cancelled":
            LOGGER.info("Cycle cancelled during git sync")
            return CycleResult(STATUS_CANCELLED, error=str(exc))
        if not (force and sync.is_cloned()):
            LOGGER.warning("Data update failed (%s): %s", exc.kind, exc)
            return CycleResult(STATUS_SYNC_FAILED, error=str(exc))
        LOGGER.warning("Data update failed (%s), converting existing mirror: %s", exc.kind, exc)

    if outcome is SyncOutcome.NO_UPDATE and not force:
        LOGGER.info("No data update")
        return CycleResult(STATUS_NO_UPDATE, outcome=outcome)

    try:
        report = convert_daily_reports(
            settings.repo_data_path,
            settings.convert_data_path,
            settings.summary_data_path,
            cancel=cancel,
        )
    except CycleCancelled:
        LOGGER.info("Cycle cancelled during conversion; nothing published")
        return CycleResult(STATUS_CANCELLED, outcome=outcome)
    except OSError as exc:
        LOGGER.warning("Conversion failed: %s", exc)
        return CycleResult(STATUS_FAILED, outcome=outcome, error=str(exc))
    return CycleResult(STATUS_UPDATED, outcome=outcome, report=report)


class Scheduler:
    """Run a cycle at startup and every ``update_interval_s`` afterwards."""

    def __init__(
        self,
        settings: Settings,
        sync: Syncer,
        aliases: AliasRegistry,
    ) -> None:
        self.settings = settings
        self.sync = sync
        self.aliases = aliases
        self.last_result: Optional[CycleResult] = None

    async def run_once(self, *, force: bool = False) -> CycleResult:
        cancel = threading.Event()
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(run_cycle, self.settings, self.sync, cancel=cancel, force=force),
                timeout=self.settings.cycle_timeout_s,
            )
        except asyncio.TimeoutError:
            cancel.set()
            LOGGER.warning("Cycle exceeded %.0fs; cancelled", self.settings.cycle_timeout_s)
            result = CycleResult(STATUS_TIMED_OUT)
        except asyncio.CancelledError:
            cancel.set()
            raise
        if result.publishable and not cancel.is_set():
            self.aliases.publish_latest(self.settings.convert_data_path)
        self.last_result = result
        return result

    async def _run_logged(self, *, force: bool) -> None:
        try:
            await self.run_once(force=force)
        except Exception:
            LOGGER.exception("Update cycle crashed; retrying at the next tick")

    async def run(self) -> None:
        await self._run_logged(force=True)
        while True:
            await asyncio.sleep(self.settings.update_interval_s)
            await self._run_logged(force=False)


__all__ = [
    "CycleResult",
    "Scheduler",
    "Syncer",
    "build_git_sync",
    "run_cycle",
    "STATUS_CANCELLED",
    "STATUS_FAILED",
    "STATUS_NO_UPDATE",
    "STATUS_SYNC_FAILED",
    "STATUS_TIMED_OUT",
    "STATUS_UPDATED",
]
