# covidchart
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the covidchart Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Keep a local mirror of the upstream data repository up to date.

Every git invocation runs as a subprocess bounded by a caller supplied
monotonic deadline. A ``threading.Event`` lets the caller abort a running
clone or pull; the child process is killed in both cases.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

LOGGER = logging.getLogger(__name__)

_POLL_INTERVAL_S = 0.2


class GitState(str, Enum):
    ABSENT = "absent"
    CLONING = "cloning"
    READY = "ready"
    PULLING = "pulling"


class SyncOutcome(str, Enum):
    CLONED = "cloned"
    UPDATED = "updated"
    NO_UPDATE = "no_update"


@dataclass(eq=False)
class GitSyncError(Exception):
    """Raised when a clone or pull does not complete."""

    message: str
    kind: str = "error"

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class GitTimeoutError(GitSyncError):
    kind: str = "timeout"


def _git_env() -> dict[str, str]:
    env = dict(os.environ)
    # Never block on a credential prompt inside a scheduled cycle.
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


class GitSync:
    """Clone ``url`` into ``path`` once, then fast-forward it on every call."""

    def __init__(
        self,
        path: Path,
        url: str,
        *,
        git_bin: str = "git",
        poll_interval: float = _POLL_INTERVAL_S,
    ) -> None:
        self.path = Path(path)
        self.url = url
        self.git_bin = git_bin
        self.poll_interval = poll_interval
        self._state = GitState.READY if self.is_cloned() else GitState.ABSENT

    @property
    def state(self) -> GitState:
        return self._state

    def is_cloned(self) -> bool:
        return (self.path / ".git").exists()

    def sync(self, *, deadline: float, cancel: Optional[threading.Event] = None) -> SyncOutcome:
        """Clone or pull, finishing before ``deadline`` (``time.monotonic`` based)."""

        if not self.is_cloned():
            self._state = GitState.ABSENT
            return self._clone(deadline=deadline, cancel=cancel)
        self._state = GitState.READY
        return self._pull(deadline=deadline, cancel=cancel)

    def head(self, *, deadline: float, cancel: Optional[threading.Event] = None) -> str:
        return self._run(["rev-parse", "HEAD"], cwd=self.path, deadline=deadline, cancel=cancel).strip()

    def _clone(self, *, deadline: float, cancel: Optional[threading.Event]) -> SyncOutcome:
        self._state = GitState.CLONING
        self.path.parent.mkdir(parents=True, exist_ok=True)
        preexisting = self.path.exists() and any(self.path.iterdir())
        try:
            self._run(
                ["clone", "--quiet", self.url, str(self.path)],
                cwd=self.path.parent,
                deadline=deadline,
                cancel=cancel,
            )
            self.head(deadline=deadline, cancel=cancel)
        except GitSyncError as exc:
            # Only remove what the failed clone created.
            if not preexisting:
                shutil.rmtree(self.path, ignore_errors=True)
            self._state = GitState.ABSENT
            LOGGER.warning("git clone of %s failed: %s", self.url, exc)
            raise
        self._state = GitState.READY
        LOGGER.info("Cloned %s into %s", self.url, self.path)
        return SyncOutcome.CLONED

    def _pull(self, *, deadline: float, cancel: Optional[threading.Event]) -> SyncOutcome:
        self._state = GitState.PULLING
        try:
            before = self.head(deadline=deadline, cancel=cancel)
            self._run(["reset", "--hard", "--quiet", "HEAD"], cwd=self.path, deadline=deadline, cancel=cancel)
            self._run(
                ["pull", "--ff-only", "--quiet", "origin"],
                cwd=self.path,
                deadline=deadline,
                cancel=cancel,
            )
            after = self.head(deadline=deadline, cancel=cancel)
        finally:
            self._state = GitState.READY
        if before == after:
            return SyncOutcome.NO_UPDATE
        LOGGER.info("Pulled %s: %s -> %s", self.path, before[:12], after[:12])
        return SyncOutcome.UPDATED

    def _run(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        deadline: float,
        cancel: Optional[threading.Event],
    ) -> str:
        command = " ".join(["git", *args[:1]])
        if time.monotonic() >= deadline:
            raise GitTimeoutError(f"{command} not started: deadline already passed")
        try:
            proc = subprocess.Popen(
                [self.git_bin, *args],
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                env=_git_env(),
            )
        except OSError as exc:
            raise GitSyncError(f"{command} could not start: {exc}", kind="spawn_failed") from exc

        while True:
            remaining = deadline - time.monotonic()
            try:
                stdout, stderr = proc.communicate(timeout=max(0.0, min(self.poll_interval, remaining)))
                break
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.is_set():
                    self._kill(proc)
                    raise GitSyncError(f"{command} cancelled", kind="cancelled") from None
                if time.monotonic() >= deadline:
                    self._kill(proc)
                    raise GitTimeoutError(f"{command} timed out") from None

        if proc.returncode != 0:
            detail = (stderr or stdout or "").strip().splitlines()
            raise GitSyncError(
                f"{command} exited with {proc.returncode}: {detail[-1] if detail else 'no output'}",
                kind=f"{args[0]}_failed",
            )
        return stdout or ""

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        proc.kill()
        proc.communicate()


__all__ = ["GitState", "GitSync", "GitSyncError", "GitTimeoutError", "SyncOutcome"]
