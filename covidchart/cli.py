"""Command line entrypoint for running one update cycle without the web server."""
from __future__ import annotations

import argparse
import logging
import threading
from typing import Optional

from covidchart.api.alias import list_dated_outputs
from covidchart.common.logs import configure_logging
from covidchart.config import get_settings
from covidchart.pipeline.run import STATUS_NO_UPDATE, build_git_sync, run_cycle

LOGGER = logging.getLogger("covidchart.cli")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser("covidchart")
    sub = parser.add_subparsers(dest="command", required=True)

    update = sub.add_parser("update", help="Sync the upstream mirror and rebuild JSON outputs")
    update.add_argument(
        "--force",
        action="store_true",
        help="Convert the existing mirror even when the sync reports no update or fails",
    )
    update.add_argument("--log-level", default=None, help="Python logging level (default: env or INFO)")

    sub.add_parser("latest", help="List the dated outputs the aliases would point at")

    args = parser.parse_args(argv)
    configure_logging(level=getattr(args, "log_level", None))
    settings = get_settings()

    if args.command == "latest":
        for name, path in zip(settings.alias_slots, list_dated_outputs(settings.convert_data_path)):
            print(f"{name}\t{path}")
        return 0

    result = run_cycle(settings, build_git_sync(settings), cancel=threading.Event(), force=args.force)
    if result.report is not None:
        LOGGER.info(
            "update finished: status=%s written=%d skipped=%d",
            result.status,
            len(result.report.written),
            len(result.report.skipped),
        )
    else:
        LOGGER.info("update finished: status=%s error=%s", result.status, result.error or "-")
    return 0 if result.publishable or result.status == STATUS_NO_UPDATE else 1


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
