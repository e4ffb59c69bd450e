from __future__ import annotations

import argparse
import asyncio
import json
import logging
from dataclasses import asdict
from typing import Any, Sequence

from flight_mode.config.settings import get_settings
from flight_mode.local_store import LocalStore
from flight_mode.logging import setup_logging
from flight_mode.stats import get_focus_analytics, get_session_stats

logger = logging.getLogger(__name__)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Offline-first focus session store with cloud sync"
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init", help="Initialize the local store and report the backend")

    add_parser = subparsers.add_parser("add", help="Record a focus session locally")
    add_parser.add_argument("--user", required=True, help="Owning user id")
    add_parser.add_argument("--duration", type=int, required=True, help="Duration in minutes")
    add_parser.add_argument("--objective", default=None)
    add_parser.add_argument("--from-code", default=None)
    add_parser.add_argument("--to-code", default=None)
    add_parser.add_argument("--seat", default=None)
    add_parser.add_argument("--start", default=None, help="ISO-8601 start time (default: now)")
    add_parser.add_argument("--end", default=None, help="ISO-8601 end time")
    add_parser.add_argument(
        "--status",
        default="completed",
        choices=["in-progress", "completed", "abandoned"],
    )

    sessions_parser = subparsers.add_parser("sessions", help="List a user's sessions")
    sessions_parser.add_argument("user", help="User id")
    sessions_parser.add_argument("--status", default=None)
    sessions_parser.add_argument("--limit", type=int, default=100)
    sessions_parser.add_argument("--order", default="startTime DESC")

    stats_parser = subparsers.add_parser("stats", help="Show dashboard statistics")
    stats_parser.add_argument("user", help="User id")

    analytics_parser = subparsers.add_parser(
        "analytics", help="Show averages, weekly hours and peak focus time"
    )
    analytics_parser.add_argument("user", help="User id")

    search_parser = subparsers.add_parser(
        "search", help="Find sessions by objective or route code"
    )
    search_parser.add_argument("user", help="User id")
    search_parser.add_argument("term", help="Case-insensitive text to look for")

    sync_parser = subparsers.add_parser("sync", help="Push unsynced sessions once")
    sync_parser.add_argument("--user", default=None, help="User id (default: FLIGHT_MODE_USER_ID)")

    periodic_parser = subparsers.add_parser(
        "periodic", help="Keep syncing on an interval until interrupted"
    )
    periodic_parser.add_argument("--user", default=None)
    periodic_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Minutes between runs (default: SYNC_INTERVAL_MINUTES)",
    )
    return parser


async def _run_sync(user_id: str | None) -> dict[str, Any]:
    from flight_mode.runtime import build_runtime

    runtime = build_runtime()
    probe = runtime.build_probe()
    try:
        await probe.check()
        result = await runtime.engine.sync_unsynced_sessions(user_id)
        return result.as_dict()
    finally:
        await probe.aclose()
        await runtime.aclose()


async def _run_periodic(user_id: str | None, interval_minutes: float) -> None:
    from flight_mode.runtime import build_runtime

    runtime = build_runtime()
    probe_task = asyncio.create_task(
        runtime.build_probe().run(runtime.settings.connectivity_probe_interval_seconds)
    )
    runtime.engine.start()
    try:
        await runtime.engine.start_periodic_sync(interval_minutes, user_id)
    finally:
        probe_task.cancel()
        await runtime.aclose()


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging()
    settings = get_settings()

    if args.command in (None, "init"):
        store = LocalStore(settings)
        native = store.initialize()
        print(f"Local store ready (backend={store.backend_name}, native={native})")
        return

    if args.command == "add":
        store = LocalStore(settings)
        session_id = store.insert_session(
            {
                "user_id": args.user,
                "duration_minutes": args.duration,
                "objective": args.objective,
                "from_code": args.from_code,
                "to_code": args.to_code,
                "seat": args.seat,
                "start_time": args.start,
                "end_time": args.end,
                "status": args.status,
            }
        )
        print(session_id)
        return

    if args.command == "sessions":
        store = LocalStore(settings)
        _print_json(
            store.get_sessions_by_user(
                args.user, status=args.status, limit=args.limit, order_by=args.order
            )
        )
        return

    if args.command == "stats":
        store = LocalStore(settings)
        _print_json(asdict(get_session_stats(store, args.user)))
        return

    if args.command == "analytics":
        store = LocalStore(settings)
        _print_json(asdict(get_focus_analytics(store, args.user)))
        return

    if args.command == "search":
        store = LocalStore(settings)
        _print_json(store.search_sessions(args.user, args.term))
        return

    if not settings.remote_project_id:
        raise SystemExit("Set REMOTE_PROJECT_ID to sync with the remote store")

    if args.command == "sync":
        _print_json(asyncio.run(_run_sync(args.user)))
        return

    if args.command == "periodic":
        interval = args.interval or settings.sync_interval_minutes
        try:
            asyncio.run(_run_periodic(args.user, interval))
        except KeyboardInterrupt:
            logger.info("Periodic sync interrupted")
        return


if __name__ == "__main__":
    main()
