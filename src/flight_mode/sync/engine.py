from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from flight_mode.connectivity import ConnectivitySignal, VisibilitySignal
from flight_mode.identity import IdentityProvider
from flight_mode.local_store import LocalStore
from flight_mode.local_store.record_ops import parse_iso_timestamp
from flight_mode.remote import RemoteStore
from flight_mode.sync.results import (
    REASON_ALREADY_SYNCING,
    REASON_NO_AUTH,
    REASON_NO_UNSYNCED,
    REASON_OFFLINE,
    SyncResult,
    SyncStatus,
)

logger = logging.getLogger(__name__)

OUTCOME_CREATED = "created"
OUTCOME_UPDATED = "updated"
OUTCOME_REMOTE_NEWER = "remote_newer"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def remote_document_id(user_id: str, session_id: int) -> str:
    return f"{user_id}_{session_id}"


def end_time_ms(value: Any) -> int:
    """Epoch milliseconds of an end time; missing or unparseable values count as 0."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        parsed = parse_iso_timestamp(value)
        if parsed is None:
            return 0
    else:
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def build_remote_session(session: dict[str, Any], user_id: str) -> dict[str, Any]:
    return {
        "id": session["id"],
        "user_id": user_id,
        "duration_minutes": session["duration_minutes"],
        "objective": session.get("objective") or None,
        "from_code": session.get("from_code") or None,
        "to_code": session.get("to_code") or None,
        "seat": session.get("seat") or None,
        "start_time": session["start_time"],
        "end_time": session.get("end_time") or None,
        "status": session.get("status") or "completed",
        "created_at": session.get("created_at") or session["start_time"],
        "synced_at": _utc_now().isoformat(),
        "local_id": session["id"],
    }


class SyncEngine:
    """Pushes completed local sessions to the remote store.

    Only one run is active at a time: the flag is checked and set before the
    first await, which is enough on a single event loop. Local store calls run
    in a worker thread so file and database I/O does not stall the loop. Runs
    never raise; failures end up in the returned counts or in the log.
    """

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteStore,
        connectivity: ConnectivitySignal,
        identity: IdentityProvider,
        *,
        visibility: VisibilitySignal | None = None,
        collection: str = "focus_sessions",
    ) -> None:
        self._store = store
        self._remote = remote
        self._connectivity = connectivity
        self._identity = identity
        self._visibility = visibility
        self._collection = collection

        self._is_syncing = False
        self._last_sync_time: datetime | None = None
        self._periodic_task: asyncio.Task[None] | None = None
        self._background_tasks: set[asyncio.Task[SyncResult | None]] = set()
        self._unsubscribers: list[Callable[[], None]] = []

    # Sync run

    async def sync_unsynced_sessions(self, user_id: str | None = None) -> SyncResult:
        if self._is_syncing:
            logger.info("Sync already in progress, skipping")
            return SyncResult.skip(REASON_ALREADY_SYNCING)

        if not self._connectivity.is_online:
            logger.info("Device is offline, skipping sync")
            return SyncResult.skip(REASON_OFFLINE)

        if not user_id:
            try:
                user_id = self._identity.current_user_id()
            except Exception:  # noqa: BLE001
                logger.exception("Identity provider failed")
                user_id = None
            if not user_id:
                logger.info("No authenticated user, skipping sync")
                return SyncResult.skip(REASON_NO_AUTH)

        self._is_syncing = True
        synced = 0
        failed = 0
        try:
            sessions = await asyncio.to_thread(self._store.get_unsynced_sessions, user_id)
            if not sessions:
                logger.info("No unsynced sessions found for user %s", user_id)
                self._last_sync_time = _utc_now()
                return SyncResult(reason=REASON_NO_UNSYNCED)

            logger.info("Found %d unsynced session(s), starting sync", len(sessions))
            for session in sessions:
                try:
                    await self._push_session(session, user_id)
                except Exception:  # noqa: BLE001
                    logger.exception("Failed to sync session %s", session.get("id"))
                    failed += 1
                    continue
                await asyncio.to_thread(self._store.mark_synced, session["id"])
                synced += 1

            self._last_sync_time = _utc_now()
            logger.info("Sync completed: %d synced, %d failed", synced, failed)
            return SyncResult(synced=synced, failed=failed, total=len(sessions))
        finally:
            self._is_syncing = False

    async def _push_session(self, session: dict[str, Any], user_id: str) -> str:
        doc_id = remote_document_id(user_id, session["id"])
        data = build_remote_session(session, user_id)

        existing = await self._remote.get_document(self._collection, doc_id)
        if existing is None:
            await self._remote.create_document(self._collection, doc_id, data)
            logger.info("Synced session %s (created remote document)", session["id"])
            return OUTCOME_CREATED

        # Last write wins on end time; a missing end time counts as the earliest.
        if end_time_ms(session.get("end_time")) >= end_time_ms(existing.get("end_time")):
            await self._remote.merge_document(self._collection, doc_id, data)
            logger.info("Synced session %s (updated remote document)", session["id"])
            return OUTCOME_UPDATED

        logger.info(
            "Skipped overwrite for session %s: remote document is newer", session["id"]
        )
        return OUTCOME_REMOTE_NEWER

    # Detached runs and scheduling

    def trigger_background_sync(
        self, user_id: str | None = None
    ) -> asyncio.Task[SyncResult | None]:
        """Start a run without waiting for it. Errors are logged, never raised."""
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run_detached(user_id))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    async def _run_detached(self, user_id: str | None) -> SyncResult | None:
        try:
            return await self.sync_unsynced_sessions(user_id)
        except Exception:  # noqa: BLE001
            logger.exception("Background sync failed")
            return None

    async def wait_for_background(self) -> None:
        """Wait for detached runs started so far to finish."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))

    def start_periodic_sync(
        self, interval_minutes: float = 5, user_id: str | None = None
    ) -> asyncio.Task[None]:
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self.stop_periodic_sync()
        self.trigger_background_sync(user_id)
        self._periodic_task = asyncio.get_running_loop().create_task(
            self._periodic_loop(interval_minutes * 60, user_id)
        )
        logger.info("Periodic sync started (every %s minutes)", interval_minutes)
        return self._periodic_task

    async def _periodic_loop(self, interval_seconds: float, user_id: str | None) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.trigger_background_sync(user_id)

    def stop_periodic_sync(self) -> None:
        task, self._periodic_task = self._periodic_task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("Periodic sync stopped")

    @property
    def periodic_sync_active(self) -> bool:
        return self._periodic_task is not None and not self._periodic_task.done()

    # Ambient triggers

    def start(self) -> None:
        """Subscribe to reconnect and visibility transitions."""
        if self._unsubscribers:
            return
        self._unsubscribers.append(self._connectivity.subscribe_online(self._on_online))
        if self._visibility is not None:
            self._unsubscribers.append(
                self._visibility.subscribe_visible(self._on_visible)
            )

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.stop_periodic_sync()

    def _on_online(self) -> None:
        logger.info("Device came online, triggering sync")
        self._trigger_from_signal()

    def _on_visible(self) -> None:
        if self._connectivity.is_online:
            logger.info("Host became visible, triggering sync")
            self._trigger_from_signal()

    def _trigger_from_signal(self) -> None:
        try:
            self.trigger_background_sync()
        except RuntimeError:
            logger.warning("No running event loop; ambient sync trigger dropped")

    def get_sync_status(self) -> SyncStatus:
        return SyncStatus(
            is_syncing=self._is_syncing,
            last_sync_time=self._last_sync_time,
            is_online=self._connectivity.is_online,
        )
