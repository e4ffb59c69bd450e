from __future__ import annotations

import logging
import threading
from typing import Any, Mapping

from flight_mode.config.database import get_database_config
from flight_mode.config.settings import Settings, get_settings
from flight_mode.errors import UnsupportedQueryError
from flight_mode.local_store import record_ops
from flight_mode.local_store.db_store import NativeBackend
from flight_mode.local_store.document_store import FallbackBackend
from flight_mode.local_store.interface import StorageBackend
from flight_mode.local_store.kv_storage import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
)
from flight_mode.local_store.query import SessionQuery

logger = logging.getLogger(__name__)


def build_fallback_backend(
    settings: Settings, storage: KeyValueStorage | None = None
) -> FallbackBackend:
    storage = storage or JsonFileStorage(settings.fallback_store_path)
    backend = FallbackBackend(storage, settings.fallback_storage_key)
    backend.open()
    return backend


def build_backend(
    settings: Settings, storage: KeyValueStorage | None = None
) -> StorageBackend:
    """Select and open a backend. Any native failure falls back to the document store."""
    choice = settings.store_backend.strip().lower()
    if choice == "fallback":
        return build_fallback_backend(settings, storage)

    if choice not in ("auto", "native"):
        logger.warning(
            "Unsupported STORE_BACKEND=%r; using the fallback document store",
            settings.store_backend,
        )
        return build_fallback_backend(settings, storage)

    try:
        backend = NativeBackend(get_database_config(settings))
        backend.open()
        return backend
    except Exception as exc:  # noqa: BLE001
        log = logger.warning if choice == "native" else logger.info
        log("Native database unavailable (%s); using the fallback document store", exc)
    return build_fallback_backend(settings, storage)


class LocalStore:
    """Durable CRUD over focus sessions and user profiles, backend-agnostic.

    Reads never raise on backend failure: callers see an empty result. Input
    validation errors are raised as ``SessionValidationError``.
    Each call holds a lock for its duration, so a call made from a worker
    thread is atomic with respect to calls made from the event loop.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        storage: KeyValueStorage | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._storage = storage
        self._backend: StorageBackend | None = None
        self._lock = threading.RLock()

    def initialize(self) -> bool:
        """Open the backend once. Returns True when the native database is engaged."""
        return self._open().is_native

    def _open(self) -> StorageBackend:
        with self._lock:
            if self._backend is not None:
                return self._backend
            try:
                backend = build_backend(self._settings, self._storage)
            except Exception:  # noqa: BLE001
                logger.exception("Local store initialization failed; using an in-memory fallback")
                backend = build_fallback_backend(
                    self._settings, self._storage or MemoryStorage()
                )
            logger.info("Local store initialized with %s backend", backend.name)
            self._backend = backend
            return backend

    @property
    def backend(self) -> StorageBackend:
        return self._open()

    @property
    def backend_name(self) -> str:
        return self.backend.name

    @property
    def is_native(self) -> bool:
        return self.backend.is_native

    def close(self) -> None:
        with self._lock:
            close = getattr(self._backend, "close", None)
            if callable(close):
                close()
            self._backend = None

    def insert_session(self, data: Mapping[str, Any]) -> int:
        record = record_ops.new_session_record(data)
        with self._lock:
            session_id = self.backend.insert_session(record)
        logger.debug("Inserted session %s for user %s", session_id, record["user_id"])
        return session_id

    def _query(self, query: SessionQuery, what: str) -> list[dict[str, Any]]:
        try:
            with self._lock:
                return self.backend.query_sessions(query)
        except UnsupportedQueryError:
            raise
        except Exception:  # noqa: BLE001
            logger.exception("Failed to %s", what)
            return []

    def get_session_by_id(self, session_id: int | str) -> dict[str, Any] | None:
        normalized = record_ops.parse_session_id(session_id)
        if normalized is None:
            logger.debug("Ignoring lookup of non-integer session id %r", session_id)
            return None
        rows = self._query(
            SessionQuery().where("id", normalized).limit_to(1),
            f"get session {session_id}",
        )
        return rows[0] if rows else None

    def get_sessions_by_user(
        self,
        user_id: str,
        *,
        status: str | None = None,
        limit: int = 100,
        order_by: str = "startTime DESC",
    ) -> list[dict[str, Any]]:
        query = SessionQuery().where("user_id", user_id)
        if status:
            query = query.where("status", status)
        query = query.order(order_by).limit_to(limit)
        return self._query(query, f"get sessions for user {user_id}")

    def search_sessions(
        self,
        user_id: str,
        term: str | None,
        *,
        status: str | None = None,
        limit: int = 1000,
    ) -> list[dict[str, Any]]:
        """Sessions whose objective or route codes contain ``term``, newest first.

        Matching is case-insensitive; an empty term returns every session.
        """
        sessions = self.get_sessions_by_user(user_id, status=status, limit=limit)
        needle = (term or "").strip().lower()
        if not needle:
            return sessions
        return [
            session
            for session in sessions
            if any(
                needle in (session.get(field) or "").lower()
                for field in ("objective", "from_code", "to_code")
            )
        ]

    def update_session(self, session_id: int | str, patch: Mapping[str, Any]) -> int:
        changes = record_ops.session_changes(patch)
        normalized = record_ops.parse_session_id(session_id)
        if not changes or normalized is None:
            return 0
        try:
            with self._lock:
                return self.backend.update_session(normalized, changes)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to update session %s", session_id)
            return 0

    def get_unsynced_sessions(self, user_id: str) -> list[dict[str, Any]]:
        query = (
            SessionQuery()
            .where("user_id", user_id)
            .where("synced_to_remote", 0)
            .where("status", record_ops.STATUS_COMPLETED)
        )
        return self._query(query, f"get unsynced sessions for user {user_id}")

    def mark_synced(self, session_id: int | str) -> int:
        return self.update_session(session_id, {"synced_to_remote": True})

    def save_user(self, profile: Mapping[str, Any]) -> None:
        record = record_ops.new_user_record(profile)
        with self._lock:
            self.backend.save_user(record)

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        try:
            with self._lock:
                return self.backend.get_user(user_id)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to get user %s", user_id)
            return None
