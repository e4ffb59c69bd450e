from __future__ import annotations

import json
import logging
from typing import Any

from flight_mode.local_store import record_ops
from flight_mode.local_store.kv_storage import KeyValueStorage
from flight_mode.local_store.query import SessionQuery
from flight_mode.local_store.translator import apply_query

logger = logging.getLogger(__name__)


def _empty_document() -> dict[str, list[dict[str, Any]]]:
    return {"focus_sessions": [], "users": []}


class FallbackBackend:
    """Structured-document backend used when no embedded database is available.

    The whole store is one JSON document (``focus_sessions`` and ``users``
    collections) held under a fixed key and rewritten on every mutation.
    """

    name = "fallback"
    is_native = False

    def __init__(self, storage: KeyValueStorage, storage_key: str) -> None:
        self._storage = storage
        self._key = storage_key
        self._data = _empty_document()

    def open(self) -> None:
        try:
            raw = self._storage.get_item(self._key)
        except Exception:  # noqa: BLE001
            logger.exception("Could not read fallback store %r; starting empty", self._key)
            self._data = _empty_document()
            return

        if raw is None:
            self._data = _empty_document()
            self._persist()
            return

        try:
            loaded = json.loads(raw)
        except ValueError:
            logger.error("Fallback store %r is not valid JSON; starting empty", self._key)
            self._data = _empty_document()
            return

        data = _empty_document()
        if isinstance(loaded, dict):
            for collection in data:
                rows = loaded.get(collection)
                if isinstance(rows, list):
                    data[collection] = [row for row in rows if isinstance(row, dict)]
        self._data = data

    def _persist(self) -> None:
        try:
            self._storage.set_item(self._key, json.dumps(self._data, ensure_ascii=True))
        except Exception:  # noqa: BLE001
            logger.exception("Failed to persist fallback store %r", self._key)

    def _next_id(self) -> int:
        sessions = self._data["focus_sessions"]
        return max((row.get("id") or 0 for row in sessions), default=0) + 1

    def insert_session(self, record: dict[str, Any]) -> int:
        session_id = self._next_id()
        self._data["focus_sessions"].append({"id": session_id, **record})
        self._persist()
        return session_id

    def query_sessions(self, query: SessionQuery) -> list[dict[str, Any]]:
        rows = apply_query(query, self._data["focus_sessions"])
        return [record_ops.normalize_session(row) for row in rows]

    def update_session(self, session_id: int, changes: dict[str, Any]) -> int:
        for row in self._data["focus_sessions"]:
            if row.get("id") == session_id:
                row.update(changes)
                self._persist()
                return 1
        return 0

    def save_user(self, record: dict[str, Any]) -> None:
        users = self._data["users"]
        for idx, existing in enumerate(users):
            if existing.get("id") == record["id"]:
                users[idx] = dict(record)
                break
        else:
            users.append(dict(record))
        self._persist()

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        for user in self._data["users"]:
            if user.get("id") == user_id:
                return {field: user.get(field) for field in record_ops.USER_FIELDS}
        return None
