from __future__ import annotations

from typing import Any, Protocol

from flight_mode.local_store.query import SessionQuery


class StorageBackend(Protocol):
    """Shared contract for the native and fallback local store backends."""

    name: str
    is_native: bool

    def open(self) -> None:
        ...

    def insert_session(self, record: dict[str, Any]) -> int:
        ...

    def query_sessions(self, query: SessionQuery) -> list[dict[str, Any]]:
        ...

    def update_session(self, session_id: int, changes: dict[str, Any]) -> int:
        ...

    def save_user(self, record: dict[str, Any]) -> None:
        ...

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        ...
