"""Offline-first focus session storage with background cloud reconciliation."""

from flight_mode.errors import (
    FlightModeError,
    RemoteStoreError,
    SessionValidationError,
    UnsupportedQueryError,
)
from flight_mode.local_store import LocalStore
from flight_mode.sync import SyncEngine, SyncResult, SyncStatus

__all__ = [
    "FlightModeError",
    "LocalStore",
    "RemoteStoreError",
    "SessionValidationError",
    "SyncEngine",
    "SyncResult",
    "SyncStatus",
    "UnsupportedQueryError",
]
