"""Background reconciliation of local sessions with the remote store."""

from flight_mode.sync.engine import SyncEngine, end_time_ms, remote_document_id
from flight_mode.sync.results import SyncResult, SyncStatus

__all__ = [
    "SyncEngine",
    "SyncResult",
    "SyncStatus",
    "end_time_ms",
    "remote_document_id",
]
