from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

REASON_ALREADY_SYNCING = "already_syncing"
REASON_OFFLINE = "offline"
REASON_NO_AUTH = "no_auth"
REASON_NO_UNSYNCED = "no_unsynced"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync run. ``reason`` is set when the run did no work."""

    synced: int = 0
    failed: int = 0
    total: int = 0
    skipped: int = 0
    reason: str | None = None

    @classmethod
    def skip(cls, reason: str) -> SyncResult:
        return cls(skipped=1, reason=reason)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "synced": self.synced,
            "failed": self.failed,
            "skipped": self.skipped,
            "total": self.total,
        }
        if self.reason:
            payload["reason"] = self.reason
        return payload


@dataclass(frozen=True)
class SyncStatus:
    is_syncing: bool
    last_sync_time: datetime | None
    is_online: bool
