from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping

from flight_mode.errors import SessionValidationError

STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUS_ABANDONED = "abandoned"
SESSION_STATUSES = (STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_ABANDONED)

MUTABLE_SESSION_FIELDS = ("end_time", "status", "synced_to_remote")
OPTIONAL_SESSION_FIELDS = ("objective", "from_code", "to_code", "seat")
SESSION_FIELDS = (
    "id",
    "user_id",
    "duration_minutes",
    *OPTIONAL_SESSION_FIELDS,
    "start_time",
    "end_time",
    "status",
    "created_at",
    "synced_to_remote",
)
USER_FIELDS = ("id", "display_name", "email", "photo_url", "last_updated")

_FRACTION = re.compile(r"\.(\d+)")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_iso_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 string, accepting a trailing Z and any fraction length."""
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_session_id(value: Any) -> int | None:
    """Normalize a session id to int; None when it cannot be one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _timestamp(field: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    raise SessionValidationError(
        f"{field} must be an ISO-8601 string or datetime, got {type(value).__name__}"
    )


def _optional_text(field: str, value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise SessionValidationError(f"{field} must be a string, got {type(value).__name__}")


def _validate_status(value: Any) -> str:
    if value not in SESSION_STATUSES:
        raise SessionValidationError(
            f"Invalid session status {value!r}; expected one of {', '.join(SESSION_STATUSES)}"
        )
    return value


def new_session_record(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate caller input and build a session record without an id."""
    user_id = data.get("user_id")
    if not isinstance(user_id, str) or not user_id.strip():
        raise SessionValidationError("user_id is required")

    duration = data.get("duration_minutes")
    if duration is None:
        raise SessionValidationError("duration_minutes is required")
    if isinstance(duration, bool) or not isinstance(duration, int):
        raise SessionValidationError("duration_minutes must be an integer")

    created_at = now_iso()
    record: dict[str, Any] = {
        "user_id": user_id,
        "duration_minutes": duration,
    }
    for field in OPTIONAL_SESSION_FIELDS:
        record[field] = _optional_text(field, data.get(field))
    record["start_time"] = _timestamp("start_time", data.get("start_time")) or created_at
    record["end_time"] = _timestamp("end_time", data.get("end_time"))
    record["status"] = _validate_status(data.get("status") or STATUS_COMPLETED)
    record["created_at"] = created_at
    record["synced_to_remote"] = bool(data.get("synced_to_remote", False))
    return record


def session_changes(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the mutable fields of a patch.

    ``synced_to_remote`` can only be raised; a falsy value is dropped.
    """
    changes: dict[str, Any] = {}
    for key, value in patch.items():
        if key not in MUTABLE_SESSION_FIELDS:
            continue
        if key == "status":
            changes[key] = _validate_status(value)
        elif key == "synced_to_remote":
            if value:
                changes[key] = True
        else:
            changes[key] = _timestamp(key, value)
    return changes


def new_user_record(profile: Mapping[str, Any]) -> dict[str, Any]:
    user_id = profile.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise SessionValidationError("user id is required")
    return {
        "id": user_id,
        "display_name": profile.get("display_name"),
        "email": profile.get("email"),
        "photo_url": profile.get("photo_url"),
        "last_updated": now_iso(),
    }


def normalize_session(row: Mapping[str, Any]) -> dict[str, Any]:
    """Project a stored row onto the public session shape."""
    record = {field: row.get(field) for field in SESSION_FIELDS}
    record["synced_to_remote"] = bool(record["synced_to_remote"])
    return record
