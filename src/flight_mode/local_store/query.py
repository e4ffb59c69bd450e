from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from flight_mode.errors import UnsupportedQueryError
from flight_mode.local_store.record_ops import parse_session_id

FILTERABLE_FIELDS = ("user_id", "status", "synced_to_remote", "id")


class SortOrder(str, Enum):
    START_TIME_ASC = "start_time ASC"
    START_TIME_DESC = "start_time DESC"

    @property
    def descending(self) -> bool:
        return self is SortOrder.START_TIME_DESC

    @classmethod
    def parse(cls, value: "str | SortOrder") -> "SortOrder":
        if isinstance(value, SortOrder):
            return value
        parts = str(value).split()
        if len(parts) == 1:
            parts.append("ASC")
        if len(parts) != 2 or parts[0] not in ("start_time", "startTime"):
            raise UnsupportedQueryError(f"Unsupported ordering: {value!r}")
        direction = parts[1].upper()
        if direction == "ASC":
            return cls.START_TIME_ASC
        if direction == "DESC":
            return cls.START_TIME_DESC
        raise UnsupportedQueryError(f"Unsupported ordering: {value!r}")


@dataclass(frozen=True)
class Filter:
    """Equality predicate on one session field."""

    field: str
    value: Any

    def __post_init__(self) -> None:
        if self.field not in FILTERABLE_FIELDS:
            raise UnsupportedQueryError(f"Unsupported filter field: {self.field!r}")
        if self.field == "synced_to_remote":
            if self.value not in (0, 1):
                raise UnsupportedQueryError(
                    f"synced_to_remote filter must be 0/1 or a bool, got {self.value!r}"
                )
            object.__setattr__(self, "value", bool(self.value))
        elif self.field == "id":
            session_id = parse_session_id(self.value)
            if session_id is None:
                raise UnsupportedQueryError(f"id filter must be an integer, got {self.value!r}")
            object.__setattr__(self, "value", session_id)


@dataclass(frozen=True)
class SessionQuery:
    """Structured description of a session read: AND-ed filters, order, limit."""

    filters: tuple[Filter, ...] = field(default_factory=tuple)
    order_by: SortOrder | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and (
            isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 0
        ):
            raise UnsupportedQueryError(f"Unsupported limit: {self.limit!r}")

    def where(self, field_name: str, value: Any) -> SessionQuery:
        return replace(self, filters=(*self.filters, Filter(field_name, value)))

    def order(self, order_by: str | SortOrder) -> SessionQuery:
        return replace(self, order_by=SortOrder.parse(order_by))

    def limit_to(self, limit: int) -> SessionQuery:
        return replace(self, limit=limit)
