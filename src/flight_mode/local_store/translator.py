"""In-memory execution of ``SessionQuery`` descriptors for the fallback backend.

Only the query shapes the local store issues are understood. Anything else
raises ``UnsupportedQueryError`` instead of returning a partial answer.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from flight_mode.errors import UnsupportedQueryError
from flight_mode.local_store.query import Filter, SessionQuery, SortOrder

Row = dict[str, Any]


def _match_user(row: Row, value: Any) -> bool:
    return row.get("user_id") == value


def _match_status(row: Row, value: Any) -> bool:
    return row.get("status") == value


def _match_synced(row: Row, value: Any) -> bool:
    return bool(row.get("synced_to_remote") or False) is bool(value)


def _match_id(row: Row, value: Any) -> bool:
    return row.get("id") == value


_PREDICATES: dict[str, Callable[[Row, Any], bool]] = {
    "user_id": _match_user,
    "status": _match_status,
    "synced_to_remote": _match_synced,
    "id": _match_id,
}


def _predicate(flt: Filter) -> Callable[[Row], bool]:
    match = _PREDICATES.get(flt.field)
    if match is None:
        raise UnsupportedQueryError(f"Fallback query not implemented for filter on {flt.field!r}")
    return lambda row: match(row, flt.value)


def _sort_key(row: Row) -> tuple[str, int]:
    return (row.get("start_time") or "", row.get("id") or 0)


def apply_query(query: SessionQuery, rows: Iterable[Row]) -> list[Row]:
    """Filter, then order, then limit. Returned rows are copies."""
    predicates = [_predicate(flt) for flt in query.filters]
    results = [row for row in rows if all(pred(row) for pred in predicates)]

    if query.order_by is not None:
        if query.order_by not in (SortOrder.START_TIME_ASC, SortOrder.START_TIME_DESC):
            raise UnsupportedQueryError(
                f"Fallback query not implemented for ordering {query.order_by!r}"
            )
        results.sort(key=_sort_key, reverse=query.order_by.descending)

    if query.limit is not None:
        results = results[: query.limit]

    return [dict(row) for row in results]
