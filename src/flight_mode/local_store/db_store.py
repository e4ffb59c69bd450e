from __future__ import annotations

from typing import Any

from sqlalchemy import select, text
from sqlalchemy.engine import Engine

from flight_mode.config.database import DatabaseConfig
from flight_mode.database.engine import build_engine
from flight_mode.database.init_db import init_database
from flight_mode.database.session import build_session_factory, session_scope
from flight_mode.local_store import record_ops
from flight_mode.local_store.query import SessionQuery
from flight_mode.models import FocusSessionRow, UserRow

_COLUMNS = {
    "user_id": FocusSessionRow.user_id,
    "status": FocusSessionRow.status,
    "synced_to_remote": FocusSessionRow.synced_to_remote,
    "id": FocusSessionRow.id,
}


def _row_to_dict(row: FocusSessionRow) -> dict[str, Any]:
    return record_ops.normalize_session(
        {field: getattr(row, field) for field in record_ops.SESSION_FIELDS}
    )


class NativeBackend:
    """Embedded relational backend with the same contract as FallbackBackend."""

    name = "native"
    is_native = True

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: Engine | None = None
        self._factory = None

    def open(self) -> None:
        engine = build_engine(self._config)
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            if self._config.auto_migrate:
                init_database(engine)
        except Exception:
            engine.dispose()
            raise
        self._engine = engine
        self._factory = build_session_factory(engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._factory = None

    def _scope(self):
        if self._factory is None:
            raise RuntimeError("Native backend is not open")
        return session_scope(self._factory)

    def insert_session(self, record: dict[str, Any]) -> int:
        with self._scope() as db:
            row = FocusSessionRow(**record)
            db.add(row)
            db.flush()
            return int(row.id)

    def query_sessions(self, query: SessionQuery) -> list[dict[str, Any]]:
        stmt = select(FocusSessionRow)
        for flt in query.filters:
            stmt = stmt.where(_COLUMNS[flt.field] == flt.value)

        if query.order_by is not None:
            if query.order_by.descending:
                stmt = stmt.order_by(
                    FocusSessionRow.start_time.desc(), FocusSessionRow.id.desc()
                )
            else:
                stmt = stmt.order_by(
                    FocusSessionRow.start_time.asc(), FocusSessionRow.id.asc()
                )
        else:
            stmt = stmt.order_by(FocusSessionRow.id)

        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        with self._scope() as db:
            return [_row_to_dict(row) for row in db.scalars(stmt)]

    def update_session(self, session_id: int, changes: dict[str, Any]) -> int:
        with self._scope() as db:
            row = db.get(FocusSessionRow, session_id)
            if row is None:
                return 0
            for field, value in changes.items():
                setattr(row, field, value)
            return 1

    def save_user(self, record: dict[str, Any]) -> None:
        with self._scope() as db:
            db.merge(UserRow(**record))

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        with self._scope() as db:
            row = db.get(UserRow, user_id)
            if row is None:
                return None
            return {field: getattr(row, field) for field in record_ops.USER_FIELDS}
