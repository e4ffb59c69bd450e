from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from flight_mode.config.database import DatabaseConfig


def _ensure_sqlite_parent(url: str) -> None:
    database = make_url(url).database
    if database and database != ":memory:" and not database.startswith("file:"):
        Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def build_engine(config: DatabaseConfig) -> Engine:
    """Build a SQLAlchemy engine for the native backend."""
    kwargs: dict[str, object] = {
        "echo": config.echo,
        "pool_pre_ping": True,
    }

    # SQLite connections are shared between the caller and background sync tasks.
    if config.url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        _ensure_sqlite_parent(config.url)

    return create_engine(config.url, **kwargs)
