from flight_mode.database.base import Base
from flight_mode.database.engine import build_engine
from flight_mode.database.session import build_session_factory, session_scope

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "session_scope",
]
