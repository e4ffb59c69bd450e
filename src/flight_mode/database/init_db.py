from sqlalchemy.engine import Engine

from flight_mode.database.base import Base
from flight_mode.models import FocusSessionRow, UserRow  # noqa: F401


def init_database(engine: Engine) -> None:
    """Create tables and indexes when missing. Migrations should be preferred in production."""
    Base.metadata.create_all(bind=engine)
