from flight_mode.models.focus_session import FocusSessionRow
from flight_mode.models.user import UserRow

__all__ = ["FocusSessionRow", "UserRow"]
