"""Exception types raised by the local store and sync layers."""


class FlightModeError(Exception):
    """Base class for flight_mode errors."""


class SessionValidationError(FlightModeError, ValueError):
    """A record is missing a required field or carries an invalid value."""


class UnsupportedQueryError(FlightModeError, NotImplementedError):
    """The query shape is outside what the local store knows how to run."""


class RemoteStoreError(FlightModeError):
    """The remote document store could not be reached or rejected a write."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
