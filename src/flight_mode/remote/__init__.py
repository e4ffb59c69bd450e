"""Remote document store used as the cloud system of record."""

from flight_mode.remote.firestore import FirestoreClient
from flight_mode.remote.interface import RemoteStore

__all__ = ["FirestoreClient", "RemoteStore"]
