"""Offline-first local record store with pluggable backends."""

from flight_mode.local_store.db_store import NativeBackend
from flight_mode.local_store.document_store import FallbackBackend
from flight_mode.local_store.interface import StorageBackend
from flight_mode.local_store.kv_storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from flight_mode.local_store.query import Filter, SessionQuery, SortOrder
from flight_mode.local_store.store import LocalStore, build_backend

__all__ = [
    "FallbackBackend",
    "Filter",
    "JsonFileStorage",
    "KeyValueStorage",
    "LocalStore",
    "MemoryStorage",
    "NativeBackend",
    "SessionQuery",
    "SortOrder",
    "StorageBackend",
    "build_backend",
]
