import asyncio
from pathlib import Path

import pytest

from flight_mode.config.settings import Settings
from flight_mode.connectivity import ConnectivitySignal, VisibilitySignal
from flight_mode.errors import RemoteStoreError
from flight_mode.identity import StaticIdentity
from flight_mode.local_store import LocalStore, MemoryStorage
from flight_mode.sync import SyncEngine


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_settings(tmp_path: Path, backend: str = "auto", **overrides) -> Settings:
    values = {
        "STORE_BACKEND": backend,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'flight_mode.db'}",
        "FALLBACK_STORE_PATH": str(tmp_path / "fallback_store.json"),
        "REMOTE_PROJECT_ID": "test-project",
    }
    values.update(overrides)
    return Settings(**values)


def add_session(store: LocalStore, user_id: str = "user-1", **fields) -> int:
    data = {
        "user_id": user_id,
        "duration_minutes": 25,
        "start_time": "2024-01-01T08:00:00Z",
        "end_time": "2024-01-01T08:25:00Z",
        "status": "completed",
    }
    data.update(fields)
    return store.insert_session(data)


@pytest.fixture(params=["native", "fallback"])
def store(request, tmp_path):
    local = LocalStore(make_settings(tmp_path, request.param))
    local.initialize()
    assert local.backend_name == request.param
    yield local
    local.close()


class FakeRemoteStore:
    """In-memory document store that records calls and can fail or block."""

    def __init__(self) -> None:
        self.documents: dict[tuple[str, str], dict] = {}
        self.calls: list[tuple[str, str, str]] = []
        self.fail_ids: set[str] = set()
        self.gate: asyncio.Event | None = None

    async def get_document(self, collection, doc_id):
        self.calls.append(("get", collection, doc_id))
        if self.gate is not None:
            await self.gate.wait()
        if doc_id in self.fail_ids:
            raise RemoteStoreError(f"cannot reach {doc_id}")
        doc = self.documents.get((collection, doc_id))
        return dict(doc) if doc is not None else None

    async def create_document(self, collection, doc_id, data):
        self.calls.append(("create", collection, doc_id))
        self.documents[(collection, doc_id)] = dict(data)

    async def merge_document(self, collection, doc_id, data):
        self.calls.append(("merge", collection, doc_id))
        self.documents.setdefault((collection, doc_id), {}).update(data)

    def writes(self):
        return [call for call in self.calls if call[0] != "get"]


@pytest.fixture
def memory_store(tmp_path):
    local = LocalStore(make_settings(tmp_path, "fallback"), storage=MemoryStorage())
    local.initialize()
    return local


@pytest.fixture
def remote():
    return FakeRemoteStore()


@pytest.fixture
def connectivity():
    return ConnectivitySignal(online=True)


@pytest.fixture
def visibility():
    return VisibilitySignal(visible=True)


@pytest.fixture
def identity():
    return StaticIdentity("user-1")


@pytest.fixture
def engine(memory_store, remote, connectivity, identity, visibility):
    sync_engine = SyncEngine(
        memory_store, remote, connectivity, identity, visibility=visibility
    )
    yield sync_engine
    sync_engine.stop()
