from __future__ import annotations

from dataclasses import dataclass

from flight_mode.config.settings import Settings, get_settings
from flight_mode.connectivity import ConnectivityProbe, ConnectivitySignal, VisibilitySignal
from flight_mode.identity import IdentityProvider, StaticIdentity
from flight_mode.local_store import LocalStore
from flight_mode.remote import FirestoreClient, RemoteStore
from flight_mode.sync import SyncEngine


@dataclass
class Runtime:
    """The pieces an application host owns: one store, one remote, one engine."""

    settings: Settings
    store: LocalStore
    remote: RemoteStore
    connectivity: ConnectivitySignal
    visibility: VisibilitySignal
    identity: IdentityProvider
    engine: SyncEngine

    def build_probe(self) -> ConnectivityProbe:
        return ConnectivityProbe(self.connectivity, self.settings.connectivity_probe_url)

    async def aclose(self) -> None:
        self.engine.stop()
        await self.engine.wait_for_background()
        aclose = getattr(self.remote, "aclose", None)
        if aclose is not None:
            await aclose()
        self.store.close()


def build_runtime(
    settings: Settings | None = None,
    *,
    store: LocalStore | None = None,
    remote: RemoteStore | None = None,
    identity: IdentityProvider | None = None,
    online: bool = True,
) -> Runtime:
    settings = settings or get_settings()
    store = store or LocalStore(settings)
    store.initialize()
    remote = remote or FirestoreClient.from_settings(settings)
    identity = identity or StaticIdentity(settings.user_id)
    connectivity = ConnectivitySignal(online=online)
    visibility = VisibilitySignal()
    engine = SyncEngine(
        store,
        remote,
        connectivity,
        identity,
        visibility=visibility,
        collection=settings.remote_sessions_collection,
    )
    return Runtime(
        settings=settings,
        store=store,
        remote=remote,
        connectivity=connectivity,
        visibility=visibility,
        identity=identity,
        engine=engine,
    )
