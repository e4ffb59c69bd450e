"""Ambient online/offline and visibility signals with transition subscriptions."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class _RisingSignal:
    """Boolean signal that notifies listeners on False -> True transitions."""

    def __init__(self, value: bool) -> None:
        self._value = value
        self._listeners: list[Listener] = []

    def _set(self, value: bool) -> None:
        previous, self._value = self._value, bool(value)
        if previous or not self._value:
            return
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:  # noqa: BLE001
                logger.exception("%s listener failed", type(self).__name__)

    def _subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class ConnectivitySignal(_RisingSignal):
    def __init__(self, online: bool = True) -> None:
        super().__init__(online)

    @property
    def is_online(self) -> bool:
        return self._value

    def set_online(self, online: bool) -> None:
        self._set(online)

    def subscribe_online(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` whenever connectivity goes from offline to online."""
        return self._subscribe(listener)


class VisibilitySignal(_RisingSignal):
    def __init__(self, visible: bool = True) -> None:
        super().__init__(visible)

    @property
    def is_visible(self) -> bool:
        return self._value

    def set_visible(self, visible: bool) -> None:
        self._set(visible)

    def subscribe_visible(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` whenever the host goes from hidden to visible."""
        return self._subscribe(listener)


class ConnectivityProbe:
    """Feeds a ConnectivitySignal from periodic HTTP reachability checks."""

    def __init__(
        self,
        signal: ConnectivitySignal,
        url: str,
        *,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._signal = signal
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def check(self) -> bool:
        try:
            await self._client.head(self._url)
            online = True
        except httpx.HTTPError as exc:
            logger.debug("Connectivity probe to %s failed: %s", self._url, exc)
            online = False
        if online != self._signal.is_online:
            logger.info("Connectivity changed: online=%s", online)
        self._signal.set_online(online)
        return online

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def run(self, interval_seconds: float) -> None:
        try:
            while True:
                await self.check()
                await asyncio.sleep(interval_seconds)
        finally:
            await self.aclose()
