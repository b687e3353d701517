# src/services/connectivity.py

"""Network connectivity signal with change notifications."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from curl_cffi import requests as curl_requests

from src.config.settings import Settings

logger = logging.getLogger("catalog_browser.connectivity")

Listener = Callable[[bool], None]
Unsubscribe = Callable[[], None]


class ConnectivitySource(Protocol):
    """Anything that can answer "is the device connected"."""

    def is_connected(self) -> bool: ...

    def subscribe(self, listener: Listener) -> Unsubscribe: ...


@dataclass
class ConnectivityStatus:
    """Result of a single connectivity probe."""

    connected: bool
    latency_ms: float
    message: str


class _ListenerRegistry:
    """Tracks the last known state and notifies listeners on change."""

    def __init__(self, initial: bool | None = None) -> None:
        self._listeners: list[Listener] = []
        self._state: bool | None = initial
        self._lock = threading.Lock()

    @property
    def state(self) -> bool | None:
        return self._state

    def subscribe(self, listener: Listener) -> Unsubscribe:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def update(self, connected: bool) -> None:
        """Record *connected*; notify listeners if it changed."""
        with self._lock:
            changed = self._state is not None and self._state != connected
            first = self._state is None
            self._state = connected
            listeners = list(self._listeners)

        if first or not changed:
            return

        logger.info(
            "Connectivity changed: %s",
            "online" if connected else "offline",
        )
        for listener in listeners:
            try:
                listener(connected)
            except Exception:
                logger.error(
                    "Connectivity listener %r failed",
                    listener,
                    exc_info=True,
                )


class ConnectivityMonitor:
    """Polls a probe URL to decide whether the network is reachable.

    Each :meth:`check` performs one lightweight GET; any transport error
    or error status counts as offline.  Subscribers hear about
    transitions only, not every poll.
    """

    def __init__(
        self,
        probe_url: str | None = None,
        session: Any = None,
    ) -> None:
        self.settings = Settings()
        self.probe_url = probe_url or self.settings.CONNECTIVITY_PROBE_URL
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._registry = _ListenerRegistry()

    @property
    def last_known(self) -> bool | None:
        """State observed by the most recent probe (None before any)."""
        return self._registry.state

    def check(self) -> ConnectivityStatus:
        """Probe the network once and record the outcome."""
        start = time.monotonic()
        try:
            resp = self.session.get(
                self.probe_url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self.settings.CONNECTIVITY_TIMEOUT,
            )
            elapsed_ms = (time.monotonic() - start) * 1000
            if resp.status_code >= 400:
                status = ConnectivityStatus(
                    connected=False,
                    latency_ms=elapsed_ms,
                    message=f"HTTP {resp.status_code}",
                )
            else:
                status = ConnectivityStatus(
                    connected=True,
                    latency_ms=elapsed_ms,
                    message="",
                )
        except Exception as exc:
            elapsed_ms = (time.monotonic() - start) * 1000
            status = ConnectivityStatus(
                connected=False,
                latency_ms=elapsed_ms,
                message=str(exc)[:80],
            )

        logger.debug(
            "Connectivity probe %s: %s (%.0fms) %s",
            self.probe_url,
            "online" if status.connected else "offline",
            status.latency_ms,
            status.message,
        )
        self._registry.update(status.connected)
        return status

    def is_connected(self) -> bool:
        """Probe now and report whether the network is reachable."""
        return self.check().connected

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register *listener* for online/offline transitions."""
        return self._registry.subscribe(listener)


class StaticConnectivity:
    """A connectivity signal set by hand (``--offline``, tests)."""

    def __init__(self, connected: bool = True) -> None:
        self._registry = _ListenerRegistry(initial=connected)

    def is_connected(self) -> bool:
        return bool(self._registry.state)

    def set(self, connected: bool) -> None:
        """Change the signal, notifying subscribers on a transition."""
        self._registry.update(connected)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._registry.subscribe(listener)
