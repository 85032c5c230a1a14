"""
Observable application state.

StateStore is the single owner of everything the views read: the runtime
collections, the stats/disk usage snapshots, the last error, the loading flag
and the UI selection. Writers (the service, key handlers) call the update
methods; readers call get_snapshot() and register for change notifications
with subscribe().

Thread Safety:
  - All state access protected by self._lock (RLock for reentrant locking)
  - Listeners are called after the lock is released, in registration order
  - A version counter is bumped on every change

Notification Pattern:
  1. A writer updates one or more fields under the lock
  2. The version is incremented
  3. Every subscribed listener is called with the store
  4. Listeners re-render from get_snapshot() (last write wins)
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, List, Optional

from .filters import filter_containers
from .model import AppState, ContainerInfo, ContainerStats, NetworkInfo, SystemDiskUsage, Tab

logger = logging.getLogger(__name__)

Listener = Callable[["StateStore"], None]


class StateStore:
    """Thread-safe state store with subscribe/notify."""

    def __init__(self, initial: Optional[AppState] = None):
        self._state = initial or AppState()
        self._lock = threading.RLock()
        self._version = 0
        self._listeners: List[Listener] = []

    def get_version(self) -> int:
        with self._lock: return self._version

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}", exc_info=True)

    def _update(self, **changes) -> None:
        with self._lock:
            for key, value in changes.items():
                setattr(self._state, key, value)
            self._version += 1
        self._notify()

    # Runtime data, written by the service
    def update_containers(self, containers: List[ContainerInfo]) -> None:
        self._update(containers=list(containers))

    def update_networks(self, networks: List[NetworkInfo]) -> None:
        self._update(networks=list(networks))

    def set_container_stats(self, stats: List[ContainerStats]) -> None:
        self._update(container_stats=list(stats))

    def set_system_disk_usage(self, usage: Optional[SystemDiskUsage]) -> None:
        self._update(system_disk_usage=usage)

    def set_stats_loading(self, loading: bool) -> None:
        self._update(is_stats_loading=loading)

    def set_error(self, error_message: str) -> None:
        self._update(error_message=error_message)

    def clear_error(self) -> None:
        self._update(error_message=None)

    # UI state
    def set_tab(self, tab: Tab) -> None:
        self._update(selected_tab=tab, message="")

    def select_container(self, container_id: Optional[str]) -> None:
        self._update(selected_container=container_id)

    def select_network(self, network_id: Optional[str]) -> None:
        self._update(selected_network=network_id)

    def set_search_text(self, text: str) -> None:
        self._update(search_text=text)

    def set_show_only_running(self, only_running: bool) -> None:
        self._update(show_only_running=only_running)

    def toggle_show_only_running(self) -> None:
        with self._lock:
            only_running = not self._state.show_only_running
        self._update(show_only_running=only_running)

    def set_message(self, message: str) -> None:
        self._update(message=message)

    def visible_containers(self) -> List[ContainerInfo]:
        with self._lock:
            return filter_containers(self._state.containers,
                                     self._state.show_only_running,
                                     self._state.search_text)

    def get_snapshot(self) -> AppState:
        with self._lock:
            return replace(
                self._state,
                containers=list(self._state.containers),
                networks=list(self._state.networks),
                container_stats=list(self._state.container_stats),
            )
