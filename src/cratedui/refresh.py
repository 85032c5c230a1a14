"""
Lifetime-scoped refresh for the stats panel.

PeriodicRefresh is a cancellable handle around a repeating timer. The timer
itself comes from a scheduler callable with the shape of Textual's
`set_interval(interval, callback) -> Timer`, so the same code runs under the
app and under a fake clock in tests.

StatsPanel ties the handle to a panel's visible lifetime:
  - mount(): subscribe to the store, request stats + disk usage once, start
    the 5s stats-only timer
  - unmount(): stop the timer, unsubscribe

Guarantees:
  - at most one live timer per PeriodicRefresh, however often mount() runs
  - no refresh fires after unmount(), even if the scheduler already queued one
    and the panel has been mounted again since
  - results of requests still in flight at unmount() land in the store but
    never reach the panel's on_change callback
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from .views import StatsPanelView, stats_panel

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], Any]], Any]
Spawn = Callable[[Awaitable[Any]], Any]

STATS_REFRESH_INTERVAL = 5.0


class PeriodicRefresh:
    def __init__(self, interval: float, callback: Callable[[], Any]):
        self.interval = interval
        self.callback = callback
        self._handle: Optional[Any] = None
        self._generation = 0

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, scheduler: Scheduler) -> bool:
        """Start the timer. Returns False when one is already running."""
        if self._handle is not None:
            return False
        self._generation += 1
        generation = self._generation
        self._handle = scheduler(self.interval, lambda: self._fire(generation))
        logger.debug(f"Periodic refresh started ({self.interval}s)")
        return True

    def stop(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.stop()
            logger.debug("Periodic refresh stopped")

    def _fire(self, generation: int) -> Any:
        # Ticks queued by a timer from an earlier start() are dropped
        if self._handle is None or generation != self._generation:
            return None
        return self.callback()


class StatsPanel:
    """Controller behind the stats screen."""

    def __init__(self, service, store, scheduler: Scheduler, spawn: Spawn,
                 on_change: Callable[[StatsPanelView], None],
                 interval: float = STATS_REFRESH_INTERVAL,
                 include_disk_usage: bool = True):
        self.service = service
        self.store = store
        self.scheduler = scheduler
        self.spawn = spawn
        self.on_change = on_change
        self.include_disk_usage = include_disk_usage
        self.refresh = PeriodicRefresh(interval, self._tick)
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> None:
        if self.mounted:
            return
        self._unsubscribe = self.store.subscribe(self._on_store_change)
        self.spawn(self.service.load_container_stats(show_loading=True))
        if self.include_disk_usage:
            self.spawn(self.service.load_system_disk_usage())
        self.refresh.start(self.scheduler)

    def unmount(self) -> None:
        self.refresh.stop()
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def view(self) -> StatsPanelView:
        return stats_panel(self.store.get_snapshot(), include_disk_usage=self.include_disk_usage)

    def _tick(self) -> None:
        self.spawn(self.service.load_container_stats(show_loading=False))

    def _on_store_change(self, store) -> None:
        if self.mounted:
            self.on_change(self.view())
