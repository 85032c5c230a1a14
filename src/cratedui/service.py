"""
Async container service.

ContainerService is the collaborator the views talk to. It runs the blocking
docker-py calls of DockerBackend in worker threads (asyncio.to_thread) and
publishes every result into the StateStore; callers never consume return
values for rendering, they re-render from the store.

Operations:
  - list_containers / list_networks / refresh_lists
  - start_container / stop_container / remove_container (fire and forget,
    the container list is refreshed afterwards)
  - load_container_stats(show_loading) / load_system_disk_usage

Errors:
  - BackendError messages become the store's error_message verbatim
  - a successful call clears the error message only when the same kind of
    operation (stats, disk usage, container action) set it
  - a stats request while another one is in flight is skipped
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from .backend import BackendError, DockerBackend
from .cache import cache_manager
from .model import ContainerInfo, ContainerStats, NetworkInfo
from .state import StateStore

logger = logging.getLogger(__name__)


class ContainerService:
    def __init__(self, backend: DockerBackend, store: StateStore):
        self.backend = backend
        self.store = store
        self._stats_in_flight = False
        self._error_source: Optional[str] = None

    async def _run(self, func: Callable, *args: Any) -> Any:
        return await asyncio.to_thread(func, *args)

    def _succeeded(self, source: str) -> None:
        if self._error_source == source:
            self._error_source = None
            self.store.clear_error()

    def _failed(self, error: BackendError, source: str) -> None:
        logger.warning(str(error))
        self._error_source = source
        self.store.set_error(str(error))

    async def list_containers(self) -> List[ContainerInfo]:
        containers = await self._run(self.backend.get_containers)
        self.store.update_containers(containers)
        return containers

    async def list_networks(self) -> List[NetworkInfo]:
        networks = await self._run(self.backend.get_networks)
        self.store.update_networks(networks)
        return networks

    async def refresh_lists(self) -> None:
        await asyncio.gather(self.list_containers(), self.list_networks())
        cache_manager.cleanup_expired()

    async def _container_action(self, func: Callable, container_id: str, done: str) -> None:
        try:
            await self._run(func, container_id)
        except BackendError as e:
            self._failed(e, "action")
        else:
            logger.info(f"{done} container {container_id}")
            self.store.set_message(f"{done} {container_id[:12]}")
            self._succeeded("action")
        await self.list_containers()

    async def start_container(self, container_id: str) -> None:
        await self._container_action(self.backend.start_container, container_id, "Started")

    async def stop_container(self, container_id: str) -> None:
        await self._container_action(self.backend.stop_container, container_id, "Stopped")

    async def remove_container(self, container_id: str) -> None:
        await self._container_action(self.backend.remove_container, container_id, "Removed")

    async def load_container_stats(self, show_loading: bool = True) -> None:
        if self._stats_in_flight:
            logger.debug("Stats refresh already in flight, skipping")
            return
        self._stats_in_flight = True
        if show_loading:
            self.store.set_stats_loading(True)
        try:
            containers = await self.list_containers()
            running = [c for c in containers if c.is_running]
            results = await asyncio.gather(
                *[self._run(self.backend.get_container_stats, c.id) for c in running],
                return_exceptions=True,
            )
            stats: List[ContainerStats] = [r for r in results if isinstance(r, ContainerStats)]
            errors = [r for r in results if isinstance(r, BaseException)]
            for err in errors:
                if not isinstance(err, BackendError):
                    raise err
            self.store.set_container_stats(stats)
            if errors and not stats:
                self._failed(errors[0], "stats")
            else:
                self._succeeded("stats")
        finally:
            self._stats_in_flight = False
            if show_loading:
                self.store.set_stats_loading(False)

    async def load_system_disk_usage(self) -> None:
        try:
            usage = await self._run(self.backend.get_disk_usage)
        except BackendError as e:
            self._failed(e, "disk_usage")
            return
        self.store.set_system_disk_usage(usage)
        self._succeeded("disk_usage")
