"""
Docker API wrapper.

This module is the only place that talks to the container runtime, via the
docker-py library. It turns raw API objects into the dataclasses of
`model.py`:
  - containers with their ordered network attachments
  - networks with labels, address range and gateway
  - per-container stats snapshots
  - system disk usage (`docker system df`)
and executes container actions (start, stop, remove).

Error Handling:
  - List reads are fail-safe (@docker_safe): errors are logged and an empty
    collection is returned so the UI keeps rendering.
  - Actions, stats and disk usage raise BackendError with a readable message;
    the service layer turns it into the store's error message.

Dependencies:
  - docker>=7.0.0 (docker-py client)
"""

import docker
import logging
import functools
from typing import Any, Callable, Dict, List, Optional
from .model import ContainerInfo, ContainerStats, NetworkAttachment, NetworkInfo, SystemDiskUsage
from .cache import cached, cache_manager
from .stats import parse_container_stats, parse_disk_usage

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A runtime call failed; the message is meant to be shown to the user."""


def docker_safe(default_return: Any = None) -> Callable:
    """
    Decorator for read-only Docker calls.

    Catches exceptions, logs them, and returns a default value to prevent
    UI crashes.

    Usage:
        @docker_safe(default_return=[])
        def get_containers(self) -> List[ContainerInfo]:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Docker operation failed in {func.__name__}: {e}", exc_info=True)
                return default_return
        return wrapper
    return decorator


def docker_call(action: str) -> Callable:
    """
    Decorator for Docker calls whose failure must reach the user.

    Any exception is logged and re-raised as BackendError("Failed to <action>: ...").
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs) -> Any:
            if self.client is None:
                raise BackendError(f"Failed to {action}: Docker is not connected")
            try:
                return func(self, *args, **kwargs)
            except BackendError:
                raise
            except Exception as e:
                logger.error(f"Docker operation failed in {func.__name__}: {e}", exc_info=True)
                raise BackendError(f"Failed to {action}: {e}") from e
        return wrapper
    return decorator


def _attachments_from_attrs(attrs: Dict[str, Any]) -> List[NetworkAttachment]:
    config = attrs.get('Config') or {}
    hostname = config.get('Hostname') or None
    domain = config.get('Domainname')
    if hostname and domain:
        hostname = f"{hostname}.{domain}."

    networks = (attrs.get('NetworkSettings') or {}).get('Networks') or {}
    res = []
    for name, net in networks.items():
        address = None
        # Only "/24" is stripped for display; other prefix lengths stay visible
        if net.get('IPAddress'):
            address = f"{net['IPAddress']}/{net.get('IPPrefixLen') or 24}"
        res.append(NetworkAttachment(
            network=net.get('NetworkID') or name,
            address=address,
            hostname=hostname,
        ))
    return res


class DockerBackend:
    def __init__(self, base_url: Optional[str] = None, timeout: int = 60):
        try:
            if base_url:
                self.client = docker.DockerClient(base_url=base_url, timeout=timeout)
            else:
                self.client = docker.from_env(timeout=timeout)
        except Exception as e:
            logger.warning(f"Docker is not available: {e}")
            self.client = None

    @docker_safe(default_return=[])
    @cached(key_prefix="containers")
    def get_containers(self) -> List[ContainerInfo]:
        if not self.client: return []
        res = []
        for c in self.client.containers.list(all=True):
            # Config.Image avoids one images.get() round trip per container
            res.append(ContainerInfo(
                id=c.id,
                status=c.status,
                networks=_attachments_from_attrs(c.attrs),
                name=c.name,
                image=(c.attrs.get('Config') or {}).get('Image', 'unknown'),
            ))
        return res

    @docker_safe(default_return=[])
    @cached(key_prefix="networks")
    def get_networks(self) -> List[NetworkInfo]:
        if not self.client: return []
        res = []
        for n in self.client.networks.list():
            address, gateway = None, None
            configs = (n.attrs.get('IPAM') or {}).get('Config') or []
            if configs:
                address = configs[0].get('Subnet')
                gateway = configs[0].get('Gateway')
            res.append(NetworkInfo(
                id=n.id,
                name=n.name,
                driver=n.attrs.get('Driver', 'bridge'),
                labels=dict(n.attrs.get('Labels') or {}),
                address=address,
                gateway=gateway,
            ))
        return res

    @docker_call("get container stats")
    @cached(key_prefix="container_stats")
    def get_container_stats(self, container_id: str) -> ContainerStats:
        raw = self.client.containers.get(container_id).stats(stream=False)
        return parse_container_stats(container_id, raw)

    @docker_call("get system disk usage")
    @cached(key_prefix="disk_usage")
    def get_disk_usage(self) -> SystemDiskUsage:
        return parse_disk_usage(self.client.df())

    # Actions
    @docker_call("start container")
    def start_container(self, container_id: str) -> None:
        self.client.containers.get(container_id).start()
        cache_manager.invalidate("containers")

    @docker_call("stop container")
    def stop_container(self, container_id: str) -> None:
        self.client.containers.get(container_id).stop()
        cache_manager.invalidate("containers")
        cache_manager.invalidate(f"container_stats:{container_id}")

    @docker_call("remove container")
    def remove_container(self, container_id: str) -> None:
        self.client.containers.get(container_id).remove(force=True)
        cache_manager.invalidate("containers")
        cache_manager.invalidate(f"container_stats:{container_id}")
        cache_manager.invalidate("disk_usage")
