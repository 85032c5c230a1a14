"""
Statistics parsing for cratedui.

Turns the raw dictionaries returned by the Docker API into the immutable
snapshots rendered by the stats panel:
- parse_container_stats: one `container.stats(stream=False)` payload
- parse_disk_usage: the `client.df()` payload

Both are tolerant of missing keys; the daemon omits sections depending on
platform and cgroup version.
"""

from typing import Any, Dict
import logging

from .model import ContainerStats, DiskUsageCategory, SystemDiskUsage

logger = logging.getLogger(__name__)


def _cpu_percent(stats: Dict[str, Any]) -> float:
    cpu_stats = stats.get('cpu_stats') or {}
    precpu_stats = stats.get('precpu_stats') or {}
    cpu_usage = (cpu_stats.get('cpu_usage') or {}).get('total_usage', 0)
    precpu_usage = (precpu_stats.get('cpu_usage') or {}).get('total_usage', 0)
    system_delta = cpu_stats.get('system_cpu_usage', 0) - precpu_stats.get('system_cpu_usage', 0)
    online_cpus = cpu_stats.get('online_cpus') or len((cpu_stats.get('cpu_usage') or {}).get('percpu_usage') or []) or 1
    cpu_delta = cpu_usage - precpu_usage
    if system_delta > 0 and cpu_delta > 0:
        return (cpu_delta / system_delta) * online_cpus * 100.0
    logger.debug(f"No CPU delta in stats sample (cpu={cpu_delta}, system={system_delta}), reporting 0%")
    return 0.0


def parse_container_stats(container_id: str, stats: Dict[str, Any]) -> ContainerStats:
    """Build a ContainerStats snapshot from a non-streaming stats payload."""
    memory = stats.get('memory_stats') or {}

    rx = tx = 0
    for iface in (stats.get('networks') or {}).values():
        rx += iface.get('rx_bytes', 0)
        tx += iface.get('tx_bytes', 0)

    read = write = 0
    for entry in (stats.get('blkio_stats') or {}).get('io_service_bytes_recursive') or []:
        op = str(entry.get('op', '')).lower()
        if op == 'read':
            read += entry.get('value', 0)
        elif op == 'write':
            write += entry.get('value', 0)

    return ContainerStats(
        container_id=container_id,
        cpu_percent=_cpu_percent(stats),
        memory_usage=memory.get('usage', 0),
        memory_limit=memory.get('limit', 0),
        network_rx=rx,
        network_tx=tx,
        block_read=read,
        block_write=write,
        pids=(stats.get('pids_stats') or {}).get('current', 0),
    )


def parse_disk_usage(df: Dict[str, Any]) -> SystemDiskUsage:
    """Aggregate `docker system df` data into containers/images/volumes totals."""
    images = df.get('Images') or []
    in_use_images = [i for i in images if i.get('Containers', 0) > 0]
    image_size = df.get('LayersSize') or sum(i.get('Size', 0) for i in images)
    image_reclaimable = sum(i.get('Size', 0) - i.get('SharedSize', 0)
                            for i in images if i.get('Containers', 0) <= 0)

    containers = df.get('Containers') or []
    running = [c for c in containers if c.get('State') == 'running']

    volumes = df.get('Volumes') or []
    volume_usage = [v.get('UsageData') or {} for v in volumes]

    def _size(usage: Dict[str, Any]) -> int:
        # -1 means the daemon did not compute it
        return max(usage.get('Size', 0), 0)

    return SystemDiskUsage(
        containers=DiskUsageCategory(
            total=len(containers),
            active=len(running),
            size_bytes=sum(c.get('SizeRw', 0) or 0 for c in containers),
            reclaimable_bytes=sum(c.get('SizeRw', 0) or 0 for c in containers if c.get('State') != 'running'),
        ),
        images=DiskUsageCategory(
            total=len(images),
            active=len(in_use_images),
            size_bytes=image_size,
            reclaimable_bytes=max(image_reclaimable, 0),
        ),
        volumes=DiskUsageCategory(
            total=len(volumes),
            active=sum(1 for u in volume_usage if u.get('RefCount', 0) > 0),
            size_bytes=sum(_size(u) for u in volume_usage),
            reclaimable_bytes=sum(_size(u) for u in volume_usage if u.get('RefCount', 0) <= 0),
        ),
    )
