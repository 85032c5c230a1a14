"""
Data models for cratedui.

Plain dataclasses describing what the runtime reports (containers, networks,
stats, disk usage) and the enumerated sidebar sections. Snapshots are treated
as immutable by the views: a refresh replaces them wholesale.

Data Classes:
  - NetworkAttachment: one container <-> network binding (address, hostname)
  - ContainerInfo: container id, status and ordered attachments
  - NetworkInfo: network id, labels, address range and gateway
  - ContainerStats: point-in-time resource usage for one container
  - DiskUsageCategory / SystemDiskUsage: `docker system df` style totals
  - AppState: everything the views read (collections, snapshots, UI selection)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Tab(Enum):
    CONTAINERS = "containers"
    IMAGES = "images"
    MOUNTS = "mounts"
    DNS = "dns"
    NETWORKS = "networks"
    REGISTRIES = "registries"
    SYSTEM_LOGS = "system_logs"

    @property
    def icon(self) -> str:
        return _TAB_ICONS[self]

    @property
    def title(self) -> str:
        return _TAB_TITLES[self]


_TAB_ICONS = {
    Tab.CONTAINERS: "cube",
    Tab.IMAGES: "cube.transparent",
    Tab.MOUNTS: "externaldrive",
    Tab.DNS: "network",
    Tab.NETWORKS: "wifi",
    Tab.REGISTRIES: "server.rack",
    Tab.SYSTEM_LOGS: "doc.text.below.ecg",
}

_TAB_TITLES = {
    Tab.CONTAINERS: "Containers",
    Tab.IMAGES: "Images",
    Tab.MOUNTS: "Mounts",
    Tab.DNS: "DNS",
    Tab.NETWORKS: "Networks",
    Tab.REGISTRIES: "Registries",
    Tab.SYSTEM_LOGS: "System Logs",
}


@dataclass
class NetworkAttachment:
    network: str
    address: Optional[str] = None
    hostname: Optional[str] = None


@dataclass
class ContainerInfo:
    id: str
    status: str
    networks: List[NetworkAttachment] = field(default_factory=list)
    name: str = ""
    image: str = ""

    @property
    def is_running(self) -> bool:
        return self.status.lower() == "running"

    def attachment_for(self, network_id: Optional[str] = None) -> Optional[NetworkAttachment]:
        """Attachment to `network_id`, or the first one when no id is given."""
        if network_id is None:
            return self.networks[0] if self.networks else None
        for attachment in self.networks:
            if attachment.network == network_id:
                return attachment
        return None


@dataclass
class NetworkInfo:
    id: str
    name: str = ""
    driver: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    address: Optional[str] = None  # address range (subnet)
    gateway: Optional[str] = None


@dataclass(frozen=True)
class ContainerStats:
    container_id: str
    cpu_percent: float = 0.0
    memory_usage: int = 0
    memory_limit: int = 0
    network_rx: int = 0
    network_tx: int = 0
    block_read: int = 0
    block_write: int = 0
    pids: int = 0


def format_bytes(num: float) -> str:
    """Human readable size with 1024 steps ("0 B", "1.5 KB", "2.0 GB")."""
    if num < 1024:
        return f"{int(num)} B"
    for unit in ("KB", "MB", "GB", "TB"):
        num /= 1024.0
        if num < 1024 or unit == "TB":
            return f"{num:.1f} {unit}"
    return f"{num:.1f} TB"


@dataclass(frozen=True)
class DiskUsageCategory:
    total: int = 0
    active: int = 0
    size_bytes: int = 0
    reclaimable_bytes: int = 0

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.size_bytes)


@dataclass(frozen=True)
class SystemDiskUsage:
    containers: DiskUsageCategory = field(default_factory=DiskUsageCategory)
    images: DiskUsageCategory = field(default_factory=DiskUsageCategory)
    volumes: DiskUsageCategory = field(default_factory=DiskUsageCategory)

    @property
    def total_reclaimable(self) -> int:
        return (self.containers.reclaimable_bytes
                + self.images.reclaimable_bytes
                + self.volumes.reclaimable_bytes)

    @property
    def formatted_total_reclaimable(self) -> str:
        return format_bytes(self.total_reclaimable)


@dataclass
class AppState:
    containers: List[ContainerInfo] = field(default_factory=list)
    networks: List[NetworkInfo] = field(default_factory=list)
    container_stats: List[ContainerStats] = field(default_factory=list)
    system_disk_usage: Optional[SystemDiskUsage] = None
    error_message: Optional[str] = None
    is_stats_loading: bool = False
    selected_tab: Tab = Tab.CONTAINERS
    selected_container: Optional[str] = None
    selected_network: Optional[str] = None
    search_text: str = ""
    show_only_running: bool = False
    message: str = ""
