"""
Pure view-models for cratedui.

Every function here maps snapshots (containers, networks, stats) to small
dataclasses describing what a screen shows: texts, tints and which cells can
be activated. Nothing here touches Textual or the runtime, so each branch
("empty table", "network not found", "stats unavailable") is testable as a
plain value.

Tints are symbolic ("active", "muted", "actionable", "warning"); render.py
maps them to Rich styles through the configured colour theme.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from .model import AppState, ContainerInfo, ContainerStats, NetworkInfo, SystemDiskUsage, format_bytes
from .navigation import Opener, go_to_container, open_url

NOT_AVAILABLE = "N/A"

ACTIVE = "active"
MUTED = "muted"
ACTIONABLE = "actionable"
WARNING = "warning"


def clean_address(address: Optional[str]) -> str:
    """Address for display: every "/24" removed, N/A when absent."""
    if address is None:
        return NOT_AVAILABLE
    return address.replace("/24", "")


def clean_hostname(hostname: Optional[str]) -> str:
    """Hostname for display: one trailing dot removed, N/A when absent."""
    if hostname is None:
        return NOT_AVAILABLE
    return hostname[:-1] if hostname.endswith(".") else hostname


def status_tint(container: ContainerInfo) -> str:
    return ACTIVE if container.is_running else MUTED


@dataclass(frozen=True)
class Cell:
    text: str
    tint: str
    enabled: bool


def _link_cell(text: str) -> Cell:
    enabled = text != NOT_AVAILABLE
    return Cell(text=text, tint=ACTIONABLE if enabled else MUTED, enabled=enabled)


@dataclass(frozen=True)
class ContainerRow:
    container_id: str
    icon_tint: str
    name: Cell
    address: Cell
    hostname: Cell

    def activate_name(self, store) -> None:
        go_to_container(store, self.container_id)

    def activate_address(self, opener: Optional[Opener] = None) -> bool:
        return self._open(self.address, opener)

    def activate_hostname(self, opener: Optional[Opener] = None) -> bool:
        return self._open(self.hostname, opener)

    @staticmethod
    def _open(cell: Cell, opener: Optional[Opener]) -> bool:
        return cell.enabled and open_url(cell.text, opener)


def container_row(container: ContainerInfo, network_id: Optional[str] = None) -> ContainerRow:
    """
    Row for one container.

    Uses the attachment to `network_id`, or the first attachment when no
    network is given.
    """
    attachment = container.attachment_for(network_id)
    address = attachment.address if attachment else None
    hostname = attachment.hostname if attachment else None
    return ContainerRow(
        container_id=container.id,
        icon_tint=status_tint(container),
        name=Cell(text=container.id, tint=ACTIONABLE, enabled=True),
        address=_link_cell(clean_address(address)),
        hostname=_link_cell(clean_hostname(hostname)),
    )


@dataclass(frozen=True)
class ContainerTable:
    rows: List[ContainerRow]
    empty_message: str
    headers: Tuple[str, str, str] = ("Container", "IP Address", "Hostname")

    @property
    def is_empty(self) -> bool:
        return not self.rows


def container_table(containers: Sequence[ContainerInfo], empty_message: str,
                    network_id: Optional[str] = None) -> ContainerTable:
    return ContainerTable(
        rows=[container_row(c, network_id) for c in containers],
        empty_message=empty_message,
    )


# --- Containers section ---

@dataclass(frozen=True)
class ContainerListItem:
    container_id: str
    icon_tint: str
    primary: str
    secondary_left: str
    secondary_right: str
    selected: bool = False


def container_list(state: AppState, containers: Sequence[ContainerInfo]) -> List[ContainerListItem]:
    """List items for the already filtered `containers`."""
    items = []
    for c in containers:
        attachment = c.attachment_for()
        items.append(ContainerListItem(
            container_id=c.id,
            icon_tint=status_tint(c),
            primary=c.id,
            secondary_left=(attachment.address or "") if attachment else "",
            secondary_right=c.status,
            selected=c.id == state.selected_container,
        ))
    return items


def container_actions(container: ContainerInfo) -> List[Tuple[str, str]]:
    """(label, action) pairs offered for a container."""
    toggle = ("Stop Container", "stop") if container.is_running else ("Start Container", "start")
    return [toggle, ("Remove Container", "remove")]


# --- Network detail ---

@dataclass(frozen=True)
class DetailRow:
    label: str
    value: str

    @property
    def monospace(self) -> bool:
        return "Address" in self.label or "Gateway" in self.label


@dataclass(frozen=True)
class NetworkDetail:
    network_id: str
    title: str
    rows: List[DetailRow]
    labels: List[DetailRow]
    connected: ContainerTable


@dataclass(frozen=True)
class NetworkNotFound:
    network_id: str
    message: str = "Network not found"


NO_CONNECTED_CONTAINERS = "No containers are connected to this network"


def connected_containers(network_id: str, containers: Sequence[ContainerInfo]) -> List[ContainerInfo]:
    return [c for c in containers if any(a.network == network_id for a in c.networks)]


def network_detail(network_id: str, networks: Sequence[NetworkInfo],
                   containers: Sequence[ContainerInfo]) -> Union[NetworkDetail, NetworkNotFound]:
    network = next((n for n in networks if n.id == network_id), None)
    if network is None:
        return NetworkNotFound(network_id=network_id)

    rows = [DetailRow("Network ID", network.id)]
    count = len(network.labels)
    if count:
        rows.append(DetailRow("Labels", f"{count} label{'' if count == 1 else 's'}"))
    if network.address is not None:
        rows.append(DetailRow("Address Range", network.address))
    if network.gateway is not None:
        rows.append(DetailRow("Gateway", network.gateway))

    labels = [DetailRow(k, v) for k, v in sorted(network.labels.items())]

    return NetworkDetail(
        network_id=network.id,
        title=network.name or network.id,
        rows=rows,
        labels=labels,
        connected=container_table(connected_containers(network.id, containers),
                                  NO_CONNECTED_CONTAINERS, network_id=network.id),
    )


# --- Stats panel ---

STATS_UNAVAILABLE = "Stats Unavailable"
REMEDIATION_HINTS = [
    "Update your container runtime to the latest version",
    "Check if container stats plugin is available",
    "Ensure containers are running before checking stats",
]


@dataclass(frozen=True)
class ErrorBlock:
    message: str
    hints: List[str] = field(default_factory=list)
    title: str = STATS_UNAVAILABLE


def error_block(error_message: Optional[str]) -> Optional[ErrorBlock]:
    if not error_message:
        return None
    hints = []
    if "container stats" in error_message or "Plugin" in error_message:
        hints = list(REMEDIATION_HINTS)
    return ErrorBlock(message=error_message, hints=hints)


@dataclass(frozen=True)
class DiskUsageCard:
    label: str
    value: str
    detail: str
    tint: str


PLACEHOLDER = "--"


def disk_usage_cards(usage: Optional[SystemDiskUsage]) -> List[DiskUsageCard]:
    if usage is None:
        return [DiskUsageCard(label, PLACEHOLDER, PLACEHOLDER, MUTED)
                for label in ("Containers", "Images", "Volumes")] + [
            DiskUsageCard("Reclaimable", PLACEHOLDER, "Space", MUTED)]

    cards = []
    for label, category in (("Containers", usage.containers),
                            ("Images", usage.images),
                            ("Volumes", usage.volumes)):
        cards.append(DiskUsageCard(label, category.formatted_size,
                                   f"{category.active}/{category.total}", ACTIVE))
    cards.append(DiskUsageCard("Reclaimable", usage.formatted_total_reclaimable, "Space", WARNING))
    return cards


@dataclass(frozen=True)
class StatsRow:
    container_id: str
    cpu: str
    memory: str
    network_io: str
    block_io: str
    pids: str


def stats_row(stats: ContainerStats) -> StatsRow:
    memory = format_bytes(stats.memory_usage)
    if stats.memory_limit:
        memory = f"{memory} / {format_bytes(stats.memory_limit)}"
    return StatsRow(
        container_id=stats.container_id,
        cpu=f"{stats.cpu_percent:.1f}%",
        memory=memory,
        network_io=f"{format_bytes(stats.network_rx)} / {format_bytes(stats.network_tx)}",
        block_io=f"{format_bytes(stats.block_read)} / {format_bytes(stats.block_write)}",
        pids=str(stats.pids),
    )


def stats_empty_message(is_loading: bool, stats: Sequence[ContainerStats]) -> str:
    if is_loading:
        return "Loading container statistics..."
    if not stats:
        return "No running containers or stats unavailable"
    return ""


@dataclass(frozen=True)
class StatsPanelView:
    error: Optional[ErrorBlock]
    disk_usage: List[DiskUsageCard]
    rows: List[StatsRow]
    empty_message: str
    headers: Tuple[str, ...] = ("Container", "CPU", "Memory", "Net I/O", "Block I/O", "PIDs")


def stats_panel(state: AppState, include_disk_usage: bool = True) -> StatsPanelView:
    """Stats panel from whatever the store holds right now."""
    return StatsPanelView(
        error=error_block(state.error_message),
        disk_usage=disk_usage_cards(state.system_disk_usage) if include_disk_usage else [],
        rows=[stats_row(s) for s in state.container_stats],
        empty_message=stats_empty_message(state.is_stats_loading, state.container_stats),
    )
