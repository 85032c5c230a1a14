import io

from rich.console import Console

from cratedui.config import ColorTheme
from cratedui.model import (
    AppState, ContainerInfo, ContainerStats, NetworkAttachment, NetworkInfo, SystemDiskUsage,
)
from cratedui.render import (
    render_container_info, render_container_list, render_container_table, render_network_detail,
    render_network_list, render_stats_panel,
)
from cratedui.views import container_list, container_table, network_detail, stats_panel


def _text(renderable, width=120):
    console = Console(file=io.StringIO(), width=width, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


THEME = ColorTheme()
CONTAINERS = [
    ContainerInfo(id="c1", status="running",
                  networks=[NetworkAttachment("n1", "10.0.0.2/24", "c1.test.")]),
    ContainerInfo(id="c2", status="exited"),
]


def test_container_table():
    out = _text(render_container_table(container_table(CONTAINERS, "empty"), THEME))
    assert "IP Address" in out
    assert "10.0.0.2" in out
    assert "10.0.0.2/24" not in out
    assert "c1.test" in out
    assert "N/A" in out


def test_empty_container_table():
    out = _text(render_container_table(container_table([], "Nothing connected"), THEME))
    assert "Nothing connected" in out


def test_container_list_and_info():
    items = container_list(AppState(), CONTAINERS)
    out = _text(render_container_list(items, THEME, cursor=0))
    assert "c1" in out
    assert "exited" in out

    info = _text(render_container_info(CONTAINERS[0], THEME))
    assert "Status: running" in info
    assert _text(render_container_list([], THEME)).strip() == "No containers"


def test_network_views():
    networks = [NetworkInfo(id="n1", name="bridge", driver="bridge", labels={"env": "dev"},
                            address="10.0.0.0/24", gateway="10.0.0.1")]
    assert "bridge" in _text(render_network_list(networks, THEME))

    out = _text(render_network_detail(network_detail("n1", networks, CONTAINERS), THEME))
    assert "Gateway" in out
    assert "1 label" in out
    assert "Connected Containers" in out
    assert "c1" in out

    missing = _text(render_network_detail(network_detail("nope", networks, CONTAINERS), THEME))
    assert "Network not found" in missing


def test_stats_panel_with_error_and_rows():
    state = AppState(
        error_message="Failed to get container stats: Plugin missing",
        container_stats=[ContainerStats("c1", cpu_percent=2.5)],
        system_disk_usage=SystemDiskUsage(),
    )
    out = _text(render_stats_panel(stats_panel(state), THEME))

    assert "Stats Unavailable" in out
    assert "Possible solutions" in out
    assert "System Disk Usage" in out
    assert "Reclaimable" in out
    assert "2.5%" in out


def test_stats_panel_loading():
    out = _text(render_stats_panel(stats_panel(AppState(is_stats_loading=True)), THEME))
    assert "Loading container statistics..." in out
    assert "Stats Unavailable" not in out
