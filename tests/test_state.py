import pytest
from cratedui.filters import filter_containers
from cratedui.model import AppState, ContainerInfo, Tab
from cratedui.navigation import go_to_container
from cratedui.state import StateStore


def _containers():
    return [
        ContainerInfo(id="web-1", status="running"),
        ContainerInfo(id="db-1", status="exited"),
        ContainerInfo(id="cache-1", status="Running"),
        ContainerInfo(id="worker-1", status="created"),
    ]


def test_filter_without_criteria_is_identity():
    containers = _containers()
    result = filter_containers(containers)
    assert result == containers
    assert result is not containers


def test_filter_only_running_ignores_case():
    ids = [c.id for c in filter_containers(_containers(), only_running=True)]
    assert ids == ["web-1", "cache-1"]


def test_filter_search_matches_id_or_status():
    assert [c.id for c in filter_containers(_containers(), search_text="DB")] == ["db-1"]
    assert [c.id for c in filter_containers(_containers(), search_text="exit")] == ["db-1"]


def test_filter_combines_criteria_and_keeps_order():
    containers = _containers()
    result = filter_containers(containers, only_running=True, search_text="run")
    assert [c.id for c in result] == ["web-1", "cache-1"]
    for c in result:
        assert c in containers


def test_filter_does_not_modify_input():
    containers = _containers()
    filter_containers(containers, only_running=True, search_text="web")
    assert [c.id for c in containers] == ["web-1", "db-1", "cache-1", "worker-1"]


def test_subscribe_and_unsubscribe():
    store = StateStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.get_snapshot().search_text))

    store.set_search_text("web")
    unsubscribe()
    store.set_search_text("db")

    assert seen == ["web"]


def test_version_increments_on_every_update():
    store = StateStore()
    v0 = store.get_version()
    store.update_containers(_containers())
    store.set_error("boom")
    assert store.get_version() == v0 + 2


def test_failing_listener_does_not_block_others():
    store = StateStore()
    calls = []

    def broken(_):
        raise RuntimeError("listener bug")

    store.subscribe(broken)
    store.subscribe(lambda _: calls.append(True))
    store.set_message("hi")

    assert calls == [True]


def test_snapshot_is_a_copy():
    store = StateStore()
    store.update_containers(_containers())
    snap = store.get_snapshot()
    snap.containers.clear()
    assert len(store.get_snapshot().containers) == 4


def test_visible_containers_uses_filters():
    store = StateStore()
    store.update_containers(_containers())
    store.toggle_show_only_running()
    store.set_search_text("cache")
    assert [c.id for c in store.visible_containers()] == ["cache-1"]
    store.toggle_show_only_running()
    assert store.get_snapshot().show_only_running is False


def test_set_tab_clears_message():
    store = StateStore(AppState(message="Started abc"))
    store.set_tab(Tab.NETWORKS)
    snap = store.get_snapshot()
    assert snap.selected_tab == Tab.NETWORKS
    assert snap.message == ""


def test_error_set_and_clear():
    store = StateStore()
    store.set_error("Failed to get container stats: boom")
    assert store.get_snapshot().error_message == "Failed to get container stats: boom"
    store.clear_error()
    assert store.get_snapshot().error_message is None


def test_go_to_container_switches_section_and_selects():
    store = StateStore(AppState(selected_tab=Tab.NETWORKS))
    go_to_container(store, "c1")
    snap = store.get_snapshot()
    assert snap.selected_tab == Tab.CONTAINERS
    assert snap.selected_container == "c1"


@pytest.mark.parametrize("tab,title,icon", [
    (Tab.CONTAINERS, "Containers", "cube"),
    (Tab.IMAGES, "Images", "cube.transparent"),
    (Tab.MOUNTS, "Mounts", "externaldrive"),
    (Tab.DNS, "DNS", "network"),
    (Tab.NETWORKS, "Networks", "wifi"),
    (Tab.REGISTRIES, "Registries", "server.rack"),
    (Tab.SYSTEM_LOGS, "System Logs", "doc.text.below.ecg"),
])
def test_tab_title_and_icon(tab, title, icon):
    assert tab.title == title
    assert tab.icon == icon
