import asyncio
import pytest
from unittest.mock import MagicMock

from cratedui.backend import BackendError
from cratedui.model import ContainerInfo, ContainerStats, NetworkInfo, SystemDiskUsage
from cratedui.service import ContainerService
from cratedui.state import StateStore


@pytest.fixture
def backend():
    b = MagicMock()
    b.get_containers.return_value = [
        ContainerInfo(id="c1", status="running"),
        ContainerInfo(id="c2", status="running"),
        ContainerInfo(id="c3", status="exited"),
    ]
    b.get_networks.return_value = [NetworkInfo(id="n1")]
    b.get_container_stats.side_effect = lambda cid: ContainerStats(cid, cpu_percent=1.0)
    return b


@pytest.fixture
def store():
    return StateStore()


def test_refresh_lists_fills_store(backend, store):
    service = ContainerService(backend, store)

    asyncio.run(service.refresh_lists())

    snap = store.get_snapshot()
    assert [c.id for c in snap.containers] == ["c1", "c2", "c3"]
    assert [n.id for n in snap.networks] == ["n1"]


def test_stats_for_running_containers_only(backend, store):
    service = ContainerService(backend, store)

    asyncio.run(service.load_container_stats())

    snap = store.get_snapshot()
    assert sorted(s.container_id for s in snap.container_stats) == ["c1", "c2"]
    assert snap.is_stats_loading is False
    assert snap.error_message is None


def test_loading_flag_only_when_requested(backend, store):
    service = ContainerService(backend, store)
    flags = []
    store.subscribe(lambda s: flags.append(s.get_snapshot().is_stats_loading))

    asyncio.run(service.load_container_stats(show_loading=False))

    assert True not in flags


def test_loading_flag_set_then_cleared(backend, store):
    service = ContainerService(backend, store)
    flags = []
    store.subscribe(lambda s: flags.append(s.get_snapshot().is_stats_loading))

    asyncio.run(service.load_container_stats(show_loading=True))

    assert flags[0] is True
    assert flags[-1] is False


def test_stats_failure_sets_error(backend, store):
    backend.get_container_stats.side_effect = BackendError("Failed to get container stats: Plugin missing")
    service = ContainerService(backend, store)

    asyncio.run(service.load_container_stats())

    snap = store.get_snapshot()
    assert snap.error_message == "Failed to get container stats: Plugin missing"
    assert snap.container_stats == []
    assert snap.is_stats_loading is False


def test_partial_stats_failure_keeps_results(backend, store):
    def stats(cid):
        if cid == "c2":
            raise BackendError("Failed to get container stats: gone")
        return ContainerStats(cid)
    backend.get_container_stats.side_effect = stats
    service = ContainerService(backend, store)

    asyncio.run(service.load_container_stats())

    snap = store.get_snapshot()
    assert [s.container_id for s in snap.container_stats] == ["c1"]
    assert snap.error_message is None


def test_stats_success_clears_stats_error(backend, store):
    service = ContainerService(backend, store)
    backend.get_container_stats.side_effect = BackendError("Failed to get container stats: old")
    asyncio.run(service.load_container_stats())
    assert store.get_snapshot().error_message == "Failed to get container stats: old"

    backend.get_container_stats.side_effect = lambda cid: ContainerStats(cid)
    asyncio.run(service.load_container_stats(show_loading=False))

    assert store.get_snapshot().error_message is None


def test_stats_success_keeps_disk_usage_error(backend, store):
    backend.get_disk_usage.side_effect = BackendError("Failed to get system disk usage: boom")
    service = ContainerService(backend, store)

    asyncio.run(service.load_system_disk_usage())
    asyncio.run(service.load_container_stats(show_loading=False))

    snap = store.get_snapshot()
    assert snap.system_disk_usage is None
    assert snap.error_message == "Failed to get system disk usage: boom"


def test_disk_usage_success_keeps_stats_error(backend, store):
    backend.get_container_stats.side_effect = BackendError("Failed to get container stats: Plugin missing")
    backend.get_disk_usage.return_value = SystemDiskUsage()
    service = ContainerService(backend, store)

    asyncio.run(service.load_container_stats())
    asyncio.run(service.load_system_disk_usage())

    assert store.get_snapshot().error_message == "Failed to get container stats: Plugin missing"


def test_successful_action_clears_failed_action(backend, store):
    backend.start_container.side_effect = BackendError("Failed to start container: busy")
    service = ContainerService(backend, store)
    asyncio.run(service.start_container("c3"))
    assert store.get_snapshot().error_message == "Failed to start container: busy"

    asyncio.run(service.stop_container("c1"))

    assert store.get_snapshot().error_message is None


def test_stats_request_skipped_while_in_flight(backend, store):
    service = ContainerService(backend, store)
    service._stats_in_flight = True

    asyncio.run(service.load_container_stats())

    backend.get_containers.assert_not_called()


def test_disk_usage(backend, store):
    usage = SystemDiskUsage()
    backend.get_disk_usage.return_value = usage
    service = ContainerService(backend, store)

    asyncio.run(service.load_system_disk_usage())

    assert store.get_snapshot().system_disk_usage is usage


def test_disk_usage_failure(backend, store):
    backend.get_disk_usage.side_effect = BackendError("Failed to get system disk usage: boom")
    service = ContainerService(backend, store)

    asyncio.run(service.load_system_disk_usage())

    snap = store.get_snapshot()
    assert snap.system_disk_usage is None
    assert snap.error_message == "Failed to get system disk usage: boom"


def test_stop_container_reports_and_refreshes(backend, store):
    service = ContainerService(backend, store)

    asyncio.run(service.stop_container("c1" * 10))

    backend.stop_container.assert_called_once_with("c1" * 10)
    backend.get_containers.assert_called_once()
    assert store.get_snapshot().message == f"Stopped {('c1' * 10)[:12]}"


def test_failed_action_sets_error(backend, store):
    backend.remove_container.side_effect = BackendError("Failed to remove container: busy")
    service = ContainerService(backend, store)

    asyncio.run(service.remove_container("c3"))

    snap = store.get_snapshot()
    assert snap.error_message == "Failed to remove container: busy"
    assert snap.message == ""
