"""Textual-based UI for cratedui."""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import Footer, Header, Static, Tab as TabWidget, Tabs

from .backend import DockerBackend
from .config import ConfigManager, get_config_manager
from .model import ContainerInfo, NetworkInfo, Tab
from .refresh import StatsPanel
from .render import (
    render_container_info, render_container_list, render_network_detail, render_network_list,
    render_stats_panel, tab_label,
)
from .service import ContainerService
from .state import StateStore
from .views import (
    NetworkDetail, NetworkNotFound, StatsPanelView, container_actions, container_list, network_detail,
)


class ConfirmScreen(ModalScreen[bool]):
    def __init__(self, question: str) -> None:
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Confirm", classes="modal_title"),
            Static(self.question, classes="modal_body"),
            Static("[Enter/Y] Yes    [Esc/N] No", classes="modal_hint", markup=False),
            id="modal",
        )

    async def on_key(self, event: events.Key) -> None:
        if event.key in ("enter", "y", "Y"):
            self.dismiss(True)
        elif event.key in ("escape", "n", "N"):
            self.dismiss(False)


class ActionMenuScreen(ModalScreen[Optional[str]]):
    BINDINGS = [
        Binding("up", "move_up", "Up", show=False),
        Binding("down", "move_down", "Down", show=False),
        Binding("enter", "select", "Select", show=False),
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, title: str, options: list[tuple[str, str]]) -> None:
        super().__init__()
        self.menu_title = title
        self.options = options
        self.index = 0

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(self.menu_title, classes="modal_title", markup=False),
            Static("", id="menu_options", classes="modal_body", markup=False),
            Static("[Up/Down] Move  [Enter] Select  [Esc] Cancel", classes="modal_hint", markup=False),
            id="modal",
        )

    def on_mount(self) -> None:
        self._render_options()

    def _render_options(self) -> None:
        lines = []
        for idx, (label, _) in enumerate(self.options):
            marker = ">" if idx == self.index else " "
            lines.append(f"{marker} {label}")
        self.query_one("#menu_options", Static).update("\n".join(lines))

    def action_move_up(self) -> None:
        self.index = (self.index - 1) % len(self.options)
        self._render_options()

    def action_move_down(self) -> None:
        self.index = (self.index + 1) % len(self.options)
        self._render_options()

    def action_select(self) -> None:
        self.dismiss(self.options[self.index][1])

    def action_cancel(self) -> None:
        self.dismiss(None)


class StatsScreen(Screen[None]):
    """Full-screen stats panel. The periodic refresh lives exactly as long as this screen is mounted."""

    BINDINGS = [
        Binding("escape", "close", "Back"),
        Binding("t", "close", "Back", show=False),
    ]

    def __init__(self, service: ContainerService, store: StateStore, config_manager: ConfigManager) -> None:
        super().__init__()
        self.service = service
        self.store = store
        self.theme_config = config_manager.get_config().ui.color_theme
        self.panel = StatsPanel(
            service,
            store,
            scheduler=self.set_interval,
            spawn=self._spawn,
            on_change=self._show,
            interval=config_manager.get_stats_refresh_interval(),
            include_disk_usage=config_manager.get_config().ui.show_disk_usage,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("", id="stats_body")
        yield Footer()

    def on_mount(self) -> None:
        self.panel.mount()
        self._show(self.panel.view())

    def on_unmount(self) -> None:
        self.panel.unmount()

    def _spawn(self, work: Any) -> Any:
        return self.run_worker(work, group="stats", exit_on_error=False)

    def _show(self, view: StatsPanelView) -> None:
        self.query_one("#stats_body", Static).update(render_stats_panel(view, self.theme_config))

    def action_close(self) -> None:
        self.dismiss()


class CrateApp(App[None]):
    TITLE = "cratedui"
    SUB_TITLE = "Container runtime TUI"

    CSS = """
    Screen {
      layout: vertical;
    }

    #tabs {
      height: 3;
      background: $surface;
    }

    #top {
      height: 1fr;
    }

    #list {
      width: 50%;
      height: 1fr;
      border: round $accent;
      padding: 0 1;
      overflow: auto;
    }

    #info {
      width: 50%;
      height: 1fr;
      border: round $accent;
      padding: 0 1;
      overflow: auto;
    }

    #stats_body {
      height: 1fr;
      padding: 1 2;
      overflow: auto;
    }

    #status {
      height: 1;
      padding: 0 1;
      background: $panel;
      color: $text;
    }

    #modal {
      width: 70;
      height: auto;
      border: round $accent;
      background: $surface;
      padding: 1 2;
      align: center middle;
    }

    .modal_title {
      text-style: bold;
      margin-bottom: 1;
    }

    .modal_body {
      margin-bottom: 1;
    }

    .modal_hint {
      color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("1", "show_tab('containers')", "Containers", show=False),
        Binding("2", "show_tab('images')", "Images", show=False),
        Binding("3", "show_tab('mounts')", "Mounts", show=False),
        Binding("4", "show_tab('dns')", "DNS", show=False),
        Binding("5", "show_tab('networks')", "Networks", show=False),
        Binding("6", "show_tab('registries')", "Registries", show=False),
        Binding("7", "show_tab('system_logs')", "System Logs", show=False),
        Binding("up", "up", "Up"),
        Binding("down", "down", "Down"),
    ]

    def __init__(self, config: Optional[ConfigManager] = None,
                 backend: Optional[DockerBackend] = None) -> None:
        super().__init__()
        self.config_manager = config or get_config_manager()
        app_config = self.config_manager.get_config()
        self.theme_config = app_config.ui.color_theme
        self.store = StateStore()
        self.store.set_show_only_running(bool(app_config.ui.show_only_running))
        self.backend = backend or DockerBackend(app_config.docker.base_url, app_config.docker.timeout)
        self.service = ContainerService(self.backend, self.store)

        self.is_filtering = False
        self._ready = False
        self._refresh_in_flight = False
        self._syncing_tabs = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Tabs(*[TabWidget(tab_label(t), id=t.value) for t in Tab], id="tabs")
        yield Horizontal(
            Static("", id="list"),
            Static("", id="info"),
            id="top",
        )
        yield Static("", id="status", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.store.subscribe(lambda _store: self.refresh_view())
        self.set_interval(self.config_manager.get_list_refresh_interval(), self._tick)
        self._ready = True
        self.call_later(self._tick)
        self.refresh_view()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _tick(self) -> None:
        if self._refresh_in_flight:
            return
        self._refresh_in_flight = True
        try:
            await self.service.refresh_lists()
        finally:
            self._refresh_in_flight = False

    # --- selection helpers ---

    def _visible_containers(self) -> list[ContainerInfo]:
        return self.store.visible_containers()

    def _container_cursor(self, containers: list[ContainerInfo]) -> int:
        selected = self.store.get_snapshot().selected_container
        for idx, c in enumerate(containers):
            if c.id == selected:
                return idx
        return 0

    def _selected_container(self) -> Optional[ContainerInfo]:
        containers = self._visible_containers()
        if not containers:
            return None
        return containers[self._container_cursor(containers)]

    def _network_cursor(self, networks: list[NetworkInfo]) -> int:
        selected = self.store.get_snapshot().selected_network
        for idx, n in enumerate(networks):
            if n.id == selected:
                return idx
        return 0

    def _selected_network_detail(self) -> Optional[Union[NetworkDetail, NetworkNotFound]]:
        # A selection that vanished on refresh shows as "not found"
        snapshot = self.store.get_snapshot()
        network_id = snapshot.selected_network
        if network_id is None:
            if not snapshot.networks:
                return None
            network_id = snapshot.networks[0].id
        return network_detail(network_id, snapshot.networks, snapshot.containers)

    # --- rendering ---

    def refresh_view(self) -> None:
        if not self._ready or self.screen is not self.screen_stack[0]:
            return
        snapshot = self.store.get_snapshot()
        self._sync_tabs(snapshot.selected_tab)
        list_widget = self.query_one("#list", Static)
        info_widget = self.query_one("#info", Static)

        if snapshot.selected_tab == Tab.CONTAINERS:
            containers = self._visible_containers()
            cursor = self._container_cursor(containers) if containers else None
            list_widget.update(render_container_list(container_list(snapshot, containers), self.theme_config, cursor))
            info_widget.update(render_container_info(self._selected_container(), self.theme_config))
        elif snapshot.selected_tab == Tab.NETWORKS:
            detail = self._selected_network_detail()
            list_widget.update(render_network_list(snapshot.networks, self.theme_config,
                                                   self._network_cursor(snapshot.networks) if snapshot.networks else None))
            if detail is None:
                info_widget.update("No network selected")
            else:
                info_widget.update(render_network_detail(detail, self.theme_config))
        else:
            list_widget.update(f"{snapshot.selected_tab.title}: not available in this view.")
            info_widget.update("")

        self.query_one("#status", Static).update(self._render_status())

    def _render_status(self) -> str:
        snapshot = self.store.get_snapshot()
        parts = []
        if self.is_filtering or snapshot.search_text:
            parts.append(f"FILTER: {snapshot.search_text}")
        if snapshot.show_only_running:
            parts.append("RUNNING ONLY")
        if snapshot.error_message:
            parts.append(f"ERROR: {snapshot.error_message}")
        elif snapshot.message:
            parts.append(snapshot.message)
        return "  ".join(parts)

    def _sync_tabs(self, tab: Tab) -> None:
        tabs = self.query_one("#tabs", Tabs)
        if tabs.active != tab.value:
            self._syncing_tabs = True
            try:
                tabs.active = tab.value
            finally:
                self._syncing_tabs = False

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if self._syncing_tabs or event.tab.id is None:
            return
        tab = Tab(event.tab.id)
        if tab != self.store.get_snapshot().selected_tab:
            self.store.set_tab(tab)

    # --- actions ---

    def action_show_tab(self, tab_id: str) -> None:
        self.store.set_tab(Tab(tab_id))

    def _move(self, delta: int) -> None:
        tab = self.store.get_snapshot().selected_tab
        if tab == Tab.CONTAINERS:
            containers = self._visible_containers()
            if containers:
                idx = max(0, min(self._container_cursor(containers) + delta, len(containers) - 1))
                self.store.select_container(containers[idx].id)
        elif tab == Tab.NETWORKS:
            networks = self.store.get_snapshot().networks
            if networks:
                idx = max(0, min(self._network_cursor(networks) + delta, len(networks) - 1))
                self.store.select_network(networks[idx].id)

    def action_up(self) -> None:
        self._move(-1)

    def action_down(self) -> None:
        self._move(1)

    def action_stats(self) -> None:
        self.push_screen(StatsScreen(self.service, self.store, self.config_manager),
                         callback=lambda _: self.refresh_view())

    def action_toggle_running(self) -> None:
        self.store.toggle_show_only_running()

    def action_start_filter(self) -> None:
        self.is_filtering = True
        self.refresh_view()

    def _run_flow(self, work: Any) -> None:
        self.run_worker(work, group="user-action", exclusive=True, exit_on_error=False)

    async def _container_action_flow(self, action: str) -> None:
        if self.store.get_snapshot().selected_tab != Tab.CONTAINERS:
            return
        container = self._selected_container()
        if container is None:
            return
        if action == "start":
            await self.service.start_container(container.id)
        elif action == "stop":
            await self.service.stop_container(container.id)
        elif action == "remove":
            if await self.push_screen_wait(ConfirmScreen(f"Remove container {container.id[:12]}?")):
                await self.service.remove_container(container.id)

    async def _actions_menu_flow(self) -> None:
        tab = self.store.get_snapshot().selected_tab
        if tab == Tab.CONTAINERS:
            container = self._selected_container()
            if container is None:
                return
            choice = await self.push_screen_wait(ActionMenuScreen("Actions", container_actions(container)))
            if choice:
                await self._container_action_flow(choice)
        elif tab == Tab.NETWORKS:
            detail = self._selected_network_detail()
            if not isinstance(detail, NetworkDetail) or detail.connected.is_empty:
                return
            options = []
            for idx, row in enumerate(detail.connected.rows):
                options.append((f"Go to {row.name.text[:12]}", f"name:{idx}"))
                if row.address.enabled:
                    options.append((f"Open http://{row.address.text}", f"address:{idx}"))
                if row.hostname.enabled:
                    options.append((f"Open http://{row.hostname.text}", f"hostname:{idx}"))
            choice = await self.push_screen_wait(ActionMenuScreen("Connected Containers", options))
            if not choice:
                return
            kind, _, idx = choice.partition(":")
            row = detail.connected.rows[int(idx)]
            if kind == "name":
                row.activate_name(self.store)
            elif kind == "address":
                row.activate_address()
            elif kind == "hostname":
                row.activate_hostname()

    async def on_key(self, event: events.Key) -> None:
        if len(self.screen_stack) > 1:
            return

        if self.is_filtering:
            search = self.store.get_snapshot().search_text
            if event.key in ("escape", "enter"):
                self.is_filtering = False
                if event.key == "escape":
                    search = ""
            elif event.key == "backspace":
                search = search[:-1]
            elif event.character and event.character.isprintable():
                search += event.character
            self.store.set_search_text(search)
            event.stop()
            return

        for key in (event.key, event.character):
            if not key:
                continue
            if self.config_manager.is_key_binding(key, "quit"):
                self.exit()
            elif self.config_manager.is_key_binding(key, "filter"):
                self.action_start_filter()
            elif self.config_manager.is_key_binding(key, "toggle_running"):
                self.action_toggle_running()
            elif self.config_manager.is_key_binding(key, "stats"):
                self.action_stats()
            elif self.config_manager.is_key_binding(key, "actions"):
                self._run_flow(self._actions_menu_flow())
            elif self.config_manager.is_key_binding(key, "start"):
                self._run_flow(self._container_action_flow("start"))
            elif self.config_manager.is_key_binding(key, "stop"):
                self._run_flow(self._container_action_flow("stop"))
            elif self.config_manager.is_key_binding(key, "remove"):
                self._run_flow(self._container_action_flow("remove"))
            else:
                continue
            event.stop()
            return

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool:
        # If a modal screen is active, app-level bindings must not steal keys.
        if len(self.screen_stack) > 1:
            return False
        # While filtering, disable all action bindings and let on_key manage text input.
        if self.is_filtering:
            return False
        return True


def run(config: Optional[ConfigManager] = None) -> None:
    app = CrateApp(config)
    app.run()
