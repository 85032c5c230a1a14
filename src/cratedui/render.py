"""
Rich renderables for the view-models in views.py.

Each function takes a view-model plus the colour theme and returns something a
Textual `Static` can display. Symbolic tints become Rich styles via
ColorTheme.style_for(); symbolic icon names become single glyphs.
"""

from typing import Optional, Sequence, Union

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import ColorTheme
from .model import ContainerInfo, NetworkInfo, Tab
from .views import (
    MUTED, ContainerListItem, ContainerTable, NetworkDetail, NetworkNotFound, StatsPanelView,
)

ICON_GLYPHS = {
    "cube": "■",
    "cube.transparent": "□",
    "externaldrive": "⛁",
    "network": "◎",
    "wifi": "≋",
    "server.rack": "▤",
    "doc.text.below.ecg": "≣",
}

SELECTED_STYLE = "reverse"


def glyph(icon: str) -> str:
    return ICON_GLYPHS.get(icon, "•")


def tab_label(tab: Tab) -> str:
    return f"{glyph(tab.icon)} {tab.title}"


def _text(value: str, tint: str, theme: ColorTheme) -> Text:
    return Text(value, style=theme.style_for(tint))


def render_container_table(table: ContainerTable, theme: ColorTheme,
                           cursor: Optional[int] = None) -> RenderableType:
    if table.is_empty:
        return Text.assemble(
            (f"{glyph('cube.transparent')} ", theme.style_for(MUTED)),
            (table.empty_message, theme.style_for(MUTED)),
        )

    grid = Table(expand=True, box=None, pad_edge=False, header_style="bold")
    for header in table.headers:
        grid.add_column(header, ratio=1, no_wrap=True)
    for idx, row in enumerate(table.rows):
        name = Text.assemble(
            (f"{glyph('cube')} ", theme.style_for(row.icon_tint)),
            (row.name.text, theme.style_for(row.name.tint)),
        )
        grid.add_row(
            name,
            _text(row.address.text, row.address.tint, theme),
            _text(row.hostname.text, row.hostname.tint, theme),
            style=SELECTED_STYLE if idx == cursor else None,
        )
    return grid


def render_container_list(items: Sequence[ContainerListItem], theme: ColorTheme,
                          cursor: Optional[int] = None, empty_message: str = "No containers") -> RenderableType:
    if not items:
        return _text(empty_message, MUTED, theme)

    grid = Table(expand=True, box=None, pad_edge=False, show_header=False)
    grid.add_column(width=2)
    grid.add_column(ratio=3, no_wrap=True)
    grid.add_column(ratio=2, no_wrap=True)
    grid.add_column(ratio=1, no_wrap=True)
    for idx, item in enumerate(items):
        grid.add_row(
            _text(glyph("cube"), item.icon_tint, theme),
            Text(item.primary, style="bold" if item.selected else ""),
            _text(item.secondary_left, MUTED, theme),
            _text(item.secondary_right, MUTED, theme),
            style=SELECTED_STYLE if idx == cursor else None,
        )
    return grid


def render_container_info(container: Optional[ContainerInfo], theme: ColorTheme) -> RenderableType:
    if container is None:
        return _text("No selection", MUTED, theme)
    lines = [
        f"ID: {container.id}",
        f"Name: {container.name}",
        f"Status: {container.status}",
        f"Image: {container.image}",
        "",
        "Networks:",
    ]
    if not container.networks:
        lines.append("  (none)")
    for attachment in container.networks:
        lines.append(f"  {attachment.network[:12]}  {attachment.address or '-'}  {attachment.hostname or '-'}")
    return Text("\n".join(lines))


def render_network_list(networks: Sequence[NetworkInfo], theme: ColorTheme,
                        cursor: Optional[int] = None) -> RenderableType:
    if not networks:
        return _text("No networks", MUTED, theme)
    grid = Table(expand=True, box=None, pad_edge=False, show_header=False)
    grid.add_column(width=2)
    grid.add_column(ratio=2, no_wrap=True)
    grid.add_column(ratio=1, no_wrap=True)
    grid.add_column(ratio=2, no_wrap=True)
    for idx, network in enumerate(networks):
        grid.add_row(
            _text(glyph("wifi"), "accent", theme),
            Text(network.name or network.id),
            _text(network.driver, MUTED, theme),
            _text(network.address or "", MUTED, theme),
            style=SELECTED_STYLE if idx == cursor else None,
        )
    return grid


def _detail_rows(rows, theme: ColorTheme) -> Table:
    grid = Table(box=None, show_header=False, pad_edge=False)
    grid.add_column(width=16, style=theme.style_for(MUTED))
    grid.add_column()
    for row in rows:
        grid.add_row(row.label, Text(row.value, style="bold" if row.monospace else ""))
    return grid


def render_network_detail(detail: Union[NetworkDetail, NetworkNotFound], theme: ColorTheme,
                          cursor: Optional[int] = None) -> RenderableType:
    if isinstance(detail, NetworkNotFound):
        return Text(detail.message, style=theme.style_for(MUTED), justify="center")

    parts: list = [
        Text(f"{glyph('wifi')} {detail.title}", style="bold"),
        _detail_rows(detail.rows, theme),
        Text(""),
    ]
    if detail.labels:
        parts += [Text("Labels", style="bold"), _detail_rows(detail.labels, theme), Text("")]
    parts += [
        Text("Connected Containers", style="bold"),
        render_container_table(detail.connected, theme, cursor),
    ]
    return Group(*parts)


def render_stats_panel(view: StatsPanelView, theme: ColorTheme) -> RenderableType:
    parts: list = [Text("Stats", style="bold")]

    if view.error is not None:
        body = [Text(view.error.message, style=theme.style_for(MUTED))]
        if view.error.hints:
            body.append(Text("Possible solutions:", style="bold"))
            body.extend(Text(f"• {hint}", style=theme.style_for(MUTED)) for hint in view.error.hints)
        parts.append(Panel(
            Group(*body),
            title=Text(f"⚠ {view.error.title}", style=theme.style_for("warning")),
            title_align="left",
        ))

    if view.disk_usage:
        parts.append(Text("System Disk Usage", style="bold"))
        cards = Table.grid(expand=True, padding=(0, 2))
        for _ in view.disk_usage:
            cards.add_column(ratio=1)
        cards.add_row(*[
            Group(
                _text(card.label, MUTED, theme),
                _text(card.value, card.tint, theme),
                _text(card.detail, MUTED, theme),
            )
            for card in view.disk_usage
        ])
        parts.append(cards)

    parts.append(Text("Container Utilisation", style="bold"))
    if view.rows:
        grid = Table(expand=True, box=None, pad_edge=False, header_style="bold")
        for header in view.headers:
            grid.add_column(header, no_wrap=True)
        for row in view.rows:
            grid.add_row(row.container_id[:12], row.cpu, row.memory, row.network_io, row.block_io, row.pids)
        parts.append(grid)
    else:
        parts.append(_text(view.empty_message, MUTED, theme))

    return Group(*parts)
