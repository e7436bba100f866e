"""Panel rendering helpers."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from listing_core.formatting import status_label, status_tone
from listing_core.models import ScreenData

STATUS_BORDER = {
    "ok": "cyan",
    "warn": "yellow",
    "error": "red",
}


def border_for(status: str) -> str:
    return STATUS_BORDER.get(status, "cyan")


def badge(value: object) -> Text:
    label = status_label(value)
    return Text(label, style=f"bold {status_tone(value)}")


def empty_panel(title: str, message: str = "No data") -> Panel:
    return Panel(Text(message, style="dim"), title=f"[bold]{title}[/bold]", border_style="cyan")


def kv_table(rows: list[tuple[str, str]]) -> Table:
    table = Table(box=None, show_header=False, expand=True, pad_edge=False)
    table.add_column("key", style="bold")
    table.add_column("value", style="default")
    for key, value in rows:
        table.add_row(key, value)
    return table


def panel_from_table(title: str, status: str, table: Table, subtitle: str | None = None) -> Panel:
    return Panel(table, title=f"[bold]{title}[/bold]", subtitle=subtitle, border_style=border_for(status))


def error_suffix(data: ScreenData) -> str:
    if not data.errors:
        return ""
    return f" ({'; '.join(data.errors[:1])})"
