"""List screen table renderer."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from listing_core.layout import visible_columns
from listing_core.models import ScreenData
from listing_core.mutations import is_temporary
from listing_core.panels import badge, error_suffix, panel_from_table
from listing_core.resources.base import ResourceDescriptor, get_path

MAX_ROWS = 50


def render(data: ScreenData, descriptor: ResourceDescriptor, width: int = 200):
    status_field = descriptor.status_field
    columns = visible_columns(descriptor.columns, width, pinned=status_field)

    table = Table(box=None, expand=True)
    table.add_column("ID", no_wrap=True, style="dim")
    for column in columns:
        table.add_column(column.header, overflow="fold")

    if not data.items:
        message = "Loading..." if data.meta.get("state") == "loading" else "No matching records"
        table.add_row("-", Text(message, style="dim"), *["" for _ in columns[1:]])
    else:
        for item in data.items[:MAX_ROWS]:
            item_id = str(item.get("id", "-"))
            cells: list = [Text(f"{item_id}*", style="italic") if is_temporary(item_id) else item_id]
            for column in columns:
                if status_field and column.field == status_field:
                    cells.append(badge(get_path(item, status_field)))
                else:
                    cells.append(column.render(item))
            table.add_row(*cells)

    shown = data.meta.get("shown", len(data.items))
    total = data.meta.get("total", shown)
    title = f"{data.title} ({shown}/{total}){error_suffix(data)}"
    subtitle = None
    if shown > MAX_ROWS:
        subtitle = f"+{shown - MAX_ROWS} more, narrow the search or export"
    return panel_from_table(title, data.status, table, subtitle=subtitle)
