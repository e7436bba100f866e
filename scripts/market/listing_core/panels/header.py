"""Header and stat card renderers."""

from __future__ import annotations

from rich.columns import Columns
from rich.panel import Panel
from rich.text import Text

from listing_core.formatting import format_money
from listing_core.models import ScreenData

MONEY_STATS = {"revenue", "total_spent", "pending_payout", "avg_order_value"}


def _stat_label(key: str) -> str:
    return key.replace("_", " ").title()


def _stat_value(key: str, value: object) -> str:
    if key in MONEY_STATS:
        return format_money(value)
    if isinstance(value, dict):
        return " ".join(f"{k}:{v}" for k, v in value.items())
    return str(value)


def render(profile_name: str, user: str, data: ScreenData, layout_mode: str) -> Panel:
    text = (
        f"Profile: [bold]{profile_name}[/bold]   "
        f"User: [bold]{user}[/bold]   "
        f"Screen: [bold]{data.title}[/bold]   "
        f"State: [bold]{data.meta.get('state', 'idle')}[/bold]   "
        f"Layout: [bold]{layout_mode}[/bold]"
    )
    return Panel(text, title="[bold]Marketplace Console[/bold]", border_style="cyan")


def render_stats(data: ScreenData) -> Columns:
    stats = data.meta.get("stats") or {}
    cards = [
        Panel(
            Text(_stat_value(key, value), style="bold", justify="center"),
            title=_stat_label(key),
            border_style="dim",
            padding=(0, 1),
        )
        for key, value in stats.items()
    ]
    return Columns(cards, equal=True, expand=True)
