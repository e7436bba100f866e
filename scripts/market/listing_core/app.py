"""Marketplace list-management console entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import os
import time
from datetime import datetime, timezone

from rich.console import Console, Group
from rich.live import Live
from rich.logging import RichHandler

from listing_core.client import ApiClient
from listing_core.errors import ItemNotFoundError, ListingError, ValidationError
from listing_core.layout import select_layout_mode
from listing_core.models import LoadState, MutationIntent
from listing_core.panels import empty_panel, kv_table, panel_from_table
from listing_core.panels.header import render as render_header
from listing_core.panels.header import render_stats
from listing_core.panels.table import render as render_table
from listing_core.profiles import PROFILE_FOR_ROLE, resolve_profile
from listing_core.resources import REGISTRY, descriptor_for
from listing_core.screens import ListScreen
from listing_core.session import SessionContext, env_user_file, load_session
from listing_core.view import parse_range

logger = logging.getLogger("listing_core")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def parse_assignment(text: str) -> tuple[str, object]:
    key, sep, raw = text.partition("=")
    if not sep or not key.strip():
        raise ValidationError(f"expected key=value, got: {text}", {"set": "expected key=value"})
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key.strip(), value


def _fields(assignments: list[str] | None) -> dict:
    return dict(parse_assignment(item) for item in assignments or [])


def _apply_criteria(screen: ListScreen, args: argparse.Namespace) -> None:
    if args.search:
        screen.set_search(args.search)
    for item in args.filter or []:
        name, sep, label = item.partition("=")
        if not sep:
            raise ValidationError(f"expected name=label, got: {item}", {"filter": "expected name=label"})
        screen.set_filter(name.strip(), label.strip())
    for item in args.range or []:
        flt = parse_range(item)
        screen.add_range(flt.field, flt.low, flt.high)
    screen.set_sort(args.sort)


def _profile_name(args: argparse.Namespace, session: SessionContext | None) -> str:
    if args.profile:
        return args.profile
    env_profile = os.environ.get("MARKET_TUI_PROFILE")
    if env_profile:
        return env_profile
    if session is not None:
        return PROFILE_FOR_ROLE.get(session.role, "admin")
    return "admin"


def _json_output(profile: dict, screen: ListScreen) -> str:
    payload = {
        "profile": profile["name"],
        "collected_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "screen": screen.to_screen_data().to_dict(),
    }
    return json.dumps(payload, indent=2, default=str)


def _render_screen(screen: ListScreen, profile: dict, console: Console):
    data = screen.to_screen_data()
    width = console.size.width
    user = (screen.session.name or screen.session.email) if screen.session else "anonymous"
    header = render_header(profile["name"], user, data, select_layout_mode(width))
    if screen.state is LoadState.ERRORED and not data.items:
        return Group(header, empty_panel(data.title, screen.error or "Failed to load"))
    return Group(header, render_stats(data), render_table(data, screen.descriptor, width))


def _render_screen_list(profile: dict):
    rows = []
    for key in profile["screens"]:
        descriptor = REGISTRY[key]
        actions = ", ".join(descriptor.writable) or "read-only"
        if descriptor.writable and descriptor.write_mode == "local":
            actions += "; local only"
        rows.append((key, f"{descriptor.title} [dim]{descriptor.path} ({actions})[/dim]"))
    return panel_from_table(f"Screens ({profile['name']})", "ok", kv_table(rows))


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--profile", help="Profile name: admin|vendor|buyer|company")
    common.add_argument("--config", help="Optional JSON config file for screen/profile overrides")
    common.add_argument("--base-url", help="Marketplace API base URL (default: $MARKET_API_URL)")
    common.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    common.add_argument("--user-file", help="JSON user object of the signed-in user (default: $MARKET_USER_FILE)")
    common.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")

    screen_args = argparse.ArgumentParser(add_help=False)
    screen_args.add_argument("--screen", "-s", required=True, choices=sorted(REGISTRY), help="Resource screen")
    screen_args.add_argument("--search", help="Case-insensitive free-text search")
    screen_args.add_argument("--filter", action="append", metavar="NAME=LABEL", help="Categorical filter, repeatable")
    screen_args.add_argument("--range", action="append", metavar="FIELD:LOW:HIGH", help="Numeric/date range, repeatable")
    screen_args.add_argument("--sort", help="Sort option label")
    screen_args.add_argument("--json", action="store_true", help="Emit JSON payload")

    parser = argparse.ArgumentParser(description="Marketplace list-management console")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("screens", parents=[common], help="List screens available to the profile")

    list_cmd = sub.add_parser("list", parents=[common, screen_args], help="Show the filtered collection")
    list_cmd.add_argument("-l", "--live", action="store_true", help="Keep refreshing the screen")
    list_cmd.add_argument("--refresh", type=int, help="Refresh interval seconds override")

    export_cmd = sub.add_parser("export", parents=[common, screen_args], help="Export visible rows as CSV")
    export_cmd.add_argument("--output", "-o", help="Target file or directory")

    add_cmd = sub.add_parser("add", parents=[common, screen_args], help="Create a record")
    add_cmd.add_argument("--set", action="append", metavar="KEY=VALUE", required=True)

    update_cmd = sub.add_parser("update", parents=[common, screen_args], help="Patch a record")
    update_cmd.add_argument("item_id")
    update_cmd.add_argument("--set", action="append", metavar="KEY=VALUE", required=True)

    delete_cmd = sub.add_parser("delete", parents=[common, screen_args], help="Delete a record")
    delete_cmd.add_argument("item_id")
    return parser


def _run_live(screen: ListScreen, profile: dict, console: Console, refresh_seconds: int) -> int:
    with Live(_render_screen(screen, profile, console), console=console, refresh_per_second=2, screen=True) as live:
        try:
            while True:
                time.sleep(refresh_seconds)
                screen.refresh()
                live.update(_render_screen(screen, profile, console))
        except KeyboardInterrupt:
            return EXIT_OK
        finally:
            screen.close()


def _mutation_intent(args: argparse.Namespace) -> MutationIntent:
    if args.command == "add":
        return MutationIntent("create", fields=_fields(args.set))
    if args.command == "update":
        return MutationIntent("update", item_id=args.item_id, fields=_fields(args.set))
    return MutationIntent("delete", item_id=args.item_id)


def run(args: argparse.Namespace, console: Console) -> int:
    session = load_session(args.user_file or env_user_file())
    profile = resolve_profile(_profile_name(args, session), args.config)

    if args.command == "screens":
        console.print(_render_screen_list(profile))
        return EXIT_OK

    if args.screen not in profile["screens"]:
        raise ValidationError(
            f"screen {args.screen} is not part of the {profile['name']} profile",
            {"screen": f"available: {', '.join(profile['screens'])}"},
        )

    client = ApiClient(
        base_url=args.base_url or profile.get("base_url"),
        timeout=args.timeout or profile.get("timeout"),
        headers=session.auth_headers() if session else None,
    )
    screen = ListScreen(descriptor_for(args.screen), client, session)
    _apply_criteria(screen, args)
    screen.mount()

    if args.command == "list":
        if args.json:
            print(_json_output(profile, screen))
        elif args.live:
            refresh_seconds = max(1, int(args.refresh or profile.get("refresh_seconds", 30)))
            return _run_live(screen, profile, console, refresh_seconds)
        else:
            console.print(_render_screen(screen, profile, console))
        return EXIT_FAILED if screen.state is LoadState.ERRORED else EXIT_OK

    if screen.state is LoadState.ERRORED:
        console.print(f"[red]{screen.error}[/red]")
        return EXIT_FAILED

    if args.command == "export":
        path = screen.export_csv(args.output)
        console.print(f"exported {len(screen.visible_rows())} rows to [bold]{path}[/bold]")
        return EXIT_OK

    result = screen.apply(_mutation_intent(args))
    if args.json:
        print(json.dumps({"success": True, "item": result}, indent=2, default=str))
    else:
        console.print(_render_screen(screen, profile, console))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    console = Console()

    try:
        return run(args, console)
    except ValidationError as exc:
        console.print(f"[red]{exc}[/red]")
        for name, message in exc.field_errors.items():
            console.print(f"  [bold]{name}[/bold]: {message}")
        return EXIT_USAGE
    except ItemNotFoundError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        return EXIT_FAILED
    except ListingError as exc:
        logger.debug("action failed", exc_info=True)
        console.print(f"[red]{exc}[/red]")
        return EXIT_FAILED
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
