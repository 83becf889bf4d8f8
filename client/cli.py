"""
songlist - command-line front end for the Song List API.

    songlist list --search queen --sort year --desc --year 1975 --view grid
    songlist upload songs.csv
    songlist import-sample
    songlist health --watch --interval 30
    songlist prefs --view grid --theme light
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from client.api_client import ApiError, BackendUnavailableError, SongsApiClient
from client.health_monitor import HealthMonitor
from client.preferences import THEMES, VIEW_MODES, JSONFilePreferenceStore, PreferencesManager
from client.song_operations import SongOperations
from client.views import SORT_FIELDS, SongTableState, render_grid, render_table, year_options
from config.logging_config import setup_logging
from config.settings import get_client_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNREACHABLE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="songlist", description="Song List client")
    parser.add_argument("--api-url", help="Backend base URL")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show songs")
    list_cmd.add_argument("--search", default="", help="Substring of song or band name")
    list_cmd.add_argument("--sort", choices=SORT_FIELDS, default="band_name")
    list_cmd.add_argument("--desc", action="store_true", help="Sort descending")
    list_cmd.add_argument("--year", type=int, action="append", default=[], help="Repeatable year filter")
    list_cmd.add_argument("--view", choices=VIEW_MODES, help="Override the saved view mode")
    list_cmd.add_argument("--years", action="store_true", help="Show year filter options")

    upload_cmd = sub.add_parser("upload", help="Upload a CSV file")
    upload_cmd.add_argument("file", help="Path to CSV file")

    sub.add_parser("import-sample", help="Import the bundled sample songs")
    health_cmd = sub.add_parser("health", help="Check backend connectivity")
    health_cmd.add_argument("--watch", action="store_true", help="Keep polling until interrupted")
    health_cmd.add_argument("--interval", type=float, help="Seconds between polls")

    prefs_cmd = sub.add_parser("prefs", help="Show or change UI preferences")
    prefs_cmd.add_argument("--theme", choices=THEMES)
    prefs_cmd.add_argument("--view", choices=VIEW_MODES)
    prefs_cmd.add_argument("--toggle-view", action="store_true")
    prefs_cmd.add_argument("--reset", action="store_true")

    return parser


def _list(args, operations: SongOperations, prefs: PreferencesManager) -> int:
    songs = operations.get_songs()

    if args.years:
        for year, count in year_options(songs):
            print(f"{year}  ({count})")
        return EXIT_OK

    state = SongTableState(search=args.search, selected_years=set(args.year))
    if args.sort != state.sort_field:
        state.toggle_sort(args.sort)
    if args.desc:
        state.toggle_sort(args.sort)

    visible = state.apply(songs)
    view_mode = args.view or prefs.preferences.view_mode
    print(render_grid(visible) if view_mode == "grid" else render_table(visible))
    print(f"\n{len(visible)} of {len(songs)} songs")
    return EXIT_OK


def _watch_health(client: SongsApiClient, interval: Optional[float]) -> int:
    monitor = HealthMonitor(client, interval or get_client_settings().health_interval)
    monitor.start()
    last = None
    try:
        while monitor.is_running:
            if monitor.last_checked and monitor.is_connected != last:
                last = monitor.is_connected
                print("Backend is reachable" if last else f"Cannot reach backend at {client.base_url}")
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        monitor.stop()
    return EXIT_OK if last else EXIT_UNREACHABLE


def _prefs(args, prefs: PreferencesManager) -> int:
    if args.reset:
        prefs.reset()
    changes = {k: v for k, v in (("theme", args.theme), ("view_mode", args.view)) if v}
    if changes:
        prefs.update(**changes)
    if args.toggle_view:
        prefs.toggle_view_mode()

    current = prefs.preferences
    print(f"theme={current.theme} view_mode={current.view_mode}")
    return EXIT_OK


def run(args, client: SongsApiClient, prefs: PreferencesManager) -> int:
    operations = SongOperations(client)

    try:
        if args.command == "list":
            return _list(args, operations, prefs)

        if args.command == "upload":
            print(f"[success] {operations.upload_csv(args.file).message}")
            return EXIT_OK

        if args.command == "import-sample":
            print(f"[success] {operations.import_sample().message}")
            return EXIT_OK

        if args.command == "health":
            if args.watch:
                return _watch_health(client, args.interval)
            if client.health_check():
                print("Backend is reachable")
                return EXIT_OK
            print(f"Cannot reach backend at {client.base_url}")
            return EXIT_UNREACHABLE

        if args.command == "prefs":
            return _prefs(args, prefs)

    except BackendUnavailableError as e:
        print(f"[offline] {e}", file=sys.stderr)
        return EXIT_UNREACHABLE
    except ApiError as e:
        print(f"[error] {e.message}", file=sys.stderr)
        return EXIT_ERROR
    except FileNotFoundError as e:
        print(f"[error] {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_client_settings()

    setup_logging("DEBUG" if args.verbose else "WARNING")

    prefs = PreferencesManager(JSONFilePreferenceStore(settings.preferences_path))
    with SongsApiClient(
        args.api_url or settings.api_url,
        timeout=args.timeout or settings.timeout,
    ) as client:
        return run(args, client, prefs)


if __name__ == "__main__":
    sys.exit(main())
