# Rev 1.0.0

"""Command-line entry point that drives a list screen without a window.

Loads one screen through its view-model, either against the configured API
or against a seeded local demo database, and logs what came back.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from PySide6.QtCore import QCoreApplication

from stockdesk.api.client import ApiClient
from stockdesk.config import load_settings
from stockdesk.logging_setup import setup_logging
from stockdesk.models.filter_spec import FilterValidationError
from stockdesk.repositories.db import Database
from stockdesk.repositories.sqlite_list_source import SQLiteListSource
from stockdesk.services.demo_seed import seed_demo
from stockdesk.utils.paths import DEMO_DB_PATH, ensure_runtime_dirs
from stockdesk.viewmodels.page_fetch import InlineDispatcher
from stockdesk.viewmodels.screens import SCREENS, build_screen, remote_source


def _parse_filters(pairs: Sequence[str]) -> Dict[str, str]:
    filters: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Filter {pair!r} is not in key=value form")
        filters[key.strip()] = value
    return filters


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stockdesk", description="Load an inventory list screen.")
    parser.add_argument("--screen", choices=sorted(SCREENS), default="products")
    parser.add_argument("--search", default="", help="Free-text search")
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Filter field to apply (repeatable)",
    )
    parser.add_argument("--pages", type=int, default=1, help="Number of pages to load")
    parser.add_argument("--demo", action="store_true", help="Use a seeded local SQLite database")
    parser.add_argument("--db", type=Path, default=None, help="Demo database path")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Load the requested screen and log a summary. Returns a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.pages < 1:
        parser.error("--pages must be at least 1")
    try:
        filters = _parse_filters(args.filter)
    except ValueError as exc:
        parser.error(str(exc))

    ensure_runtime_dirs()
    logger = setup_logging()
    settings = load_settings()
    config = SCREENS[args.screen]
    logger.info("StockDesk loading %s screen", config.name)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    QCoreApplication.setOrganizationName("stockdesk")
    QCoreApplication.setApplicationName("StockDesk")

    database: Optional[Database] = None
    client: Optional[ApiClient] = None
    if args.demo:
        database = Database(args.db or DEMO_DB_PATH)
        database.run_migrations()
        seed_demo(database)
        source = SQLiteListSource(database, config.name)
    else:
        client = ApiClient.from_settings(settings)
        source = remote_source(config, client)

    screen = build_screen(config, source, settings=settings, dispatcher=InlineDispatcher(), parent=app)
    try:
        if filters:
            screen.apply_filters(filters)
        if args.search.strip():
            screen.set_search_text(args.search)
            screen.search_debouncer().flush()
        if screen.fetch_state().last_descriptor is None:
            # Neither the filters nor the search changed anything, so load the defaults.
            screen.start()
        while screen.page < args.pages and screen.load_more():
            pass
    except FilterValidationError as exc:
        logger.error("Invalid filter: %s", exc)
        return 2
    finally:
        screen.teardown()
        if database is not None:
            database.close()
        if client is not None:
            client.close()

    if screen.error:
        logger.error("Loading %s failed: %s", config.name, screen.error)
        return 1

    logger.info(
        "%s: %s of %s rows loaded (page %s/%s, %s active filter(s))",
        config.name,
        len(screen.items),
        screen.total,
        screen.page,
        screen.pages,
        screen.active_filter_count,
    )
    for item in screen.items[:10]:
        logger.info("  %s", item)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
