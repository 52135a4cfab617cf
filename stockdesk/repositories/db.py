# Rev 1.0.0

"""SQLite helper utilities for the StockDesk demo data source."""
from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from stockdesk.utils.paths import DEMO_DB_PATH, MIGRATIONS_DIR

logger = logging.getLogger(__name__)


def _configure_connection(conn: sqlite3.Connection) -> None:
    """Apply consistent PRAGMA settings to any SQLite connection."""
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.execute("PRAGMA busy_timeout = 5000;")


class Database:
    """Thin SQLite wrapper that handles migrations and connection lifecycle."""

    def __init__(self, path: Path | str = DEMO_DB_PATH) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Fetches may run on a worker thread; callers serialise through ``lock``.
        self.conn = sqlite3.connect(self.path, check_same_thread=False)
        _configure_connection(self.conn)
        self.lock = threading.RLock()

    def close(self) -> None:
        try:
            self.conn.close()
        except sqlite3.Error:
            logger.warning("Closing %s failed", self.path, exc_info=True)

    def cursor(self) -> sqlite3.Cursor:
        return self.conn.cursor()

    # -- migrations -----------------------------------------------------
    def run_migrations(self, migrations_dir: Path | str = MIGRATIONS_DIR) -> List[str]:
        """Apply any outstanding .sql migrations. Returns filenames that ran."""
        migrations_dir = Path(migrations_dir)
        self._ensure_schema_table()

        applied = self._applied_migrations()
        applied_now: List[str] = []

        for script in sorted(migrations_dir.glob("*.sql")):
            if script.name in applied:
                continue
            sql = script.read_text(encoding="utf-8")
            with self.conn:
                self.conn.executescript(sql)
                self.conn.execute(
                    "INSERT INTO schema_migrations(filename, applied_at_utc) VALUES (?, ?)",
                    (script.name, datetime.now(timezone.utc).isoformat()),
                )
            applied_now.append(script.name)

        if applied_now:
            logger.info("Applied migrations: %s", ", ".join(applied_now))
        return applied_now

    def _ensure_schema_table(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                filename TEXT PRIMARY KEY,
                applied_at_utc TEXT NOT NULL
            )
            """
        )

    def _applied_migrations(self) -> set[str]:
        rows = self.conn.execute("SELECT filename FROM schema_migrations").fetchall()
        return {row[0] for row in rows}

    # -- context manager ------------------------------------------------
    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
