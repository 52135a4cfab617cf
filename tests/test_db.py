# Rev 1.0.0

"""Database smoke tests covering migrations and constraints."""
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from stockdesk.repositories.db import Database
from stockdesk.utils.paths import MIGRATIONS_DIR


def _db(tmp_path: Path) -> Database:
    return Database(tmp_path / "demo.db")


def test_run_migrations_creates_list_tables(tmp_path: Path) -> None:
    db = _db(tmp_path)
    try:
        applied = db.run_migrations(MIGRATIONS_DIR)
        assert "0001_init.sql" in applied

        tables = {
            row["name"]
            for row in db.conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert {"products", "inventory_entries", "audit_logs", "formula_components"}.issubset(tables)

        # Second run should be idempotent
        assert db.run_migrations(MIGRATIONS_DIR) == []
    finally:
        db.close()


def test_category_constraint_rejects_unknown_values(tmp_path: Path) -> None:
    with _db(tmp_path) as db:
        db.run_migrations(MIGRATIONS_DIR)
        with pytest.raises(sqlite3.IntegrityError):
            db.conn.execute(
                """
                INSERT INTO products(name, category, created_at_utc, updated_at_utc)
                VALUES ('Widget', 'gadgets', '2024-01-01', '2024-01-01')
                """
            )
