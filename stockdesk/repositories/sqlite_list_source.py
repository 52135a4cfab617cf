# Rev 1.0.0

"""SQLite-backed list and reference sources for offline and demo use.

Serves the same page semantics as the remote ``/products/search``,
``/inventory`` and ``/audit-logs`` endpoints so the list view-models can run
without a backend.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from stockdesk.api.errors import ListFetchError
from stockdesk.models.filter_spec import FilterSpec
from stockdesk.models.list_records import AuditLogRecord, InventoryEntryRecord, ProductRecord
from stockdesk.models.page_result import PageResult
from stockdesk.models.request_descriptor import RequestDescriptor
from stockdesk.utils.timestamp import day_end_iso, day_start_iso, days_ago_iso

from .db import Database

logger = logging.getLogger(__name__)

Clock = Callable[[], Optional[datetime]]

_PRODUCTS_FROM = """
    FROM products AS p
    LEFT JOIN subcategories AS s ON s.id = p.subcategory_id
    LEFT JOIN locations AS l ON l.id = p.location_id
    LEFT JOIN formulas AS f ON f.id = p.product_formula_id
"""

_ENTRIES_FROM = """
    FROM inventory_entries AS e
    JOIN products AS p ON p.id = e.product_id
    LEFT JOIN locations AS l ON l.id = e.location_id
    LEFT JOIN users AS u ON u.id = e.user_id
"""

_AUDIT_FROM = """
    FROM audit_logs AS a
    LEFT JOIN inventory_entries AS e ON e.id = a.entry_id
    LEFT JOIN products AS p ON p.id = e.product_id
    LEFT JOIN locations AS l ON l.id = e.location_id
    LEFT JOIN users AS u ON u.id = a.user_id
"""


class SQLiteListSource:
    """``ListSource`` answering one screen's page requests from SQLite."""

    SCREENS = ("products", "inventory", "audit")

    def __init__(self, database: Database, screen: str, *, clock: Clock | None = None) -> None:
        if not isinstance(database, Database):
            raise RuntimeError("SQLiteListSource expects a Database instance.")
        if screen not in self.SCREENS:
            raise ValueError(f"Unknown screen {screen!r}; expected one of {', '.join(self.SCREENS)}")
        self._db = database
        self._conn = database.conn
        self._screen = screen
        self._clock = clock or (lambda: None)
        self._lock = database.lock

    @property
    def screen(self) -> str:
        return self._screen

    def fetch_page(self, descriptor: RequestDescriptor) -> PageResult:
        builder = {
            "products": self._products_query,
            "inventory": self._inventory_query,
            "audit": self._audit_query,
        }[self._screen]
        select, from_clause, where, params, order, parse = builder(descriptor.filters, descriptor.search)

        clause = "WHERE " + " AND ".join(where) if where else ""
        count_sql = f"SELECT COUNT(*) {from_clause} {clause}"
        page_sql = f"SELECT {select} {from_clause} {clause} ORDER BY {order} LIMIT ? OFFSET ?"

        try:
            with self._lock:
                total = int(self._conn.execute(count_sql, params).fetchone()[0])
                rows = self._conn.execute(
                    page_sql, [*params, descriptor.limit, descriptor.offset]
                ).fetchall()
        except sqlite3.Error as exc:
            raise ListFetchError(f"Local {self._screen} query failed: {exc}") from exc

        items = [parse(dict(row)) for row in rows]
        logger.debug(
            "%s page %s: %s of %s rows", self._screen, descriptor.page, len(items), total
        )
        return PageResult.build(items, total=total, page=descriptor.page, limit=descriptor.limit)

    # ---- per-screen queries -------------------------------------------
    def _products_query(self, filters: FilterSpec, search: str):
        where: List[str] = []
        params: List[Any] = []

        for column, name in (
            ("p.category", "category"),
            ("p.subcategory_id", "subcategory_id"),
            ("p.location_id", "location_id"),
            ("p.source_type", "source_type"),
            ("p.product_formula_id", "formula_id"),
            ("p.purchase_info_id", "purchase_info_id"),
        ):
            self._add_equals(where, params, filters, name, column)

        if filters.is_active("component_id"):
            where.append(
                "p.product_formula_id IN (SELECT formula_id FROM formula_components WHERE component_id = ?)"
            )
            params.append(filters.component_id)
        if filters.is_parent is not None:
            where.append(
                "p.product_formula_id IS NOT NULL" if filters.is_parent else "p.product_formula_id IS NULL"
            )
        if filters.is_component is not None:
            negate = "" if filters.is_component else "NOT "
            where.append(f"p.id {negate}IN (SELECT component_id FROM formula_components)")

        if search:
            like = f"%{search.lower()}%"
            where.append("(lower(p.name) LIKE ? OR lower(p.category) LIKE ?)")
            params.extend([like, like])

        select = """
            p.id, p.name, p.unit, p.price, p.category, p.source_type,
            p.subcategory_id, p.location_id, p.min_stock_threshold, p.product_formula_id,
            s.name AS subcategory_name, l.name AS location_name, f.name AS product_formula_name
        """
        return select, _PRODUCTS_FROM, where, params, "p.name COLLATE NOCASE ASC, p.id ASC", ProductRecord.from_row

    def _inventory_query(self, filters: FilterSpec, search: str):
        where: List[str] = []
        params: List[Any] = []

        for column, name in (
            ("e.entry_type", "entry_type"),
            ("e.user_id", "user_id"),
            ("e.location_id", "location_id"),
            ("e.product_id", "product_id"),
            ("p.category", "category"),
            ("p.subcategory_id", "subcategory_id"),
            ("e.reference_id", "reference_id"),
        ):
            self._add_equals(where, params, filters, name, column)
        self._add_time_window(where, params, filters, "e.timestamp")

        if search:
            like = f"%{search.lower()}%"
            where.append(
                """
                (
                    lower(p.name) LIKE ?
                    OR lower(COALESCE(e.notes, '')) LIKE ?
                    OR lower(COALESCE(e.reference_id, '')) LIKE ?
                )
                """
            )
            params.extend([like, like, like])

        select = """
            e.id, e.product_id, e.quantity, e.entry_type, e.timestamp, e.user_id,
            e.location_id, e.notes, e.reference_id,
            p.name AS product_name, l.name AS location_name, u.username AS username
        """
        return select, _ENTRIES_FROM, where, params, "e.timestamp DESC, e.id DESC", InventoryEntryRecord.from_row

    def _audit_query(self, filters: FilterSpec, search: str):
        where: List[str] = []
        params: List[Any] = []

        for column, name in (
            ("a.user_id", "user_id"),
            ("e.location_id", "location_id"),
            ("a.action", "action"),
            ("e.reference_id", "reference_id"),
            ("p.category", "category"),
            ("p.subcategory_id", "subcategory_id"),
            ("e.product_id", "product_id"),
        ):
            self._add_equals(where, params, filters, name, column)
        if filters.is_flag is not None:
            where.append("a.is_flag = ?")
            params.append(1 if filters.is_flag else 0)
        self._add_time_window(where, params, filters, "a.timestamp")

        if search:
            like = f"%{search.lower()}%"
            where.append(
                """
                (
                    lower(COALESCE(a.reason, '')) LIKE ?
                    OR lower(COALESCE(u.username, '')) LIKE ?
                    OR lower(COALESCE(p.name, '')) LIKE ?
                )
                """
            )
            params.extend([like, like, like])

        select = """
            a.id, a.entry_id, a.action, a.user_id, a.timestamp, a.reason, a.is_flag,
            a.old_data, a.new_data,
            u.username AS username, p.name AS product_name, l.name AS location_name,
            e.reference_id AS entry_reference_id
        """
        return select, _AUDIT_FROM, where, params, "a.timestamp DESC, a.id DESC", self._parse_audit

    # ---- helpers ------------------------------------------------------
    @staticmethod
    def _add_equals(where: List[str], params: List[Any], filters: FilterSpec, name: str, column: str) -> None:
        if filters.is_active(name):
            where.append(f"{column} = ?")
            params.append(getattr(filters, name))

    def _add_time_window(self, where: List[str], params: List[Any], filters: FilterSpec, column: str) -> None:
        if filters.is_active("days"):
            where.append(f"{column} >= ?")
            params.append(days_ago_iso(filters.days, now=self._clock()))
        if filters.is_active("date_from"):
            where.append(f"{column} >= ?")
            params.append(day_start_iso(filters.date_from))
        if filters.is_active("date_to"):
            where.append(f"{column} <= ?")
            params.append(day_end_iso(filters.date_to))

    @staticmethod
    def _parse_audit(row: Dict[str, Any]) -> AuditLogRecord:
        for key in ("old_data", "new_data"):
            raw = row.get(key)
            row[key] = json.loads(raw) if raw else None
        return AuditLogRecord.from_row(row)


class SQLiteOptionsSource:
    """Reference lists for the filter pickers, shaped like the API's ``data`` arrays."""

    _QUERIES: Dict[str, str] = {
        "subcategories": "SELECT id, name, description FROM subcategories ORDER BY name COLLATE NOCASE",
        "locations": "SELECT id, name, address FROM locations ORDER BY name COLLATE NOCASE",
        "users": "SELECT id, username, name, role FROM users ORDER BY username COLLATE NOCASE",
        "purchase-info": "SELECT id, business_name FROM purchase_info ORDER BY business_name COLLATE NOCASE",
        "products": (
            "SELECT id, name, category, subcategory_id, product_formula_id "
            "FROM products ORDER BY name COLLATE NOCASE, id"
        ),
        "formulas": "SELECT id, name, description FROM formulas ORDER BY name COLLATE NOCASE",
    }

    def __init__(self, database: Database) -> None:
        self._conn = database.conn
        self._lock = database.lock

    def list_reference(self, resource: str) -> List[Dict[str, Any]]:
        sql = self._QUERIES.get(resource)
        if sql is None:
            raise ValueError(f"Unknown reference resource: {resource!r}")
        with self._lock:
            rows = [dict(row) for row in self._conn.execute(sql).fetchall()]
            if resource == "formulas":
                components = self._components_by_formula()
                for row in rows:
                    row["components"] = components.get(row["id"], [])
        return rows

    def _components_by_formula(self) -> Dict[int, List[Dict[str, Any]]]:
        grouped: Dict[int, List[Dict[str, Any]]] = {}
        for formula_id, component_id, quantity in self._conn.execute(
            "SELECT formula_id, component_id, quantity FROM formula_components ORDER BY formula_id, component_id"
        ).fetchall():
            grouped.setdefault(formula_id, []).append({"component_id": component_id, "quantity": quantity})
        return grouped
