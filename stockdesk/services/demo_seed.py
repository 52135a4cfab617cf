# Rev 1.0.0

"""Populate the demo database with reproducible inventory data."""
from __future__ import annotations

import json
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from stockdesk.models.filter_spec import AUDIT_ACTIONS, ENTRY_TYPES
from stockdesk.repositories.db import Database

logger = logging.getLogger(__name__)

SUBCATEGORIES = ("Fasteners", "Adhesives", "Packaging", "Electronics", "Fabric")
LOCATIONS = ("Main Warehouse", "Workshop", "Front Store")
USERS = (("master", "Store Owner", "master"), ("alex", "Alex Doe", "admin"), ("sam", "Sam Roe", "user"))
SUPPLIERS = ("Acme Supply", "Northwind Traders")
PRODUCT_WORDS = ("Bolt", "Glue", "Box", "Cable", "Panel", "Strap", "Sheet", "Clip", "Pack", "Frame")
UNITS = ("pcs", "kg", "m", "box")


def seed_demo(
    database: Database,
    *,
    seed: int = 7,
    products: int = 120,
    entries: int = 300,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Insert demo rows unless products already exist. Returns inserted counts."""
    conn = database.conn
    existing = conn.execute("SELECT COUNT(*) FROM products").fetchone()[0]
    if existing:
        logger.info("Demo data already present (%s products); skipping seed", existing)
        return {"products": 0, "entries": 0, "audit_logs": 0}

    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    stamp = now.isoformat()

    with database.lock, conn:
        conn.executemany(
            "INSERT INTO subcategories(id, name) VALUES (?, ?)",
            list(enumerate(SUBCATEGORIES, start=1)),
        )
        conn.executemany(
            "INSERT INTO locations(id, name) VALUES (?, ?)",
            list(enumerate(LOCATIONS, start=1)),
        )
        conn.executemany(
            "INSERT INTO users(id, username, name, role) VALUES (?, ?, ?, ?)",
            [(idx, *user) for idx, user in enumerate(USERS, start=1)],
        )
        conn.executemany(
            "INSERT INTO purchase_info(id, business_name) VALUES (?, ?)",
            list(enumerate(SUPPLIERS, start=1)),
        )

        # Raw goods first so formulas can reference them as components.
        raw_ids: List[int] = []
        formula_ids: List[int] = []
        for product_id in range(1, products + 1):
            category = ("raw", "semi", "finished")[product_id % 3]
            subcategory_id = rng.randint(1, len(SUBCATEGORIES))
            formula_id = None
            if category != "raw" and raw_ids and rng.random() < 0.5:
                formula_id = len(formula_ids) + 1
                conn.execute(
                    "INSERT INTO formulas(id, name) VALUES (?, ?)",
                    (formula_id, f"Formula {formula_id}"),
                )
                for component_id in rng.sample(raw_ids, k=min(2, len(raw_ids))):
                    conn.execute(
                        "INSERT INTO formula_components(formula_id, component_id, quantity) VALUES (?, ?, ?)",
                        (formula_id, component_id, rng.randint(1, 5)),
                    )
                formula_ids.append(formula_id)
            conn.execute(
                """
                INSERT INTO products(
                    id, name, unit, price, category, source_type, subcategory_id,
                    location_id, min_stock_threshold, product_formula_id, purchase_info_id,
                    created_at_utc, updated_at_utc
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    product_id,
                    f"{rng.choice(PRODUCT_WORDS)} {product_id:03d}",
                    rng.choice(UNITS),
                    round(rng.uniform(1, 250), 2),
                    category,
                    "manufacturing" if formula_id else "trading",
                    subcategory_id,
                    rng.randint(1, len(LOCATIONS)),
                    rng.choice((None, 5, 10, 20)),
                    formula_id,
                    None if formula_id else rng.randint(1, len(SUPPLIERS)),
                    stamp,
                    stamp,
                ),
            )
            if category == "raw":
                raw_ids.append(product_id)

        entry_types = sorted(ENTRY_TYPES)
        actions = sorted(AUDIT_ACTIONS)
        audit_count = 0
        for entry_id in range(1, entries + 1):
            when = now - timedelta(hours=rng.randint(0, 24 * 90))
            entry_type = rng.choice(entry_types)
            user_id = rng.randint(1, len(USERS))
            quantity = rng.randint(1, 40)
            reference = f"REF-{entry_id:05d}" if rng.random() < 0.3 else None
            conn.execute(
                """
                INSERT INTO inventory_entries(
                    id, product_id, quantity, entry_type, timestamp, user_id, location_id, notes, reference_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry_id,
                    rng.randint(1, products),
                    quantity,
                    entry_type,
                    when.isoformat(),
                    user_id,
                    rng.randint(1, len(LOCATIONS)),
                    f"{entry_type.replace('_', ' ')} batch" if rng.random() < 0.4 else None,
                    reference,
                ),
            )
            if rng.random() < 0.5:
                audit_count += 1
                action = rng.choice(actions)
                conn.execute(
                    """
                    INSERT INTO audit_logs(
                        entry_id, action, user_id, timestamp, reason, is_flag, old_data, new_data
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        entry_id,
                        action,
                        user_id,
                        (when + timedelta(minutes=rng.randint(1, 120))).isoformat(),
                        "Stock count correction" if action != "create" else None,
                        1 if rng.random() < 0.15 else 0,
                        json.dumps({"quantity": quantity}) if action != "create" else None,
                        json.dumps({"quantity": quantity + 1}) if action != "delete" else None,
                    ),
                )

    counts = {"products": products, "entries": entries, "audit_logs": audit_count}
    logger.info("Seeded demo data: %s", counts)
    return counts
