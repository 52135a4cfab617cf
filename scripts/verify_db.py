# Rev 1.0.0

"""Quick integrity check for the StockDesk demo SQLite database."""
import sqlite3
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stockdesk.utils.paths import DEMO_DB_PATH, MIGRATIONS_DIR, ensure_runtime_dirs


def verify(db_path: Path) -> list[str]:
    """Run ``PRAGMA quick_check`` and return migrations missing from the file."""
    conn = sqlite3.connect(db_path)
    try:
        result = conn.execute("PRAGMA quick_check").fetchone()[0]
        if result != "ok":
            raise sqlite3.DatabaseError(f"quick_check reported: {result}")
        applied = {row[0] for row in conn.execute("SELECT filename FROM schema_migrations")}
    finally:
        conn.close()
    return [script.name for script in sorted(MIGRATIONS_DIR.glob("*.sql")) if script.name not in applied]


if __name__ == "__main__":
    ensure_runtime_dirs()
    db_file = DEMO_DB_PATH
    if not db_file.exists():
        print(f"Database not found at {db_file}")
    else:
        missing = verify(db_file)
        if missing:
            print(f"Pending migrations: {', '.join(missing)}")
        print("Database quick check completed")
