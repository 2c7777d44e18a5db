import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS recall_items (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL,
    text_category TEXT,
    is_manually_overridden INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS flashcards (
    id TEXT PRIMARY KEY,
    front_content TEXT NOT NULL,
    back_content TEXT NOT NULL,
    created_at TEXT NOT NULL,
    text_category TEXT,
    is_manually_overridden INTEGER NOT NULL DEFAULT 0,
    total_reviews INTEGER NOT NULL DEFAULT 0,
    hard_count INTEGER NOT NULL DEFAULT 0,
    good_count INTEGER NOT NULL DEFAULT 0,
    easy_count INTEGER NOT NULL DEFAULT 0,
    last_review_date TEXT,
    interval_multiplier REAL NOT NULL DEFAULT 1.0
);
CREATE TABLE IF NOT EXISTS notifications (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    item_id TEXT NOT NULL,
    kind TEXT NOT NULL,
    title TEXT NOT NULL,
    body TEXT DEFAULT '',
    fire_at TEXT NOT NULL,
    delivered INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_notifications_fire_at ON notifications(fire_at);
CREATE INDEX IF NOT EXISTS idx_notifications_item_id ON notifications(item_id);
"""

# Columns added after the first release; legacy rows keep NULL categories
# and are decoded with a default by the repositories.
_MIGRATIONS = {
    "recall_items": {
        "text_category": "ALTER TABLE recall_items ADD COLUMN text_category TEXT",
        "is_manually_overridden": (
            "ALTER TABLE recall_items ADD COLUMN is_manually_overridden INTEGER NOT NULL DEFAULT 0"
        ),
    },
    "flashcards": {
        "interval_multiplier": (
            "ALTER TABLE flashcards ADD COLUMN interval_multiplier REAL NOT NULL DEFAULT 1.0"
        ),
    },
}


def migrate(conn: sqlite3.Connection) -> None:
    """Add columns missing from databases created by older versions."""
    for table, columns in _MIGRATIONS.items():
        existing = {row["name"] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()}
        for column, statement in columns.items():
            if column not in existing:
                logger.info("Migrating %s: adding column %s", table, column)
                conn.execute(statement)
    conn.commit()


def connect(db_path: Path) -> sqlite3.Connection:
    """Connect to the SQLite database and run migrations."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    migrate(conn)
    return conn
