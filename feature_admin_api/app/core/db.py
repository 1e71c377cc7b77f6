"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db`` which applies migrations and seeds the example features on
application start.  Each caller opens its own short‑lived connection;
nothing here shares a connection or transaction between requests.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

from .config import get_settings

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: features table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS features (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            description TEXT NOT NULL,
            status TEXT NOT NULL,
            category TEXT NOT NULL,
            icon TEXT NOT NULL,
            last_updated TEXT NOT NULL,
            usage_count INTEGER NOT NULL DEFAULT 0,
            success_rate INTEGER NOT NULL DEFAULT 0,
            error_count INTEGER NOT NULL DEFAULT 0,
            last_used TEXT
        );
        """,
    ),
    # Migration 2: category lookups back the related-features view
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_features_category ON features(category);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    A ``sqlite:///`` prefix is accepted and stripped.  Absolute paths
    are used as is; relative paths are resolved against the project
    root.
    """
    db_url = get_settings().database_url
    if db_url.startswith("sqlite:///"):
        db_url = db_url[len("sqlite:///"):]
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent  # project root
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  No type detection is enabled; timestamps come back as the
    ISO‑8601 text they were stored as and are parsed by the repository.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def _seed_rows(now: datetime) -> list[tuple]:
    """Example features inserted into an empty table."""
    return [
        (
            "AdBlock",
            "# Ad Block Feature\n\n**Blocks unwanted advertisements** and tracking scripts from loading on your system.\n\n"
            "## Features\n- *Real-time filtering*\n- `Custom filter lists`\n- **Performance optimized**\n\n"
            "> Provides enhanced privacy and faster browsing experience.",
            "Active",
            "Security",
            "mdi mdi-shield-check mdi-24px text-blue-500",
            now - timedelta(days=10),
            15420,
            98,
            12,
            now - timedelta(hours=2),
        ),
        (
            "DevTools",
            "# Developer Tools\n\nEssential **debugging utilities** and development aids.\n\n"
            "## Available Tools\n1. *Code Inspector*\n2. `Console Logger`\n3. **Performance Monitor**\n4. Network Analyzer\n\n"
            "Supports multiple programming languages and frameworks.",
            "Active",
            "Development",
            "mdi mdi-tools mdi-24px text-green-500",
            now - timedelta(days=13),
            8920,
            95,
            45,
            now - timedelta(hours=1),
        ),
        (
            "Database",
            "# Database Management\n\n**Comprehensive database administration** and monitoring tools.\n\n"
            "## Capabilities\n- *Query Builder*\n- `Schema Management`\n- **Performance Tuning**\n- Backup & Recovery\n\n"
            "> Supports SQLite, MySQL, PostgreSQL, and MongoDB.",
            "Active",
            "Data",
            "mdi mdi-database mdi-24px text-purple-500",
            now - timedelta(days=15),
            5670,
            99,
            3,
            now - timedelta(minutes=30),
        ),
        (
            "UserManagement",
            "# User Management System\n\n**Complete user account management** with role-based access control.\n\n"
            "## Features\n- *User Registration*\n- `Role Assignment`\n- **Permission Management**\n- Audit Logging\n\n"
            "Supports LDAP integration and SSO authentication.",
            "Active",
            "Administration",
            "mdi mdi-account-group mdi-24px text-orange-500",
            now - timedelta(days=17),
            12340,
            97,
            23,
            now - timedelta(minutes=15),
        ),
        (
            "Analytics",
            "# Analytics Dashboard\n\n**Advanced system analytics** and reporting capabilities.\n\n"
            "## Metrics Tracked\n- *User Activity*\n- `System Performance`\n- **Error Rates**\n- Resource Usage\n\n"
            "> Real-time data visualization with customizable reports.",
            "Pending",
            "Reporting",
            "mdi mdi-chart-line mdi-24px text-red-500",
            now - timedelta(days=20),
            0,
            0,
            0,
            None,
        ),
        (
            "Backup",
            "# Backup & Restore\n\n**Automated backup system** with data recovery capabilities.\n\n"
            "## Backup Types\n1. *Full System Backup*\n2. `Incremental Backup`\n3. **Differential Backup**\n4. File-level Backup\n\n"
            "Supports cloud storage integration and encryption.",
            "Active",
            "Data",
            "mdi mdi-cloud-upload mdi-24px text-indigo-500",
            now - timedelta(days=5),
            3420,
            99,
            5,
            now - timedelta(hours=6),
        ),
        (
            "Notifications",
            "# Notifications\n\nSystem **notification and alert** management.\n\n"
            "## Channels\n- *Email*\n- `Webhooks`\n- **In-app alerts**",
            "Disabled",
            "Communication",
            "mdi mdi-bell mdi-24px text-pink-500",
            now - timedelta(days=27),
            0,
            0,
            0,
            None,
        ),
    ]


def seed_features(cursor: sqlite3.Cursor) -> int:
    """Insert the example features if the table is empty.

    Returns the number of rows inserted.
    """
    cursor.execute("SELECT COUNT(*) AS total FROM features")
    total = cursor.fetchone()["total"]
    if total:
        logger.info("Database already contains %s features", total)
        return 0
    rows = _seed_rows(datetime.now(timezone.utc))
    cursor.executemany(
        """
        INSERT INTO features (name, description, status, category, icon, last_updated,
                              usage_count, success_rate, error_count, last_used)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            row[:5] + (row[5].isoformat(),) + row[6:9] + (row[9].isoformat() if row[9] else None,)
            for row in rows
        ],
    )
    logger.info("Database seeded with %s example features", len(rows))
    return len(rows)


def init_db() -> None:
    """Initialise the database, apply pending migrations and seed data.

    Creates the ``migrations`` table if it does not exist, applies any
    entry of ``MIGRATIONS`` newer than the recorded version and then
    seeds the example features into an empty table.  Errors propagate:
    the application must not start serving on a broken database.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s", version)
                current_version = version

        seed_features(cursor)
