"""
Data access for the ``features`` table.

``FeatureRepository`` is the interface the service layer depends on;
``SQLiteFeatureRepository`` implements it with parameterized SQL over a
fresh connection per call.  No method shares a transaction with
another, so read‑check‑then‑write sequences in the service are not
atomic; the ``UNIQUE`` constraint on ``name`` is the final guard and a
violation surfaces from ``create`` as ``sqlite3.IntegrityError``.
"""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from feature_admin_api.app.core.db import get_connection
from feature_admin_api.app.schemas.feature import Feature


class FeatureRepository(ABC):
    """Persistence operations for features."""

    @abstractmethod
    def get_all(self) -> List[Feature]:
        """Return all features ordered by name."""

    @abstractmethod
    def get_by_id(self, feature_id: int) -> Optional[Feature]:
        ...

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Feature]:
        ...

    @abstractmethod
    def get_by_category(self, category: str, exclude_id: Optional[int] = None) -> List[Feature]:
        ...

    @abstractmethod
    def create(self, feature: Feature) -> int:
        """Insert ``feature`` and return the id assigned by storage."""

    @abstractmethod
    def update(self, feature: Feature) -> bool:
        """Overwrite the mutable columns of ``feature.id``; ``True`` if a row changed."""

    @abstractmethod
    def delete(self, feature_id: int) -> bool:
        ...

    @abstractmethod
    def exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class SQLiteFeatureRepository(FeatureRepository):
    """``FeatureRepository`` backed by the SQLite database from ``core.db``."""

    def get_all(self) -> List[Feature]:
        conn = get_connection()
        try:
            rows = conn.execute("SELECT * FROM features ORDER BY name ASC").fetchall()
            return [self._row_to_feature(row) for row in rows]
        finally:
            conn.close()

    def get_by_id(self, feature_id: int) -> Optional[Feature]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM features WHERE id = ?", (feature_id,)).fetchone()
            return self._row_to_feature(row) if row else None
        finally:
            conn.close()

    def get_by_name(self, name: str) -> Optional[Feature]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM features WHERE name = ?", (name,)).fetchone()
            return self._row_to_feature(row) if row else None
        finally:
            conn.close()

    def get_by_category(self, category: str, exclude_id: Optional[int] = None) -> List[Feature]:
        conn = get_connection()
        try:
            if exclude_id is not None:
                rows = conn.execute(
                    "SELECT * FROM features WHERE category = ? AND id != ? ORDER BY name ASC",
                    (category, exclude_id),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM features WHERE category = ? ORDER BY name ASC",
                    (category,),
                ).fetchall()
            return [self._row_to_feature(row) for row in rows]
        finally:
            conn.close()

    def create(self, feature: Feature) -> int:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO features (name, description, status, category, icon, last_updated,
                                      usage_count, success_rate, error_count, last_used)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    feature.name,
                    feature.description,
                    feature.status,
                    feature.category,
                    feature.icon,
                    _to_text(feature.last_updated),
                    feature.usage_count,
                    feature.success_rate,
                    feature.error_count,
                    _to_text(feature.last_used),
                ),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    def update(self, feature: Feature) -> bool:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE features
                SET description = ?, status = ?, category = ?, icon = ?, last_updated = ?,
                    usage_count = ?, success_rate = ?, error_count = ?, last_used = ?
                WHERE id = ?
                """,
                (
                    feature.description,
                    feature.status,
                    feature.category,
                    feature.icon,
                    _to_text(feature.last_updated),
                    feature.usage_count,
                    feature.success_rate,
                    feature.error_count,
                    _to_text(feature.last_used),
                    feature.id,
                ),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def delete(self, feature_id: int) -> bool:
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM features WHERE id = ?", (feature_id,))
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        conn = get_connection()
        try:
            if exclude_id is not None:
                row = conn.execute(
                    "SELECT COUNT(*) AS total FROM features WHERE name = ? AND id != ?",
                    (name, exclude_id),
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) AS total FROM features WHERE name = ?",
                    (name,),
                ).fetchone()
            return row["total"] > 0
        finally:
            conn.close()

    def count(self) -> int:
        conn = get_connection()
        try:
            return conn.execute("SELECT COUNT(*) AS total FROM features").fetchone()["total"]
        finally:
            conn.close()

    @staticmethod
    def _row_to_feature(row: sqlite3.Row) -> Feature:
        """Convert a database row to a ``Feature``."""
        return Feature(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            status=row["status"],
            category=row["category"],
            icon=row["icon"],
            last_updated=datetime.fromisoformat(row["last_updated"]),
            usage_count=row["usage_count"],
            success_rate=row["success_rate"],
            error_count=row["error_count"],
            last_used=datetime.fromisoformat(row["last_used"]) if row["last_used"] else None,
        )


def _to_text(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None
