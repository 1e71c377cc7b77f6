"""Pytest configuration and shared fixtures."""

import sqlite3
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from feature_admin_api.app.core.config import reload_settings
from feature_admin_api.app.core.db import get_cursor, init_db
from feature_admin_api.app.main import create_app
from feature_admin_api.app.repositories.feature_repository import FeatureRepository, SQLiteFeatureRepository
from feature_admin_api.app.schemas.feature import Feature, FeatureCreate


class InMemoryFeatureRepository(FeatureRepository):
    """Dict-backed repository that enforces the unique name constraint like SQLite."""

    def __init__(self) -> None:
        self.rows: Dict[int, Feature] = {}
        self.next_id = 1
        self.calls: List[str] = []

    def get_all(self) -> List[Feature]:
        self.calls.append("get_all")
        return sorted(self.rows.values(), key=lambda f: f.name)

    def get_by_id(self, feature_id: int) -> Optional[Feature]:
        self.calls.append("get_by_id")
        return self.rows.get(feature_id)

    def get_by_name(self, name: str) -> Optional[Feature]:
        self.calls.append("get_by_name")
        return next((f for f in self.rows.values() if f.name == name), None)

    def get_by_category(self, category: str, exclude_id: Optional[int] = None) -> List[Feature]:
        self.calls.append("get_by_category")
        return sorted(
            (f for f in self.rows.values() if f.category == category and f.id != exclude_id),
            key=lambda f: f.name,
        )

    def create(self, feature: Feature) -> int:
        self.calls.append("create")
        if any(f.name == feature.name for f in self.rows.values()):
            raise sqlite3.IntegrityError("UNIQUE constraint failed: features.name")
        feature_id = self.next_id
        self.next_id += 1
        self.rows[feature_id] = feature.model_copy(update={"id": feature_id})
        return feature_id

    def update(self, feature: Feature) -> bool:
        self.calls.append("update")
        if feature.id not in self.rows:
            return False
        self.rows[feature.id] = feature
        return True

    def delete(self, feature_id: int) -> bool:
        self.calls.append("delete")
        return self.rows.pop(feature_id, None) is not None

    def exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        self.calls.append("exists")
        return any(f.name == name and f.id != exclude_id for f in self.rows.values())

    def count(self) -> int:
        return len(self.rows)


@pytest.fixture
def fake_repository() -> InMemoryFeatureRepository:
    return InMemoryFeatureRepository()


@pytest.fixture
def create_request() -> FeatureCreate:
    return FeatureCreate(
        name="NewFeature",
        description="# New Feature\n\nThis is a **new feature**.",
        status="Active",
        category="Development",
        icon="mdi mdi-star mdi-24px text-yellow-500",
    )


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Point every test at its own SQLite file."""
    monkeypatch.setenv("DATABASE_URL", str(tmp_path / "features.db"))
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("DETAILED_ERRORS", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)
    reload_settings()
    yield tmp_path / "features.db"
    monkeypatch.undo()
    reload_settings()


@pytest.fixture
def seeded_db(database):
    init_db()
    return database


@pytest.fixture
def empty_db(database):
    """Migrated database with the seed rows removed."""
    init_db()
    with get_cursor() as cursor:
        cursor.execute("DELETE FROM features")
    return database


@pytest.fixture
def repository() -> SQLiteFeatureRepository:
    return SQLiteFeatureRepository()


@pytest.fixture
def client(database) -> TestClient:
    """Test client for a fresh app; entering it runs startup (migrations + seed)."""
    with TestClient(create_app()) as test_client:
        yield test_client
