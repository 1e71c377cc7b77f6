"""Tests for the SQLite repository and database initialisation."""

import sqlite3
from datetime import datetime, timezone

import pytest

from feature_admin_api.app.core.db import get_connection, get_database_path, init_db
from feature_admin_api.app.schemas.feature import Feature


def new_feature(name, category="Test"):
    return Feature(
        name=name,
        description="Some **markdown**",
        status="Active",
        category=category,
        icon="mdi mdi-star",
        last_updated=datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc),
    )


def test_database_path_follows_settings(database):
    assert get_database_path() == str(database)


def test_init_db_seeds_once(seeded_db, repository):
    assert repository.count() == 7

    init_db()

    assert repository.count() == 7
    conn = get_connection()
    try:
        versions = [row["version"] for row in conn.execute("SELECT version FROM migrations ORDER BY version")]
    finally:
        conn.close()
    assert versions == [1, 2]


def test_init_db_does_not_reseed_a_non_empty_table(empty_db, repository):
    repository.create(new_feature("OnlyOne"))

    init_db()

    assert [f.name for f in repository.get_all()] == ["OnlyOne"]


def test_seed_rows_include_metrics_and_optional_last_used(seeded_db, repository):
    adblock = repository.get_by_name("AdBlock")
    analytics = repository.get_by_name("Analytics")

    assert adblock.usage_count == 15420
    assert adblock.success_rate == 98
    assert adblock.last_used is not None
    assert adblock.description.startswith("# Ad Block Feature")
    assert analytics.status == "Pending"
    assert analytics.last_used is None


def test_get_all_orders_by_name(empty_db, repository):
    for name in ("Zulu", "Alpha", "Mike"):
        repository.create(new_feature(name))

    assert [f.name for f in repository.get_all()] == ["Alpha", "Mike", "Zulu"]


def test_create_and_read_back(empty_db, repository):
    feature_id = repository.create(new_feature("Roundtrip"))

    stored = repository.get_by_id(feature_id)

    assert stored.id == feature_id
    assert stored.name == "Roundtrip"
    assert stored.last_updated == datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert stored.last_used is None
    assert repository.get_by_name("Roundtrip") == stored
    assert repository.get_by_name("roundtrip") is None
    assert repository.get_by_id(feature_id + 100) is None


def test_unique_name_constraint(empty_db, repository):
    repository.create(new_feature("Dup"))

    with pytest.raises(sqlite3.IntegrityError):
        repository.create(new_feature("Dup"))

    assert repository.count() == 1


def test_exists_with_exclusion(empty_db, repository):
    feature_id = repository.create(new_feature("Present"))

    assert repository.exists("Present") is True
    assert repository.exists("Present", exclude_id=feature_id) is False
    assert repository.exists("Absent") is False


def test_update_overwrites_mutable_columns(empty_db, repository):
    feature_id = repository.create(new_feature("Mutable"))
    stored = repository.get_by_id(feature_id)
    changed = stored.model_copy(
        update={
            "description": "new",
            "status": "Disabled",
            "usage_count": 3,
            "last_used": datetime(2025, 2, 1, tzinfo=timezone.utc),
        }
    )

    assert repository.update(changed) is True

    reloaded = repository.get_by_id(feature_id)
    assert reloaded.description == "new"
    assert reloaded.status == "Disabled"
    assert reloaded.usage_count == 3
    assert reloaded.last_used == datetime(2025, 2, 1, tzinfo=timezone.utc)
    assert reloaded.name == "Mutable"


def test_update_and_delete_missing_rows(empty_db, repository):
    ghost = new_feature("Ghost").model_copy(update={"id": 12345})

    assert repository.update(ghost) is False
    assert repository.delete(12345) is False


def test_delete_removes_row(empty_db, repository):
    feature_id = repository.create(new_feature("Doomed"))

    assert repository.delete(feature_id) is True
    assert repository.get_by_id(feature_id) is None
    assert repository.count() == 0


def test_get_by_category(seeded_db, repository):
    database = repository.get_by_name("Database")

    assert [f.name for f in repository.get_by_category("Data")] == ["Backup", "Database"]
    assert [f.name for f in repository.get_by_category("Data", exclude_id=database.id)] == ["Backup"]
