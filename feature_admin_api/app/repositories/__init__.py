"""
Repository layer.

Repositories hide SQL behind a small interface so services can be
exercised against an in‑memory implementation in tests.
"""

from .feature_repository import FeatureRepository, SQLiteFeatureRepository

__all__ = ["FeatureRepository", "SQLiteFeatureRepository"]
