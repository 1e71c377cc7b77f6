"""
Service layer for features.

``FeatureService`` validates requests, enforces name uniqueness and
translates repository results into domain errors.  It works against
any ``FeatureRepository``; the API wires in the SQLite implementation.

Name uniqueness is checked before insert, but the check and the insert
run on separate connections.  Two concurrent creates with the same name
can both pass the check; the loser then hits the ``UNIQUE`` constraint
and receives the same ``ConflictError`` as the pre‑check would raise.
Likewise an update racing a delete sees zero affected rows and reports
``NotFoundError``.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from feature_admin_api.app.core.errors import (
    ConflictError,
    FeatureError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from feature_admin_api.app.repositories.feature_repository import FeatureRepository
from feature_admin_api.app.schemas.feature import Feature, FeatureCreate, FeatureDetail, FeatureUpdate
from feature_admin_api.app.services.markdown_service import MarkdownService

logger = logging.getLogger(__name__)

# (field, maximum length); ``None`` means no upper bound
CREATE_FIELD_LIMITS = (
    ("name", 100),
    ("description", None),
    ("status", 50),
    ("category", 50),
    ("icon", 200),
)

UPDATABLE_FIELDS = ("description", "status", "category", "icon")

STATUS_COLORS = {
    "Active": "green",
    "Pending": "yellow",
    "Disabled": "red",
}


def validate_create_request(data: FeatureCreate) -> List[str]:
    """Return a message for every field of ``data`` that is missing or too long."""
    errors: List[str] = []
    for field_name, max_length in CREATE_FIELD_LIMITS:
        value = getattr(data, field_name)
        label = field_name.capitalize()
        if value is None or not value.strip():
            errors.append(f"The {label} field is required.")
        elif max_length is not None and len(value) > max_length:
            errors.append(f"The {label} field must be at most {max_length} characters.")
    return errors


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, "gray")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeatureService:
    """Business operations on features."""

    def __init__(self, repository: FeatureRepository) -> None:
        self.repository = repository

    async def list_all(self) -> List[Feature]:
        try:
            return self.repository.get_all()
        except Exception as exc:
            raise self._internal("Error retrieving all features") from exc

    async def get_by_id(self, feature_id: int) -> Optional[Feature]:
        try:
            return self.repository.get_by_id(feature_id)
        except Exception as exc:
            raise self._internal("Error retrieving feature with ID %s", feature_id) from exc

    async def get_by_name(self, name: str) -> Optional[Feature]:
        try:
            return self.repository.get_by_name(name)
        except Exception as exc:
            raise self._internal("Error retrieving feature with name %r", name) from exc

    async def exists(self, name: str, exclude_id: Optional[int] = None) -> bool:
        try:
            return self.repository.exists(name, exclude_id)
        except Exception as exc:
            raise self._internal("Error checking if feature %r exists", name) from exc

    async def create(self, data: FeatureCreate) -> Feature:
        """Validate ``data``, insert a new feature and return the stored record.

        Raises ``ValidationError`` before touching storage when any field
        is invalid, and ``ConflictError`` when the name is taken.
        """
        errors = validate_create_request(data)
        if errors:
            raise ValidationError(errors)

        try:
            if self.repository.exists(data.name):
                raise self._conflict(data.name)

            feature = Feature(
                name=data.name,
                description=data.description,
                status=data.status,
                category=data.category,
                icon=data.icon,
                last_updated=_utcnow(),
                usage_count=0,
                success_rate=0,
                error_count=0,
                last_used=None,
            )
            try:
                feature_id = self.repository.create(feature)
            except sqlite3.IntegrityError as exc:
                raise self._conflict(data.name) from exc

            created = self.repository.get_by_id(feature_id)
            if created is None:
                raise InternalError(f"Feature {feature_id} was created but could not be read back")
        except FeatureError:
            raise
        except Exception as exc:
            raise self._internal("Error creating feature %r", data.name) from exc

        logger.info("Feature %r created with ID %s", created.name, created.id)
        return created

    async def update(self, feature_id: int, data: FeatureUpdate) -> Feature:
        """Apply the non‑blank fields of ``data`` and bump ``last_updated``.

        ``last_updated`` advances even when no field changes value.
        Raises ``NotFoundError`` if the feature does not exist or
        disappears before the write.
        """
        try:
            existing = self.repository.get_by_id(feature_id)
            if existing is None:
                raise NotFoundError(f"Feature with ID {feature_id} not found")

            changes = {
                field_name: value
                for field_name in UPDATABLE_FIELDS
                if (value := getattr(data, field_name)) is not None and value.strip()
            }
            now = _utcnow()
            if now <= existing.last_updated:
                now = existing.last_updated + timedelta(microseconds=1)
            changes["last_updated"] = now
            updated = existing.model_copy(update=changes)

            if not self.repository.update(updated):
                raise NotFoundError(f"Feature with ID {feature_id} not found")

            stored = self.repository.get_by_id(feature_id)
            if stored is None:
                raise NotFoundError(f"Feature with ID {feature_id} not found")
        except FeatureError:
            raise
        except Exception as exc:
            raise self._internal("Error updating feature with ID %s", feature_id) from exc

        logger.info("Feature %r updated", stored.name)
        return stored

    async def delete(self, feature_id: int) -> bool:
        """Delete a feature; ``False`` if it did not exist."""
        try:
            feature = self.repository.get_by_id(feature_id)
            if feature is None:
                return False
            deleted = self.repository.delete(feature_id)
        except Exception as exc:
            raise self._internal("Error deleting feature with ID %s", feature_id) from exc

        if deleted:
            logger.info("Feature %r deleted", feature.name)
        return deleted

    async def get_detail(self, feature_id: int) -> FeatureDetail:
        """Return a feature with its rendered description and same‑category peers."""
        try:
            feature = self.repository.get_by_id(feature_id)
            if feature is None:
                raise NotFoundError(f"Feature with ID {feature_id} not found")
            related = self.repository.get_by_category(feature.category, exclude_id=feature.id)
        except FeatureError:
            raise
        except Exception as exc:
            raise self._internal("Error retrieving detail for feature with ID %s", feature_id) from exc

        return FeatureDetail(
            feature=feature,
            description_html=MarkdownService.render_to_html(feature.description),
            status_color=status_color(feature.status),
            related_features=related,
        )

    @staticmethod
    def _conflict(name: str) -> ConflictError:
        return ConflictError(
            f"A feature with the name '{name}' already exists",
            ["A feature with this name already exists"],
        )

    @staticmethod
    def _internal(msg: str, *args) -> InternalError:
        logger.exception(msg, *args)
        return InternalError(msg % args if args else msg)
