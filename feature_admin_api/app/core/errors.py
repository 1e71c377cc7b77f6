"""
Domain error taxonomy.

Services raise these exceptions for expected failure conditions; the
exception handlers registered in ``main`` translate each class into an
HTTP status and the standard response envelope.
"""

from typing import List, Optional


class FeatureError(Exception):
    """Base class for feature domain errors."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = list(errors) if errors else []


class ValidationError(FeatureError):
    """A create request is malformed; ``errors`` names every violated field."""

    status_code = 400

    def __init__(self, errors: List[str]) -> None:
        super().__init__(f"Validation failed: {', '.join(errors)}", errors)


class ConflictError(FeatureError):
    """A feature with the requested name already exists."""

    status_code = 400


class NotFoundError(FeatureError):
    status_code = 404


class InternalError(FeatureError):
    """Storage or other unexpected failure."""

    status_code = 500
