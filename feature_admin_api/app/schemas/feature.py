"""
Pydantic schemas for features.

``Feature`` is the stored record and is also what the API returns;
``FeatureCreate`` and ``FeatureUpdate`` are request bodies.  All models
serialise with camelCase aliases (``lastUpdated``, ``usageCount``) and
accept either camelCase or snake_case on input.  ``ApiResponse`` is the
envelope every endpoint responds with.
"""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Feature(CamelModel):
    """A named system capability with status and usage metadata."""

    id: int = 0
    name: str
    description: str
    status: str
    category: str
    icon: str
    last_updated: datetime
    usage_count: int = 0
    success_rate: int = 0
    error_count: int = 0
    last_used: Optional[datetime] = None


class FeatureCreate(CamelModel):
    """Schema for creating a feature.

    Fields are checked by ``FeatureService.create`` rather than here so
    that a single validation error can name every offending field.
    """

    name: Optional[str] = Field(None, description="Unique feature name", examples=["NewFeature"])
    description: Optional[str] = Field(
        None,
        description="Feature description; supports Markdown",
        examples=["# New Feature\n\nThis is a **new feature** with *Markdown* support."],
    )
    status: Optional[str] = Field(None, examples=["Active"])
    category: Optional[str] = Field(None, examples=["Development"])
    icon: Optional[str] = Field(None, description="Icon CSS classes", examples=["mdi mdi-star mdi-24px text-yellow-500"])


class FeatureUpdate(CamelModel):
    """Schema for updating a feature.

    All fields are optional; a field that is missing, ``null`` or blank
    leaves the stored value unchanged.  The name cannot be changed.
    """

    description: Optional[str] = Field(None, examples=["Updated description with **new content**."])
    status: Optional[str] = Field(None, examples=["Pending"])
    category: Optional[str] = Field(None, examples=["Security"])
    icon: Optional[str] = Field(None, examples=["mdi mdi-shield mdi-24px text-blue-500"])


class FeatureDetail(CamelModel):
    """A feature with its rendered description and related features."""

    feature: Feature
    description_html: str
    status_color: str
    related_features: List[Feature] = []


class ApiResponse(CamelModel, Generic[T]):
    """Uniform response envelope."""

    success: bool
    message: str = ""
    data: Optional[T] = None
    errors: Optional[List[str]] = None


class HealthStatus(CamelModel):
    status: str
    timestamp: datetime
    service: str
    version: str
