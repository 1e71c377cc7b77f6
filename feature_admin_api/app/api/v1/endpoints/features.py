"""
Feature endpoints for API v1.

These routes expose a CRUD API over features.  Every response is an
``ApiResponse`` envelope; error conditions are raised as domain errors
and converted to envelopes by the exception handlers in ``main``.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from feature_admin_api.app.core.errors import NotFoundError
from feature_admin_api.app.repositories.feature_repository import SQLiteFeatureRepository
from feature_admin_api.app.schemas.feature import (
    ApiResponse,
    Feature,
    FeatureCreate,
    FeatureDetail,
    FeatureUpdate,
)
from feature_admin_api.app.services.feature_service import FeatureService

router = APIRouter()


def get_feature_service() -> FeatureService:
    """Dependency providing a service over the SQLite repository."""
    return FeatureService(SQLiteFeatureRepository())


@router.get("", response_model=ApiResponse[List[Feature]])
async def list_features(service: FeatureService = Depends(get_feature_service)) -> ApiResponse[List[Feature]]:
    """Return all features ordered by name."""
    features = await service.list_all()
    return ApiResponse(success=True, message="Features retrieved successfully", data=features)


@router.get("/by-name/{name}", response_model=ApiResponse[Feature])
async def get_feature_by_name(
    name: str,
    service: FeatureService = Depends(get_feature_service),
) -> ApiResponse[Feature]:
    """Retrieve a feature by its exact name."""
    feature = await service.get_by_name(name)
    if feature is None:
        raise NotFoundError("Feature not found")
    return ApiResponse(success=True, message="Feature retrieved successfully", data=feature)


@router.get("/{feature_id}", response_model=ApiResponse[Feature])
async def get_feature(
    feature_id: int,
    service: FeatureService = Depends(get_feature_service),
) -> ApiResponse[Feature]:
    """Retrieve a single feature by ID.  Returns HTTP 404 if absent."""
    feature = await service.get_by_id(feature_id)
    if feature is None:
        raise NotFoundError("Feature not found")
    return ApiResponse(success=True, message="Feature retrieved successfully", data=feature)


@router.get("/{feature_id}/detail", response_model=ApiResponse[FeatureDetail])
async def get_feature_detail(
    feature_id: int,
    service: FeatureService = Depends(get_feature_service),
) -> ApiResponse[FeatureDetail]:
    """Feature with rendered description HTML, status colour and related features."""
    detail = await service.get_detail(feature_id)
    return ApiResponse(success=True, message="Feature retrieved successfully", data=detail)


@router.post("", response_model=ApiResponse[Feature], status_code=status.HTTP_201_CREATED)
async def create_feature(
    feature_in: FeatureCreate,
    request: Request,
    response: Response,
    service: FeatureService = Depends(get_feature_service),
) -> ApiResponse[Feature]:
    """Create a new feature.

    Returns HTTP 400 when validation fails or the name is already used.
    """
    feature = await service.create(feature_in)
    response.headers["Location"] = str(request.url_for("get_feature", feature_id=feature.id))
    return ApiResponse(success=True, message="Feature created successfully", data=feature)


@router.put("/{feature_id}", response_model=ApiResponse[Feature])
async def update_feature(
    feature_id: int,
    feature_in: FeatureUpdate,
    service: FeatureService = Depends(get_feature_service),
) -> ApiResponse[Feature]:
    """Update description, status, category or icon of a feature."""
    feature = await service.update(feature_id, feature_in)
    return ApiResponse(success=True, message="Feature updated successfully", data=feature)


@router.delete("/{feature_id}", response_model=ApiResponse[None])
async def delete_feature(
    feature_id: int,
    service: FeatureService = Depends(get_feature_service),
) -> ApiResponse[None]:
    """Delete a feature.  Returns HTTP 404 if it did not exist."""
    deleted = await service.delete(feature_id)
    if not deleted:
        raise NotFoundError("Feature not found")
    return ApiResponse(success=True, message="Feature deleted successfully")
