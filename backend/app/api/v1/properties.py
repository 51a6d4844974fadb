"""Properties API routes: hosts list and manage their listings."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_host, get_db
from app.core.exceptions import Forbidden, NotFound
from app.models.property import Property
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.property import (
    PropertyCreate,
    PropertyData,
    PropertyListData,
    PropertyResponse,
    PropertyUpdate,
)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


async def _get_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    result = await db.execute(select(Property).where(Property.id == property_id))
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFound("Property")
    return prop


@router.post(
    "",
    response_model=ApiResponse[PropertyData],
    status_code=status.HTTP_201_CREATED,
    summary="List a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> ApiResponse[PropertyData]:
    """Create a property owned by the authenticated host."""
    prop = Property(host_id=current_user.id, **body.model_dump())
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return ApiResponse[PropertyData](
        message="Property created successfully",
        data=PropertyData(property=PropertyResponse.model_validate(prop)),
    )


@router.get(
    "",
    response_model=ApiResponse[PropertyListData],
    summary="List the current host's properties",
)
async def list_properties(
    is_active: bool | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> ApiResponse[PropertyListData]:
    filters = [Property.host_id == current_user.id]
    if is_active is not None:
        filters.append(Property.is_active == is_active)

    count_query = select(func.count()).select_from(Property).where(*filters)
    total = (await db.execute(count_query)).scalar_one()

    items_query = select(Property).where(*filters).order_by(Property.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return ApiResponse[PropertyListData](
        data=PropertyListData(
            items=[PropertyResponse.model_validate(p) for p in items],
            total=total,
        )
    )


@router.get(
    "/{property_id}",
    response_model=ApiResponse[PropertyData],
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PropertyData]:
    """Public listing detail."""
    prop = await _get_property(db, property_id)
    return ApiResponse[PropertyData](data=PropertyData(property=PropertyResponse.model_validate(prop)))


@router.put(
    "/{property_id}",
    response_model=ApiResponse[PropertyData],
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_host),
) -> ApiResponse[PropertyData]:
    """Partially update a property. Existing bookings keep their price and guest count."""
    prop = await _get_property(db, property_id)
    if prop.host_id != current_user.id:
        raise Forbidden("You do not have permission to modify this property")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(prop, field, value)

    db.add(prop)
    await db.flush()
    await db.refresh(prop)

    return ApiResponse[PropertyData](
        message="Property updated successfully",
        data=PropertyData(property=PropertyResponse.model_validate(prop)),
    )
