"""Property listing endpoints. Reads are public; writes require a bearer token."""
from fastapi import APIRouter, Body, Depends, Query

from api.dependencies import (
    get_authorization_header,
    get_current_identity,
    get_property_service,
)
from models.enums import PropertyType, RentalType
from schemas.common import MessageResponse
from schemas.identity import IdentityClaim
from schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertySearch,
    PropertyUpdate,
    PropertyWithOwner,
)
from services.property_service import PropertyService

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get(
    "",
    response_model=list[PropertyWithOwner],
    response_model_exclude_unset=True,
)
async def list_properties(
    authorization: str | None = Depends(get_authorization_header),
    service: PropertyService = Depends(get_property_service),
) -> list[PropertyWithOwner]:
    """
    List every property.

    With an Authorization header each item carries an ``owner`` profile where it
    could be fetched.
    """
    return await service.list_properties(authorization)


# Declared before /{property_id} so "search" is not parsed as an id
@router.get(
    "/search",
    response_model=list[PropertyWithOwner],
    response_model_exclude_unset=True,
)
async def search_properties(
    location: str | None = Query(default=None, description="Case-insensitive substring"),
    min_price: float | None = Query(default=None, ge=0, alias="minPrice"),
    max_price: float | None = Query(default=None, ge=0, alias="maxPrice"),
    property_type: PropertyType | None = Query(default=None, alias="propertyType"),
    rental_type: RentalType | None = Query(default=None, alias="rentalType"),
    body: PropertySearch | None = Body(default=None),
    authorization: str | None = Depends(get_authorization_header),
    service: PropertyService = Depends(get_property_service),
) -> list[PropertyWithOwner]:
    """
    Search properties. All filters are optional and combined with AND.

    - **location**: substring of the location, case-insensitive
    - **minPrice** / **maxPrice**: inclusive price bounds
    - **propertyType** / **rentalType**: exact match

    Filters may also be sent as a JSON body. A query parameter wins over the
    same filter in the body.
    """
    query = {
        "location": location,
        "min_price": min_price,
        "max_price": max_price,
        "property_type": property_type,
        "rental_type": rental_type,
    }
    merged = body.model_dump(exclude_unset=True) if body else {}
    merged.update({key: value for key, value in query.items() if value is not None})
    filters = PropertySearch(**merged)
    return await service.search_properties(filters, authorization)


@router.get(
    "/{property_id}",
    response_model=PropertyWithOwner,
    response_model_exclude_unset=True,
)
async def get_property(
    property_id: int,
    authorization: str | None = Depends(get_authorization_header),
    service: PropertyService = Depends(get_property_service),
) -> PropertyWithOwner:
    return await service.get_property(property_id, authorization)


@router.post("", response_model=PropertyWithOwner, status_code=201)
async def create_property(
    data: PropertyCreate,
    identity: IdentityClaim = Depends(get_current_identity),
    authorization: str | None = Depends(get_authorization_header),
    service: PropertyService = Depends(get_property_service),
) -> PropertyWithOwner:
    """Create a property owned by the caller. Any ``ownerId`` in the body is ignored."""
    return await service.create_property(data, identity, authorization)


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: int,
    data: PropertyUpdate,
    identity: IdentityClaim = Depends(get_current_identity),
    service: PropertyService = Depends(get_property_service),
) -> PropertyResponse:
    """Partially update a property. Owner or admin only."""
    prop = await service.update_property(property_id, data, identity)
    return PropertyResponse.model_validate(prop)


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(
    property_id: int,
    identity: IdentityClaim = Depends(get_current_identity),
    service: PropertyService = Depends(get_property_service),
) -> MessageResponse:
    """Delete a property. Owner or admin only."""
    await service.delete_property(property_id, identity)
    return MessageResponse(message="Property deleted successfully")
