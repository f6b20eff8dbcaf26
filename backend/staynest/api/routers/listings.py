# staynest/api/routers/listings.py
from typing import List, Optional

from fastapi import APIRouter, Query

from staynest.api.dependencies import CurrentSession, CurrentUser, DbSession
from staynest.core.errors import (
    InvalidInputError,
    NotAuthenticatedError,
    NotFoundError,
    UnauthorizedError,
)
from staynest.db import crud_listings
from staynest.db.models import PropertyType
from staynest.schemas.listing import (
    ListingCreate,
    ListingCreated,
    ListingDetail,
    ListingOut,
    ListingUpdate,
    NearbyListing,
)

router = APIRouter()


@router.get("", response_model=List[ListingOut])
async def list_listings(
    db: DbSession,
    session: CurrentSession,
    q: Optional[str] = None,
    type: Optional[PropertyType] = None,
    min_price: Optional[int] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[int] = Query(None, alias="maxPrice", ge=0),
    sort_by: str = Query("price_asc", alias="sortBy"),
    user_only: bool = Query(False, alias="userOnly"),
):
    """
    Public search over ACTIVE listings. ``userOnly=true`` switches to the
    caller's own listings in every status.
    """
    filters = {
        "q": q,
        "type": type.value if type else None,
        "min_price": min_price,
        "max_price": max_price,
        "sort_by": sort_by,
    }
    if user_only:
        if session is None:
            raise NotAuthenticatedError()
        filters["host_id"] = session.user.id

    return await crud_listings.list_listings(db, filters=filters)


@router.get("/nearby", response_model=List[NearbyListing])
async def nearby_listings(
    db: DbSession,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    distance: float = Query(0.05, gt=0),
    exclude: Optional[str] = None,
    limit: int = Query(10, ge=1, le=50),
):
    """
    Listings around a point; ``distance`` is in degrees (0.05 is roughly 5 km).
    """
    if lat is None or lng is None:
        raise InvalidInputError("Missing latitude or longitude")
    return await crud_listings.list_nearby(
        db, lat, lng, distance=distance, exclude_id=exclude, limit=limit
    )


@router.get("/{listing_id}", response_model=ListingDetail)
async def get_listing(listing_id: str, db: DbSession):
    listing = await crud_listings.get_listing_with_host(db, listing_id)
    if not listing:
        raise NotFoundError("Listing not found")
    return listing


@router.post("", response_model=ListingCreated)
async def create_listing(body: ListingCreate, db: DbSession, current_user: CurrentUser):
    """
    Create a listing for the caller. It stays PENDING until approved.
    """
    listing = await crud_listings.create_listing(
        db,
        host_id=current_user.id,
        title=body.title,
        description=body.description,
        address=body.address,
        latitude=body.latitude,
        longitude=body.longitude,
        price=body.price,
        property_type=body.property_type.value,
    )
    return {"success": True, "id": listing.id}


@router.put("/{listing_id}")
async def update_listing(
    listing_id: str,
    body: ListingUpdate,
    db: DbSession,
    current_user: CurrentUser,
):
    listing = await crud_listings.get_listing(db, listing_id)
    if not listing or listing.host_id != current_user.id:
        raise UnauthorizedError("Not allowed")

    data = body.model_dump()
    data["property_type"] = body.property_type.value
    await crud_listings.update_listing(db, listing, data)
    return {"success": True}


@router.delete("/{listing_id}")
async def delete_listing(listing_id: str, db: DbSession, current_user: CurrentUser):
    listing = await crud_listings.get_listing(db, listing_id)
    if not listing or listing.host_id != current_user.id:
        raise UnauthorizedError("Not allowed")

    await crud_listings.delete_listing(db, listing_id)
    return {"success": True}
