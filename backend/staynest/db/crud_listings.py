# staynest/db/crud_listings.py
from datetime import datetime
from typing import List, Dict, Any

from sqlalchemy import select, update, delete, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staynest.db.models import Listing, ListingImage, ListingStatus, User


async def list_listings(
    db: AsyncSession,
    filters: dict = None,
) -> List[Listing]:
    """
    Listing search. Only ACTIVE listings unless ``host_id`` is given, in which
    case the host sees all of their own listings.
    """
    filters = filters or {}
    stmt = select(Listing)

    where_clauses = []
    if filters.get("host_id"):
        where_clauses.append(Listing.host_id == filters["host_id"])
    else:
        where_clauses.append(Listing.status == ListingStatus.ACTIVE.value)

    if filters.get("q"):
        pattern = f"%{filters['q']}%"
        where_clauses.append(
            or_(
                Listing.title.ilike(pattern),
                Listing.description.ilike(pattern),
                Listing.address.ilike(pattern),
            )
        )
    if filters.get("type"):
        where_clauses.append(Listing.property_type == filters["type"])
    if filters.get("min_price") is not None:
        where_clauses.append(Listing.price >= int(filters["min_price"]))
    if filters.get("max_price") is not None:
        where_clauses.append(Listing.price <= int(filters["max_price"]))

    stmt = stmt.where(and_(*where_clauses))

    sort = filters.get("sort_by")
    if sort == "price_desc":
        stmt = stmt.order_by(Listing.price.desc())
    elif sort == "newest":
        stmt = stmt.order_by(Listing.created_at.desc())
    else:
        stmt = stmt.order_by(Listing.price.asc())

    res = await db.execute(stmt)
    return list(res.scalars().all())


async def get_listing(db: AsyncSession, listing_id: str) -> Listing | None:
    res = await db.execute(select(Listing).where(Listing.id == listing_id))
    return res.scalars().first()


async def get_listing_with_host(db: AsyncSession, listing_id: str) -> Listing | None:
    # host and images are eagerly loaded; lazy loads are not allowed on AsyncSession
    res = await db.execute(
        select(Listing)
        .options(selectinload(Listing.host), selectinload(Listing.images))
        .where(Listing.id == listing_id)
    )
    return res.scalars().first()


async def list_nearby(
    db: AsyncSession,
    lat: float,
    lng: float,
    distance: float = 0.05,
    exclude_id: str | None = None,
    limit: int = 10,
) -> List[Dict[str, Any]]:
    """
    ACTIVE listings inside a lat/lng box of +-``distance`` degrees around a
    point, cheapest first, each with its featured image path (if any).
    """
    featured_image = (
        select(ListingImage.image_path)
        .where(
            ListingImage.listing_id == Listing.id,
            ListingImage.is_featured.is_(True),
        )
        .order_by(ListingImage.sort_order.asc())
        .limit(1)
        .correlate(Listing)
        .scalar_subquery()
    )

    stmt = select(
        Listing.id,
        Listing.title,
        Listing.price,
        Listing.address,
        Listing.latitude,
        Listing.longitude,
        Listing.property_type,
        featured_image.label("image_path"),
    ).where(
        Listing.status == ListingStatus.ACTIVE.value,
        Listing.latitude.between(lat - distance, lat + distance),
        Listing.longitude.between(lng - distance, lng + distance),
    )
    if exclude_id:
        stmt = stmt.where(Listing.id != exclude_id)

    stmt = stmt.order_by(Listing.price.asc()).limit(limit)
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]


async def create_listing(db: AsyncSession, **kwargs) -> Listing:
    """
    New listings always start PENDING until an admin approves them.
    """
    kwargs["status"] = ListingStatus.PENDING.value
    listing = Listing(**kwargs)
    db.add(listing)
    await db.commit()
    await db.refresh(listing)
    return listing


async def update_listing(db: AsyncSession, listing: Listing, data: dict) -> Listing:
    for k, v in data.items():
        if v is not None:
            setattr(listing, k, v)
    db.add(listing)
    await db.commit()
    await db.refresh(listing)
    return listing


async def delete_listing(db: AsyncSession, listing_id: str) -> int:
    res = await db.execute(delete(Listing).where(Listing.id == listing_id))
    await db.commit()
    return res.rowcount


async def set_listing_status(db: AsyncSession, listing_id: str, status: str) -> int:
    res = await db.execute(
        update(Listing)
        .where(Listing.id == listing_id)
        .values(status=status, updated_at=datetime.utcnow())
    )
    await db.commit()
    return res.rowcount


# --- ADMIN: all listings with host contact ---

async def list_listings_with_host(db: AsyncSession) -> List[Dict[str, Any]]:
    """
    Admin full list: every listing (any status), oldest first, flattened with
    the host's name and email.
    """
    stmt = (
        select(
            Listing.id,
            Listing.title,
            Listing.description,
            Listing.price,
            Listing.created_at,
            Listing.updated_at,
            Listing.host_id,
            Listing.property_type,
            Listing.address,
            Listing.status,
            User.name.label("user_name"),
            User.email.label("user_email"),
        )
        .outerjoin(User, User.id == Listing.host_id)
        .order_by(Listing.created_at.asc())
    )
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]
