# staynest/db/crud_reviews.py

from typing import List, Dict, Any

from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from staynest.db.models import Booking, Review, User


async def list_reviews_for_listing(db: AsyncSession, listing_id: str) -> List[Dict[str, Any]]:
    """
    Reviews attached to the listing directly, or to one of its bookings.
    Newest first.
    """
    stmt = (
        select(
            Review.id,
            Review.rating,
            Review.comment,
            Review.created_at,
            User.name.label("user_name"),
        )
        .outerjoin(Booking, Booking.id == Review.booking_id)
        .outerjoin(User, User.id == Review.user_id)
        .where(
            or_(
                Review.listing_id == listing_id,
                and_(Booking.listing_id == listing_id, Review.listing_id.is_(None)),
            )
        )
        .order_by(Review.created_at.desc())
    )
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]


async def booking_review_exists(db: AsyncSession, booking_id: str) -> bool:
    res = await db.execute(select(Review.id).where(Review.booking_id == booking_id))
    return res.first() is not None


async def listing_review_exists(db: AsyncSession, listing_id: str, user_id: str) -> bool:
    res = await db.execute(
        select(Review.id).where(
            Review.listing_id == listing_id,
            Review.user_id == user_id,
            Review.booking_id.is_(None),
        )
    )
    return res.first() is not None


async def create_review(
    db: AsyncSession,
    *,
    user_id: str,
    rating: int,
    comment: str,
    booking_id: str | None = None,
    listing_id: str | None = None,
) -> Review:
    review = Review(
        user_id=user_id,
        rating=rating,
        comment=comment,
        booking_id=booking_id,
        listing_id=listing_id,
    )
    db.add(review)
    await db.commit()
    await db.refresh(review)
    return review
