from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query

from staynest.api.dependencies import CurrentUser, DbSession
from staynest.core.errors import InvalidInputError
from staynest.db import crud_bookings, crud_listings, crud_reviews
from staynest.schemas.review import ReviewCreate, ReviewCreated, ReviewOut

router = APIRouter()


@router.get("", response_model=List[ReviewOut])
async def list_reviews(
    db: DbSession,
    listing_id: Optional[str] = Query(None, alias="listingId"),
):
    if not listing_id:
        raise InvalidInputError("Missing listingId")
    return await crud_reviews.list_reviews_for_listing(db, listing_id)


@router.post("", response_model=ReviewCreated)
async def create_review(body: ReviewCreate, db: DbSession, current_user: CurrentUser):
    """
    A review is tied to a finished stay (``bookingId``) or posted straight
    on a listing (``listingId``); one review per booking, and one direct
    review per user and listing.
    """
    if not body.booking_id and not body.listing_id:
        raise InvalidInputError("Either bookingId or listingId is required")

    if body.booking_id:
        booking = await crud_bookings.get_booking(db, body.booking_id)
        if not booking or booking.user_id != current_user.id:
            raise InvalidInputError("Invalid booking")
        if booking.check_out > datetime.utcnow():
            raise InvalidInputError("Stay not completed")
        if await crud_reviews.booking_review_exists(db, body.booking_id):
            raise InvalidInputError("Already reviewed this booking")
        listing_id = None
    else:
        if not await crud_listings.get_listing(db, body.listing_id):
            raise InvalidInputError("Invalid listing")
        if await crud_reviews.listing_review_exists(db, body.listing_id, current_user.id):
            raise InvalidInputError("You have already reviewed this listing")
        listing_id = body.listing_id

    review = await crud_reviews.create_review(
        db,
        user_id=current_user.id,
        rating=body.rating,
        comment=body.comment,
        booking_id=body.booking_id,
        listing_id=listing_id,
    )
    return {"id": review.id}
