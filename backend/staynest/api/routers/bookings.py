from typing import List

from fastapi import APIRouter

from staynest.api.dependencies import CurrentUser, DbSession
from staynest.core.errors import InvalidInputError, NotFoundError, UnauthorizedError
from staynest.db import crud_bookings, crud_listings
from staynest.db.models import BookingStatus
from staynest.schemas.booking import BookingCreate, BookingCreated, BookingOut, UserBookingRow

router = APIRouter()


@router.post("", response_model=BookingCreated)
async def create_booking(body: BookingCreate, db: DbSession, current_user: CurrentUser):
    if body.check_out <= body.check_in:
        raise InvalidInputError("Invalid dates")
    if body.guests < 1:
        raise InvalidInputError("Invalid guest count")

    if await crud_bookings.has_overlap(db, body.listing_id, body.check_in, body.check_out):
        raise InvalidInputError("Selected dates are not available")

    listing = await crud_listings.get_listing(db, body.listing_id)
    if not listing:
        raise NotFoundError("Listing not found")

    nights = crud_bookings.count_nights(body.check_in, body.check_out)
    booking = await crud_bookings.create_booking(
        db,
        user_id=current_user.id,
        listing_id=body.listing_id,
        check_in=body.check_in,
        check_out=body.check_out,
        guests=body.guests,
        total_price=nights * listing.price,
    )
    return {"id": booking.id, "total_price": booking.total_price}


@router.get("", response_model=List[UserBookingRow])
async def list_bookings(db: DbSession, current_user: CurrentUser):
    return await crud_bookings.list_bookings_for_user(db, current_user.id)


@router.get("/{booking_id}", response_model=BookingOut)
async def get_booking(booking_id: str, db: DbSession, current_user: CurrentUser):
    booking = await crud_bookings.get_booking(db, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.user_id != current_user.id:
        raise UnauthorizedError()
    return booking


@router.delete("/{booking_id}")
async def cancel_booking(booking_id: str, db: DbSession, current_user: CurrentUser):
    """
    Guests cancel rather than delete; the row is kept as CANCELLED.
    """
    booking = await crud_bookings.get_booking(db, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.user_id != current_user.id:
        raise UnauthorizedError()

    await crud_bookings.transition_booking(db, booking_id, BookingStatus.CANCELLED)
    return {"success": True}
