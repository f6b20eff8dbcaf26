# staynest/db/crud_bookings.py

import math
from datetime import datetime
from typing import List, Dict, Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staynest.db.models import Booking, BookingStatus, Listing, User
from staynest.domain import booking_state


def count_nights(check_in: datetime, check_out: datetime) -> int:
    # partial days count as a full night
    return math.ceil((check_out - check_in).total_seconds() / 86400)


async def has_overlap(
    db: AsyncSession,
    listing_id: str,
    check_in: datetime,
    check_out: datetime,
) -> bool:
    """
    True when a live (non-cancelled) booking of the listing intersects
    [check_in, check_out).
    """
    stmt = (
        select(Booking.id)
        .where(
            Booking.listing_id == listing_id,
            Booking.status != BookingStatus.CANCELLED.value,
            Booking.check_in < check_out,
            Booking.check_out > check_in,
        )
        .limit(1)
    )
    res = await db.execute(stmt)
    return res.first() is not None


async def create_booking(
    db: AsyncSession,
    *,
    user_id: str,
    listing_id: str,
    check_in: datetime,
    check_out: datetime,
    guests: int,
    total_price: int,
) -> Booking:
    booking = Booking(
        user_id=user_id,
        listing_id=listing_id,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        total_price=total_price,
        status=BookingStatus.PENDING.value,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    return booking


async def get_booking(db: AsyncSession, booking_id: str) -> Booking | None:
    res = await db.execute(select(Booking).where(Booking.id == booking_id))
    return res.scalar_one_or_none()


async def list_bookings_for_user(db: AsyncSession, user_id: str) -> List[Dict[str, Any]]:
    stmt = (
        select(
            Booking.id,
            Booking.listing_id,
            Booking.check_in,
            Booking.check_out,
            Booking.guests,
            Booking.total_price,
            Booking.status,
            Listing.title,
            Listing.address,
            Listing.price,
        )
        .outerjoin(Listing, Listing.id == Booking.listing_id)
        .where(Booking.user_id == user_id)
        .order_by(Booking.created_at.desc())
    )
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]


async def list_bookings_with_details(db: AsyncSession) -> List[Dict[str, Any]]:
    """
    Admin view: every booking, oldest first, with listing title and guest
    name/email flattened in.
    """
    stmt = (
        select(
            Booking.id,
            Booking.listing_id,
            Booking.user_id,
            Booking.check_in,
            Booking.check_out,
            Booking.guests,
            Booking.total_price,
            Booking.status,
            Booking.created_at,
            Booking.updated_at,
            Listing.title.label("listing_title"),
            User.name.label("user_name"),
            User.email.label("user_email"),
        )
        .outerjoin(Listing, Listing.id == Booking.listing_id)
        .outerjoin(User, User.id == Booking.user_id)
        .order_by(Booking.created_at.asc())
    )
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]


async def transition_booking(
    db: AsyncSession,
    booking_id: str,
    target: BookingStatus,
) -> Booking | None:
    """
    Move a booking to ``target`` if the state machine allows it.

    The UPDATE is guarded on the status observed at read time, so of two
    concurrent transitions only one can win; the loser gets
    InvalidTransitionError. Returns None when the booking does not exist.
    """
    booking = await get_booking(db, booking_id)
    if booking is None:
        return None

    current = booking.status
    booking_state.assert_transition(current, target)

    now = datetime.utcnow()
    res = await db.execute(
        update(Booking)
        .where(Booking.id == booking_id, Booking.status == current)
        .values(status=target.value, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    if res.rowcount == 0:
        await db.refresh(booking)
        booking_state.assert_transition(booking.status, target)

    await db.refresh(booking)
    return booking
