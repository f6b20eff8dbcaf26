# staynest/db/crud_analytics.py
from datetime import datetime
from typing import List, Dict, Any

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from staynest.db.models import Booking, BookingStatus, Listing, User


def month_start(year: int, month: int) -> datetime:
    # month may run outside 1..12; carry into the year
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1)


def month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


async def total_revenue(db: AsyncSession) -> int:
    res = await db.execute(
        select(func.coalesce(func.sum(Booking.total_price), 0)).where(
            Booking.status != BookingStatus.CANCELLED.value
        )
    )
    return int(res.scalar_one())


async def revenue_between(db: AsyncSession, start: datetime, end: datetime) -> int:
    res = await db.execute(
        select(func.coalesce(func.sum(Booking.total_price), 0)).where(
            Booking.status != BookingStatus.CANCELLED.value,
            Booking.created_at >= start,
            Booking.created_at < end,
        )
    )
    return int(res.scalar_one())


async def count_bookings_between(db: AsyncSession, start: datetime, end: datetime) -> int:
    res = await db.execute(
        select(func.count(Booking.id)).where(
            Booking.created_at >= start,
            Booking.created_at < end,
        )
    )
    return int(res.scalar_one())


async def count_users_between(db: AsyncSession, start: datetime, end: datetime) -> int:
    res = await db.execute(
        select(func.count(User.id)).where(
            User.created_at >= start,
            User.created_at < end,
        )
    )
    return int(res.scalar_one())


async def count_listings_between(db: AsyncSession, start: datetime, end: datetime) -> int:
    res = await db.execute(
        select(func.count(Listing.id)).where(
            Listing.created_at >= start,
            Listing.created_at < end,
        )
    )
    return int(res.scalar_one())


async def bookings_by_status(db: AsyncSession) -> List[Dict[str, Any]]:
    res = await db.execute(
        select(Booking.status, func.count(Booking.id).label("count")).group_by(
            Booking.status
        )
    )
    counts = {r.status: int(r.count) for r in res.all()}
    # every status is reported, zero or not
    return [{"status": s.value, "count": counts.get(s.value, 0)} for s in BookingStatus]


async def monthly_bookings(
    db: AsyncSession, start: datetime, end: datetime
) -> Dict[str, Dict[str, int]]:
    """
    Booking count and revenue per calendar month in [start, end).
    Bucketed in Python so the query stays dialect neutral.
    """
    res = await db.execute(
        select(Booking.created_at, Booking.total_price, Booking.status).where(
            Booking.created_at >= start,
            Booking.created_at < end,
        )
    )
    buckets: Dict[str, Dict[str, int]] = {}
    for created_at, total_price, status in res.all():
        bucket = buckets.setdefault(month_key(created_at), {"bookings": 0, "revenue": 0})
        bucket["bookings"] += 1
        if status != BookingStatus.CANCELLED.value:
            bucket["revenue"] += int(total_price)
    return buckets


async def top_listings(
    db: AsyncSession, start: datetime, end: datetime, limit: int = 5
) -> List[Dict[str, Any]]:
    stmt = (
        select(
            Listing.id.label("listing_id"),
            Listing.title,
            Listing.address,
            func.count(Booking.id).label("bookings"),
        )
        .join(Booking, Booking.listing_id == Listing.id)
        .where(Booking.created_at >= start, Booking.created_at < end)
        .group_by(Listing.id, Listing.title, Listing.address)
        .order_by(func.count(Booking.id).desc())
        .limit(limit)
    )
    res = await db.execute(stmt)
    return [dict(row) for row in res.mappings().all()]
