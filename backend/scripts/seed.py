# scripts/seed.py
import asyncio
import random
from datetime import datetime, timedelta

from staynest.db.base import Base
from staynest.db.session import AsyncSessionLocal, engine
from staynest.db.crud_users import create_user, get_user_by_email
from staynest.db.crud_listings import create_listing, set_listing_status
from staynest.db.crud_bookings import count_nights, create_booking
from staynest.db.models import ListingStatus, PropertyType, UserRole


async def seed():
    # create tables (if the app has not started yet)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        admin = await get_user_by_email(db, "admin@example.com")
        if not admin:
            await create_user(
                db, name="Admin", email="admin@example.com",
                password="admin123", role=UserRole.ADMIN.value,
            )

        guest = await get_user_by_email(db, "user@example.com")
        if not guest:
            guest = await create_user(db, name="Regular User", email="user@example.com", password="user123")

        host = await get_user_by_email(db, "host@example.com")
        if not host:
            host = await create_user(db, name="Host User", email="host@example.com", password="host123")

        cities = [("Istanbul", 41.01, 28.97), ("Izmir", 38.42, 27.14), ("Antalya", 36.89, 30.71)]
        listings = []
        for i in range(10):
            city, lat, lng = random.choice(cities)
            listing = await create_listing(
                db,
                host_id=host.id,
                title=f"Stay {i} in {city}",
                description="Bright place close to the centre",
                address=f"{city}, Street {i}",
                latitude=lat,
                longitude=lng,
                price=800 + i * 50,
                property_type=random.choice(list(PropertyType)).value,
            )
            await set_listing_status(db, listing.id, ListingStatus.ACTIVE.value)
            listings.append(listing)

        start = datetime.utcnow() + timedelta(days=14)
        for i, listing in enumerate(listings[:3]):
            check_in = start + timedelta(days=i * 5)
            check_out = check_in + timedelta(days=3)
            await create_booking(
                db,
                user_id=guest.id,
                listing_id=listing.id,
                check_in=check_in,
                check_out=check_out,
                guests=2,
                total_price=count_nights(check_in, check_out) * listing.price,
            )
        print("Seed complete")


if __name__ == "__main__":
    asyncio.run(seed())
