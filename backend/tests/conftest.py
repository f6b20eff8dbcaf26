from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from staynest.core.security import create_access_token, get_password_hash
from staynest.db.base import Base
from staynest.db.models import Booking, BookingStatus, Listing, ListingStatus, User, UserRole
from staynest.db.session import enable_sqlite_foreign_keys, get_db
from staynest.main import app


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


async def reload(db: AsyncSession, model, obj_id):
    """
    Read a row back from the database, bypassing the session's identity map.
    """
    return await db.get(model, obj_id, populate_existing=True)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make(
        name: str | None = None,
        role: str = UserRole.USER.value,
        created_at: datetime | None = None,
        password: str = "secret123",
        email: str | None = None,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            hashed_password=get_password_hash(password),
            role=role,
            created_at=created_at or datetime(2024, 1, 1) + timedelta(minutes=n),
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest.fixture
async def admin(make_user):
    return await make_user(name="Admin", role=UserRole.ADMIN.value, email="admin@example.com")


@pytest.fixture
async def guest(make_user):
    return await make_user(name="Guest", email="guest@example.com")


@pytest.fixture
async def host(make_user):
    return await make_user(name="Host", email="host@example.com")


@pytest.fixture
def make_listing(db):
    counter = {"n": 0}

    async def _make(
        host: User,
        title: str | None = None,
        price: int = 100,
        status: str = ListingStatus.ACTIVE.value,
        property_type: str = "APARTMENT",
        created_at: datetime | None = None,
        description: str = "Quiet flat",
        address: str = "Istanbul",
        latitude: float = 41.0,
        longitude: float = 29.0,
    ) -> Listing:
        counter["n"] += 1
        n = counter["n"]
        listing = Listing(
            host_id=host.id,
            title=title or f"Listing {n}",
            description=description,
            address=address,
            latitude=latitude,
            longitude=longitude,
            price=price,
            property_type=property_type,
            status=status,
            created_at=created_at or datetime(2024, 2, 1) + timedelta(minutes=n),
        )
        db.add(listing)
        await db.commit()
        await db.refresh(listing)
        return listing

    return _make


@pytest.fixture
def make_booking(db):
    counter = {"n": 0}

    async def _make(
        user: User,
        listing: Listing,
        status: str = BookingStatus.PENDING.value,
        check_in: datetime | None = None,
        nights: int = 2,
        created_at: datetime | None = None,
        total_price: int | None = None,
    ) -> Booking:
        counter["n"] += 1
        n = counter["n"]
        check_in = check_in or datetime(2030, 1, 1) + timedelta(days=10 * n)
        booking = Booking(
            user_id=user.id,
            listing_id=listing.id,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            guests=2,
            total_price=total_price if total_price is not None else nights * listing.price,
            status=status,
            created_at=created_at or datetime(2024, 3, 1) + timedelta(minutes=n),
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        return booking

    return _make
