# staynest/db/crud_users.py

from typing import Optional, List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staynest.db.models import User, UserRefreshToken, UserRole
from staynest.core.security import get_password_hash


async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def list_users(db: AsyncSession) -> List[User]:
    res = await db.execute(select(User).order_by(User.created_at.asc()))
    return list(res.scalars().all())


async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: str = UserRole.USER.value,
) -> User:
    """
    Create a user with hashed password.
    """
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def promote_user(db: AsyncSession, user_id: str) -> int:
    """
    Unconditional role update; promoting twice (or a missing id) is a no-op
    in effect. Returns the affected row count.
    """
    res = await db.execute(
        update(User).where(User.id == user_id).values(role=UserRole.ADMIN.value)
    )
    await db.commit()
    return res.rowcount


async def save_refresh_token(db: AsyncSession, user_id: str, token: str) -> None:
    """
    Store a new refresh token for the user, revoking any still active.
    """
    await db.execute(
        update(UserRefreshToken)
        .where(UserRefreshToken.user_id == user_id, UserRefreshToken.revoked == False)  # noqa: E712
        .values(revoked=True)
    )

    db.add(UserRefreshToken(user_id=user_id, token=token))
    await db.commit()


async def is_refresh_token_active(db: AsyncSession, token: str) -> bool:
    res = await db.execute(
        select(UserRefreshToken.id).where(
            UserRefreshToken.token == token,
            UserRefreshToken.revoked == False,  # noqa: E712
        )
    )
    return res.first() is not None


async def revoke_refresh_token(db: AsyncSession, token: str) -> None:
    await db.execute(
        update(UserRefreshToken)
        .where(UserRefreshToken.token == token, UserRefreshToken.revoked == False)  # noqa: E712
        .values(revoked=True)
    )
    await db.commit()
