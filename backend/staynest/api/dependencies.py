# staynest/api/dependencies.py
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Optional, Type, TypeVar

from fastapi import Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staynest.core.errors import (
    InternalError,
    InvalidInputError,
    NotAuthenticatedError,
    UnauthorizedError,
)
from staynest.core.security import verify_access_token
from staynest.db import crud_users
from staynest.db.models import User, UserRole
from staynest.db.session import get_db

logger = logging.getLogger("uvicorn.error")
security = HTTPBearer(auto_error=False)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class SessionContext:
    """
    Identity of the caller for one request. Built once per request and
    handed to handlers explicitly.
    """

    user: User
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN.value


async def resolve_session(
    db: AsyncSession,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[SessionContext]:
    """
    Turn a bearer token into a session. A missing, bad or orphaned token
    gives None; a failing user lookup raises InternalError.
    """
    if credentials is None:
        return None

    try:
        payload = verify_access_token(credentials.credentials)
    except JWTError:
        logger.info("rejected session token")
        return None

    try:
        user = await crud_users.get_user(db, str(payload["sub"]))
    except SQLAlchemyError:
        logger.exception("session user lookup failed")
        raise InternalError()

    if user is None:
        return None

    return SessionContext(
        user=user,
        expires_at=datetime.utcfromtimestamp(payload["exp"]),
    )


async def get_current_session(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[SessionContext]:
    return await resolve_session(db, credentials)


async def get_current_user(
    session: Optional[SessionContext] = Depends(get_current_session),
) -> User:
    if session is None:
        raise NotAuthenticatedError()
    return session.user


async def require_admin(
    session: Optional[SessionContext] = Depends(get_current_session),
) -> User:
    """
    Admin gate. Anything short of an admin session is a 403, raised before
    the handler body (and therefore any store write) runs. The role comes
    from the users table, not the token claim.
    """
    if session is None or not session.is_admin:
        raise UnauthorizedError()
    return session.user


def admin_body(model: Type[ModelT]):
    """
    Body dependency for admin routes. It depends on the admin gate, so the
    request body is only read and validated for admin callers; everyone
    else gets the 403 whatever they sent.
    """

    async def _read_body(request: Request, admin: User = Depends(require_admin)) -> ModelT:
        raw = await request.body()
        try:
            data = json.loads(raw) if raw else {}
        except ValueError:
            raise InvalidInputError()
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(
                details=jsonable_encoder(exc.errors(include_url=False))
            )

    return _read_body


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentSession = Annotated[Optional[SessionContext], Depends(get_current_session)]
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
