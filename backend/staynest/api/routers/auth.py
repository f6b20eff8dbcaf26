# staynest/api/routers/auth.py
import logging
from typing import Dict, Any, Optional

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from jose import JWTError

from staynest.api.dependencies import CurrentSession, DbSession
from staynest.core.errors import InvalidInputError, NotAuthenticatedError
from staynest.db import crud_users
from staynest.schemas.auth import AdminCheckOut, RefreshRequest, Token
from staynest.schemas.user import UserCreate, UserLogin, UserOut
from staynest.core.security import (
    create_access_token,
    create_refresh_token,
    verify_password,
    verify_refresh_token,
)

logger = logging.getLogger("uvicorn.error")

router = APIRouter()


async def _issue_tokens(db, user) -> Dict[str, Any]:
    """
    Mint a session/refresh pair, persist the refresh token and build the
    Token payload.
    """
    data = {"sub": user.id, "role": user.role}
    access = create_access_token(data)
    refresh = create_refresh_token(data)
    await crud_users.save_refresh_token(db, user.id, refresh)
    return {
        "access_token": access,
        "refresh_token": refresh,
        "token_type": "bearer",
        "user": UserOut.model_validate(user),
    }


@router.post("/register", response_model=Token)
async def register(payload: UserCreate, db: DbSession):
    existing = await crud_users.get_user_by_email(db, payload.email)
    if existing:
        raise InvalidInputError("Email exists")

    user = await crud_users.create_user(
        db=db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    logger.info("registered user %s", user.id)
    return await _issue_tokens(db, user)


@router.post("/login", response_model=Token)
async def login(payload: UserLogin, db: DbSession):
    if not payload.email or not payload.password:
        raise InvalidInputError("Missing email or password")

    user = await crud_users.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        raise NotAuthenticatedError("Invalid credentials")

    return await _issue_tokens(db, user)


@router.post("/refresh", response_model=Token)
async def refresh(body: RefreshRequest, db: DbSession):
    token = body.refresh_token
    if not token:
        raise InvalidInputError("Missing token")

    try:
        payload = verify_refresh_token(token)
    except JWTError:
        raise NotAuthenticatedError("Invalid refresh token")

    if not await crud_users.is_refresh_token_active(db, token):
        raise NotAuthenticatedError("Refresh token revoked")

    user = await crud_users.get_user(db, str(payload["sub"]))
    if not user:
        raise NotAuthenticatedError("User not found")

    return await _issue_tokens(db, user)


@router.post("/logout")
async def logout(db: DbSession, body: Optional[RefreshRequest] = Body(None)):
    token = body.refresh_token if body else None
    if token:
        await crud_users.revoke_refresh_token(db, token)
    return {"ok": True}


@router.get("/verify-admin", response_model=AdminCheckOut)
async def verify_admin(session: CurrentSession):
    if session is None:
        return JSONResponse(
            status_code=401, content={"error": "Unauthorized", "isAdmin": False}
        )
    if not session.is_admin:
        return JSONResponse(
            status_code=403, content={"error": "Forbidden", "isAdmin": False}
        )
    return {"is_admin": True}
