from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from staynest.api.dependencies import DbSession, resolve_session, security
from staynest.core.errors import InternalError
from staynest.schemas.auth import SessionEnvelope
from staynest.schemas.user import UserOut

router = APIRouter()


@router.get("/session", response_model=SessionEnvelope)
async def get_session(
    db: DbSession,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """
    Current session or ``{"data": null}``; never an error, not even when
    the user lookup fails.
    """
    try:
        session = await resolve_session(db, credentials)
    except InternalError:
        session = None

    if session is None:
        return {"data": None}
    return {
        "data": {
            "user": UserOut.model_validate(session.user),
            "expires_at": session.expires_at,
        }
    }
