# staynest/schemas/auth.py
from datetime import datetime
from typing import Optional

from staynest.schemas.base import APIModel
from staynest.schemas.user import UserOut


class Token(APIModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: Optional[UserOut] = None


class RefreshRequest(APIModel):
    refresh_token: Optional[str] = None


class SessionOut(APIModel):
    user: UserOut
    expires_at: datetime


class SessionEnvelope(APIModel):
    data: Optional[SessionOut] = None


class AdminCheckOut(APIModel):
    is_admin: bool
