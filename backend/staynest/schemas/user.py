# staynest/schemas/user.py
from datetime import datetime

from pydantic import EmailStr

from staynest.schemas.base import APIModel


class UserOut(APIModel):
    id: str
    name: str
    email: str
    role: str
    created_at: datetime


class UserCreate(APIModel):
    name: str
    email: EmailStr
    password: str


class UserLogin(APIModel):
    email: str | None = None
    password: str | None = None


class PromoteOut(APIModel):
    success: bool = True
