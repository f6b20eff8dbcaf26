# staynest/schemas/booking.py
from datetime import datetime, timezone
from typing import Optional

from pydantic import field_validator

from staynest.schemas.base import APIModel


class BookingCreate(APIModel):
    listing_id: str
    check_in: datetime
    check_out: datetime
    guests: int

    @field_validator("check_in", "check_out")
    @classmethod
    def to_naive_utc(cls, value: datetime) -> datetime:
        # stored as naive UTC
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class BookingCreated(APIModel):
    id: str
    total_price: int


class BookingOut(APIModel):
    id: str
    listing_id: str
    user_id: str
    check_in: datetime
    check_out: datetime
    guests: int
    total_price: int
    status: str
    created_at: datetime
    updated_at: datetime


class UserBookingRow(APIModel):
    id: str
    listing_id: str
    check_in: datetime
    check_out: datetime
    guests: int
    total_price: int
    status: str
    title: Optional[str] = None
    address: Optional[str] = None
    price: Optional[int] = None


class AdminBookingRow(BookingOut):
    listing_title: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class BookingActionRequest(APIModel):
    """
    body: { "action": "confirm" | "cancel" }
    Left as a plain string so an unknown action is answered with
    "Invalid action" rather than a schema error.
    """
    action: Optional[str] = None
