# staynest/schemas/review.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from staynest.schemas.base import APIModel


class ReviewCreate(APIModel):
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    booking_id: Optional[str] = None
    listing_id: Optional[str] = None


class ReviewOut(APIModel):
    id: str
    rating: int
    comment: str
    created_at: datetime
    user_name: Optional[str] = None


class ReviewCreated(APIModel):
    id: str
