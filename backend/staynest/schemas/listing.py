# staynest/schemas/listing.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from staynest.db.models import PropertyType
from staynest.schemas.base import APIModel
from staynest.schemas.image import ImageOut


class HostInfo(APIModel):
    id: str
    name: str
    email: str


class ListingOut(APIModel):
    id: str
    host_id: str
    title: str
    description: str
    address: str
    latitude: float
    longitude: float
    price: int
    property_type: str
    status: str
    created_at: datetime
    updated_at: datetime


class ListingDetail(ListingOut):
    host: Optional[HostInfo] = None
    images: List[ImageOut] = []


class NearbyListing(APIModel):
    id: str
    title: str
    price: int
    address: str
    latitude: float
    longitude: float
    property_type: str
    image_path: Optional[str] = None


class ListingCreate(APIModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    address: str = Field(min_length=1)
    latitude: float
    longitude: float
    price: int = Field(ge=0)
    property_type: PropertyType


# PUT replaces every editable field
ListingUpdate = ListingCreate


class ListingCreated(APIModel):
    success: bool = True
    id: str


class AdminListingRow(APIModel):
    id: str
    title: str
    description: str
    price: int
    created_at: datetime
    updated_at: datetime
    host_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    property_type: str
    address: str
    status: str


class ListingActionRequest(APIModel):
    action: Optional[str] = None
