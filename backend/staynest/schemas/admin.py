# staynest/schemas/admin.py
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict

from staynest.schemas.base import APIModel


class ReportDeleted(APIModel):
    message: str
    report_id: str


class ReportRequest(APIModel):
    type: Optional[str] = None
    format: Optional[str] = None
    time_range: Optional[str] = None


class ReportOut(APIModel):
    id: str
    type: str
    title: str
    created_at: datetime
    status: str = "completed"
    format: str
    time_range: str
    summary: int


class StatusCount(APIModel):
    status: str
    count: int


class MonthlyBookings(APIModel):
    month: str
    bookings: int


class MonthlyRevenue(APIModel):
    month: str
    revenue: int


class TopListing(APIModel):
    listing_id: str
    title: str
    address: str
    bookings: int


class AnalyticsOut(APIModel):
    time_range: str
    total_revenue: int
    bookings_last_month: int
    new_users_last_month: int
    bookings_by_status: List[StatusCount]
    bookings_by_month: List[MonthlyBookings]
    revenue_by_month: List[MonthlyRevenue]
    top_listings: List[TopListing]


class SiteSettings(APIModel):
    site_name: str
    contact_email: str
    support_phone: str
    maintenance_mode: bool
    commission_rate: int
    currency_symbol: str
    default_language: str
    featured_listings_count: int


class SiteSettingsUpdate(APIModel):
    # unknown keys are echoed back untouched
    model_config = ConfigDict(extra="allow")

    site_name: Optional[str] = None
    contact_email: Optional[str] = None


class SettingsUpdated(APIModel):
    message: str
    settings: dict
