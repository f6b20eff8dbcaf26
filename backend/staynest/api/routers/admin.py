import logging
from datetime import datetime, timedelta
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from staynest.api.dependencies import AdminUser, DbSession, admin_body
from staynest.core.config import get_settings
from staynest.core.errors import InternalError, InvalidInputError, NotFoundError
from staynest.db import crud_analytics, crud_bookings, crud_listings, crud_users
from staynest.db.models import ListingStatus
from staynest.domain import booking_state
from staynest.schemas.admin import (
    AnalyticsOut,
    ReportDeleted,
    ReportOut,
    ReportRequest,
    SettingsUpdated,
    SiteSettings,
    SiteSettingsUpdate,
)
from staynest.schemas.base import MessageOut
from staynest.schemas.booking import AdminBookingRow, BookingActionRequest
from staynest.schemas.listing import AdminListingRow, ListingActionRequest
from staynest.schemas.user import PromoteOut, UserOut

logger = logging.getLogger("uvicorn.error")

router = APIRouter()

# Bodies are read only after the admin gate has passed
BookingAction = Annotated[BookingActionRequest, Depends(admin_body(BookingActionRequest))]
ListingAction = Annotated[ListingActionRequest, Depends(admin_body(ListingActionRequest))]
ReportBody = Annotated[ReportRequest, Depends(admin_body(ReportRequest))]
SettingsBody = Annotated[SiteSettingsUpdate, Depends(admin_body(SiteSettingsUpdate))]


# ---------------------------
# Bookings
# ---------------------------

@router.get("/bookings", response_model=List[AdminBookingRow])
async def admin_bookings(db: DbSession, admin: AdminUser):
    try:
        return await crud_bookings.list_bookings_with_details(db)
    except SQLAlchemyError:
        logger.exception("Error fetching bookings")
        raise InternalError()


@router.patch("/bookings/{booking_id}", response_model=MessageOut)
async def admin_update_booking(
    booking_id: str,
    body: BookingAction,
    db: DbSession,
    admin: AdminUser,
):
    """
    Confirm or cancel a PENDING booking.
    """
    target = booking_state.target_status(body.action)
    try:
        booking = await crud_bookings.transition_booking(db, booking_id, target)
    except SQLAlchemyError:
        logger.exception("Error updating booking %s", booking_id)
        raise InternalError()
    if booking is None:
        raise NotFoundError("Booking not found")

    logger.info("booking %s %s by admin %s", booking_id, target.value, admin.id)
    return {"message": f"Booking {booking_state.ACTION_VERBS[body.action]} successfully"}


# ---------------------------
# Listings
# ---------------------------

LISTING_ACTIONS = {
    "approve": (ListingStatus.ACTIVE, "approved"),
    "reject": (ListingStatus.REJECTED, "rejected"),
}


@router.get("/listings", response_model=List[AdminListingRow])
async def admin_listings(db: DbSession, admin: AdminUser):
    try:
        return await crud_listings.list_listings_with_host(db)
    except SQLAlchemyError:
        logger.exception("Error fetching listings")
        raise InternalError()


@router.patch("/listings/{listing_id}", response_model=MessageOut)
async def admin_update_listing(
    listing_id: str,
    body: ListingAction,
    db: DbSession,
    admin: AdminUser,
):
    """
    Moderate a listing: approve makes it public, reject hides it, delete
    removes it together with its bookings.
    """
    if body.action != "delete" and body.action not in LISTING_ACTIONS:
        raise InvalidInputError("Invalid action")

    try:
        if body.action == "delete":
            affected = await crud_listings.delete_listing(db, listing_id)
            verb = "deleted"
        else:
            status, verb = LISTING_ACTIONS[body.action]
            affected = await crud_listings.set_listing_status(db, listing_id, status.value)
    except SQLAlchemyError:
        logger.exception("Error moderating listing %s", listing_id)
        raise InternalError()

    if not affected:
        raise NotFoundError("Listing not found")
    return {"message": f"Listing {verb} successfully"}


# ---------------------------
# Users
# ---------------------------

@router.get("/users", response_model=List[UserOut])
async def admin_users(db: DbSession, admin: AdminUser):
    try:
        return await crud_users.list_users(db)
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise InternalError()


@router.post("/users/{user_id}/promote", response_model=PromoteOut)
async def admin_promote_user(user_id: str, db: DbSession, admin: AdminUser):
    try:
        await crud_users.promote_user(db, user_id)
    except SQLAlchemyError:
        logger.exception("Error promoting user %s to admin", user_id)
        raise InternalError()
    return {"success": True}


# ---------------------------
# Analytics
# ---------------------------

ANALYTICS_RANGES = {
    "last3Months": 3,
    "last6Months": 6,
    "lastYear": 12,
}


@router.get("/analytics", response_model=AnalyticsOut)
async def admin_analytics(
    db: DbSession,
    admin: AdminUser,
    time_range: str = Query("last6Months", alias="timeRange"),
):
    if time_range not in ANALYTICS_RANGES:
        time_range = "last6Months"
    months = ANALYTICS_RANGES[time_range]

    now = datetime.utcnow()
    this_month = crud_analytics.month_start(now.year, now.month)
    last_month = crud_analytics.month_start(now.year, now.month - 1)
    range_start = crud_analytics.month_start(now.year, now.month - (months - 1))
    month_keys = [
        crud_analytics.month_key(crud_analytics.month_start(range_start.year, range_start.month + i))
        for i in range(months)
    ]

    try:
        revenue = await crud_analytics.total_revenue(db)
        bookings_last_month = await crud_analytics.count_bookings_between(db, last_month, this_month)
        new_users = await crud_analytics.count_users_between(db, last_month, this_month)
        by_status = await crud_analytics.bookings_by_status(db)
        monthly = await crud_analytics.monthly_bookings(db, range_start, now + timedelta(seconds=1))
        top = await crud_analytics.top_listings(db, range_start, now + timedelta(seconds=1))
    except SQLAlchemyError:
        logger.exception("Error fetching analytics")
        raise InternalError()

    empty = {"bookings": 0, "revenue": 0}
    return {
        "time_range": time_range,
        "total_revenue": revenue,
        "bookings_last_month": bookings_last_month,
        "new_users_last_month": new_users,
        "bookings_by_status": by_status,
        "bookings_by_month": [
            {"month": k, "bookings": monthly.get(k, empty)["bookings"]} for k in month_keys
        ],
        "revenue_by_month": [
            {"month": k, "revenue": monthly.get(k, empty)["revenue"]} for k in month_keys
        ],
        "top_listings": top,
    }


# ---------------------------
# Reports
# ---------------------------

REPORT_TYPES = {
    "bookings": ("Bookings", crud_analytics.count_bookings_between),
    "revenue": ("Revenue", crud_analytics.revenue_between),
    "users": ("New Users", crud_analytics.count_users_between),
    "listings": ("Listing Activity", crud_analytics.count_listings_between),
}

REPORT_FORMATS = {"pdf", "excel", "csv"}

REPORT_RANGES = {
    "lastWeek": ("Last Week", timedelta(days=7)),
    "lastMonth": ("Last Month", timedelta(days=30)),
    "lastQuarter": ("Last Quarter", timedelta(days=91)),
    "lastYear": ("Last Year", timedelta(days=365)),
}


@router.get("/reports", response_model=List[ReportOut])
async def admin_reports(admin: AdminUser):
    # reports are generated on demand and never stored
    return []


@router.post("/reports", response_model=ReportOut)
async def admin_generate_report(body: ReportBody, db: DbSession, admin: AdminUser):
    if not body.type or not body.format or not body.time_range:
        raise InvalidInputError("Missing required fields")
    if body.type not in REPORT_TYPES:
        raise InvalidInputError("Invalid report type")
    if body.format not in REPORT_FORMATS:
        raise InvalidInputError("Invalid report format")
    if body.time_range not in REPORT_RANGES:
        raise InvalidInputError("Invalid time range")

    label, compute = REPORT_TYPES[body.type]
    range_label, span = REPORT_RANGES[body.time_range]
    now = datetime.utcnow()

    try:
        summary = await compute(db, now - span, now + timedelta(seconds=1))
    except SQLAlchemyError:
        logger.exception("Error generating %s report", body.type)
        raise InternalError()

    return {
        "id": str(int(now.timestamp() * 1000)),
        "type": body.type,
        "title": f"{label} Report - {range_label}",
        "created_at": now,
        "status": "completed",
        "format": body.format,
        "time_range": body.time_range,
        "summary": summary,
    }


@router.delete("/reports/{report_id}", response_model=ReportDeleted)
async def admin_delete_report(report_id: str, admin: AdminUser):
    # nothing is persisted for reports, so there is nothing to remove
    return {"message": "Report deleted successfully", "report_id": report_id}


# ---------------------------
# Settings
# ---------------------------

@router.get("/settings", response_model=SiteSettings)
async def admin_settings(admin: AdminUser):
    settings = get_settings()
    return {
        "site_name": settings.SITE_NAME,
        "contact_email": settings.CONTACT_EMAIL,
        "support_phone": settings.SUPPORT_PHONE,
        "maintenance_mode": settings.MAINTENANCE_MODE,
        "commission_rate": settings.COMMISSION_RATE,
        "currency_symbol": settings.CURRENCY_SYMBOL,
        "default_language": settings.DEFAULT_LANGUAGE,
        "featured_listings_count": settings.FEATURED_LISTINGS_COUNT,
    }


@router.post("/settings", response_model=SettingsUpdated)
async def admin_update_settings(body: SettingsBody, admin: AdminUser):
    if not body.site_name or not body.contact_email:
        raise InvalidInputError(
            "Missing required fields: Site name and contact email are required"
        )
    # settings come from configuration; the payload is echoed, not stored
    return {
        "message": "Settings updated successfully",
        "settings": body.model_dump(by_alias=True),
    }
