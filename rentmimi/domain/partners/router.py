"""Partner router - FastAPI endpoints for the partner roster"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...auth import get_current_user, require_role
from ...schemas import PartnerApplication, User
from ...store import DataStore, get_store
from .schemas import (
    AvailableDatesUpdate,
    GradeUpdate,
    PartnerApplicationSubmit,
    PartnerListing,
    PublicProfileUpdate,
)
from .service import PartnerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/partners", tags=["Partners"])


def get_partner_service(store: DataStore = Depends(get_store)) -> PartnerService:
    """Dependency injection for PartnerService"""
    return PartnerService(store)


# ============================================================================
# PUBLIC LISTINGS
# ============================================================================


@router.get("", response_model=list[PartnerListing])
async def search_partners(
    search: Optional[str] = Query(None),
    available_only: bool = Query(False, alias="availableOnly"),
    styles: Optional[list[str]] = Query(None),
    lat: Optional[float] = Query(None),
    lon: Optional[float] = Query(None),
    service: PartnerService = Depends(get_partner_service),
):
    """Find partners by name/region, today's availability, style and distance"""
    if (lat is None) != (lon is None):
        raise HTTPException(status_code=400, detail="lat and lon must be given together")
    origin = (lat, lon) if lat is not None else None
    return service.search(search, available_only, styles, origin)


@router.get("/recommended", response_model=list[PartnerListing])
async def list_recommended(service: PartnerService = Depends(get_partner_service)):
    return service.list_recommended()


# ============================================================================
# PARTNER SELF-SERVICE
# ============================================================================


@router.post("/applications", response_model=PartnerApplication, status_code=201)
async def submit_application(
    data: PartnerApplicationSubmit,
    current_user: User = Depends(get_current_user),
    service: PartnerService = Depends(get_partner_service),
):
    """Apply to become a partner; the partner role is granted immediately"""
    return service.submit_application(data, current_user)


@router.get("/me", response_model=PartnerApplication)
async def get_my_application(
    current_user: User = Depends(require_role("partner")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.get_own_application(current_user)


@router.put("/me", response_model=PartnerApplication)
async def update_my_profile(
    data: PartnerApplicationSubmit,
    current_user: User = Depends(require_role("partner")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.update_own_profile(data, current_user)


@router.post("/me/availability/toggle", response_model=PartnerApplication)
async def toggle_availability(
    current_user: User = Depends(require_role("partner")),
    service: PartnerService = Depends(get_partner_service),
):
    """Switch whether admins may assign new bookings to this partner"""
    return service.toggle_availability(current_user)


@router.put("/me/available-dates", response_model=PartnerApplication)
async def set_available_dates(
    data: AvailableDatesUpdate,
    current_user: User = Depends(require_role("partner")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.set_available_dates(current_user, data.availableDates)


# ============================================================================
# ADMIN
# ============================================================================


@router.get("/applications", response_model=list[PartnerApplication])
async def list_applications(
    bookable_only: bool = Query(False, alias="bookableOnly"),
    _admin: User = Depends(require_role("admin")),
    service: PartnerService = Depends(get_partner_service),
):
    """Admin: all applications, or only those open for assignment"""
    if bookable_only:
        return service.bookable_applications()
    return service.store.partner_applications.all()


@router.get("/applications/{application_id}", response_model=PartnerApplication)
async def get_application(
    application_id: str,
    _admin: User = Depends(require_role("admin")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.get_application(application_id)


@router.put("/applications/{application_id}/grade", response_model=PartnerApplication)
async def set_grade(
    application_id: str,
    data: GradeUpdate,
    _admin: User = Depends(require_role("admin")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.set_grade(application_id, data.grade)


@router.post("/applications/{application_id}/recommend", response_model=PartnerApplication)
async def toggle_recommendation(
    application_id: str,
    _admin: User = Depends(require_role("admin")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.toggle_recommendation(application_id)


@router.put("/applications/{application_id}/public-profile", response_model=PartnerApplication)
async def set_public_profile(
    application_id: str,
    data: PublicProfileUpdate,
    _admin: User = Depends(require_role("admin")),
    service: PartnerService = Depends(get_partner_service),
):
    return service.set_public_profile(application_id, data)
