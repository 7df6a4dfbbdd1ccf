"""Booking router - FastAPI endpoints for the booking lifecycle"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ...auth import get_current_user, require_role
from ...schemas import Booking, User
from ...services.notification_service import NotificationService, get_notification_service
from ...store import DataStore, get_store
from .schemas import (
    AdjustmentCreate,
    AdjustmentRespond,
    AssignPartnerRequest,
    BookingCreate,
    ChatMessageCreate,
    ExtensionQuoteRequest,
    ExtensionQuoteResponse,
    OutfitSubmit,
    ReviewCreate,
    StatusUpdate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(
    store: DataStore = Depends(get_store),
    notifier: NotificationService = Depends(get_notification_service),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(store, notifier)


# ============================================================================
# CORE OPERATIONS
# ============================================================================


@router.post("", response_model=Booking, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(require_role("client")),
    service: BookingService = Depends(get_booking_service),
):
    """Submit a booking request (status pending, price fixed at submission)"""
    return service.create_booking(data, current_user)


@router.get("", response_model=list[Booking])
async def list_bookings(
    view: Literal["client", "partner", "admin"] = Query("client"),
    status: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings for the client, partner or admin screen"""
    return service.list_bookings(current_user, view, status)


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_visible_booking(booking_id, current_user)


@router.post("/{booking_id}/status", response_model=Booking)
async def update_status(
    booking_id: str,
    data: StatusUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Approve, reject, confirm payment or complete a booking"""
    return service.update_status(booking_id, data.status, data.actingAs, current_user)


@router.post("/{booking_id}/assign", response_model=Booking)
async def assign_partner(
    booking_id: str,
    data: AssignPartnerRequest,
    _admin: User = Depends(require_role("admin")),
    service: BookingService = Depends(get_booking_service),
):
    """Admin: assign a partner open for bookings"""
    return service.assign_partner(booking_id, data.partnerApplicationId)


@router.post("/{booking_id}/extension-quote", response_model=ExtensionQuoteResponse)
async def quote_extension(
    booking_id: str,
    data: ExtensionQuoteRequest,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.quote_extension(booking_id, current_user, data.extensionHours)


# ============================================================================
# REVIEWS
# ============================================================================


@router.put("/{booking_id}/review", response_model=Booking)
async def add_review(
    booking_id: str,
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.add_review(booking_id, current_user, data)


@router.put("/{booking_id}/mimi-review", response_model=Booking)
async def add_mimi_review(
    booking_id: str,
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.add_mimi_review(booking_id, current_user, data)


@router.post("/{booking_id}/review/feature", response_model=Booking)
async def toggle_review_featured(
    booking_id: str,
    _admin: User = Depends(require_role("admin")),
    service: BookingService = Depends(get_booking_service),
):
    return service.toggle_review_featured(booking_id)


# ============================================================================
# CONFIRMED BOOKING EXTRAS
# ============================================================================


@router.put("/{booking_id}/outfit", response_model=Booking)
async def submit_outfit(
    booking_id: str,
    data: OutfitSubmit,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.submit_outfit(booking_id, current_user, data)


@router.post("/{booking_id}/messages", response_model=Booking)
async def send_message(
    booking_id: str,
    data: ChatMessageCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.send_message(booking_id, current_user, data)


@router.post("/{booking_id}/adjustment", response_model=Booking)
async def request_adjustment(
    booking_id: str,
    data: AdjustmentCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Ask to arrive late or move the meeting place"""
    return service.request_adjustment(booking_id, current_user, data)


@router.post("/{booking_id}/adjustment/respond", response_model=Booking)
async def respond_adjustment(
    booking_id: str,
    data: AdjustmentRespond,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.respond_adjustment(booking_id, current_user, data)
