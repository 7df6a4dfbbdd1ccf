"""User router - FastAPI endpoints for users"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...auth import get_current_user, require_role
from ...schemas import Booking, User
from ...services.notification_service import NotificationService, get_notification_service
from ...store import DataStore, get_store
from .schemas import CustomerSummary, SignUpRequest, UserResponse
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(store: DataStore = Depends(get_store)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(store)


def to_response(user: User) -> UserResponse:
    return UserResponse(phone=user.phone, nickname=user.nickname, region=user.region, roles=list(user.roles))


@router.post("", response_model=UserResponse, status_code=201)
async def sign_up(data: SignUpRequest, service: UserService = Depends(get_user_service)):
    """Register a phone-verified user as a client"""
    return to_response(service.sign_up(data))


@router.get("/exists/{phone}")
async def user_exists(phone: str, service: UserService = Depends(get_user_service)):
    """Check whether a phone number already has an account"""
    return {"exists": service.user_exists(phone)}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return to_response(current_user)


@router.get("/customers", response_model=list[CustomerSummary])
async def list_customers(
    search: Optional[str] = Query(None),
    _admin: User = Depends(require_role("admin")),
    service: UserService = Depends(get_user_service),
):
    """Admin: clients with booking totals"""
    return service.list_customers(search)


@router.get("/customers/{phone}/bookings", response_model=list[Booking])
async def get_customer_bookings(
    phone: str,
    _admin: User = Depends(require_role("admin")),
    service: UserService = Depends(get_user_service),
):
    """Admin: one client's bookings, newest first"""
    service.get_user(phone)
    return service.get_customer_bookings(phone)


@router.get("/me/notifications")
async def get_my_notifications(
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Recent workflow notifications addressed to the current user"""
    return [asdict(n) for n in notifier.recent(current_user.phone, limit)]
