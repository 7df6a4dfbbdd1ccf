"""Payout router - partner settlement endpoints"""

import logging

from fastapi import APIRouter, Depends

from ...auth import require_role
from ...schemas import User
from ...store import DataStore, get_store
from .schemas import PartnerPayoutSummary, PayoutLine
from .service import PayoutService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payouts", tags=["Payouts"])


def get_payout_service(store: DataStore = Depends(get_store)) -> PayoutService:
    """Dependency injection for PayoutService"""
    return PayoutService(store)


@router.get("/pending", response_model=list[PayoutLine])
async def get_pending_payouts(
    _admin: User = Depends(require_role("admin")),
    service: PayoutService = Depends(get_payout_service),
):
    """Admin: completed dates whose partner has not been paid yet"""
    return service.pending_payouts()


@router.post("/{booking_id}/complete", response_model=PayoutLine)
async def mark_payout_completed(
    booking_id: str,
    _admin: User = Depends(require_role("admin")),
    service: PayoutService = Depends(get_payout_service),
):
    """Admin: record the bank transfer to the partner"""
    return service.mark_completed(booking_id)


@router.get("/me", response_model=PartnerPayoutSummary)
async def get_my_payouts(
    current_user: User = Depends(require_role("partner")),
    service: PayoutService = Depends(get_payout_service),
):
    return service.partner_summary(current_user)
