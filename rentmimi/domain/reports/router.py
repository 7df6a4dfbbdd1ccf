"""
API endpoints for dashboard analytics
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...auth import require_role
from ...schemas import User
from ...store import DataStore, get_store
from .service import MonthlyStats, PartnerActivity, ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(store: DataStore = Depends(get_store)) -> ReportService:
    return ReportService(store)


@router.get("/monthly", response_model=MonthlyStats)
async def get_monthly_stats(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$"),
    _admin: User = Depends(require_role("admin")),
    service: ReportService = Depends(get_report_service),
):
    """Revenue, partner payouts and net profit for a month (default: current)"""
    return service.monthly_stats(month or date.today().strftime("%Y-%m"))


@router.get("/activity", response_model=PartnerActivity)
async def get_my_activity(
    current_user: User = Depends(require_role("partner")),
    service: ReportService = Depends(get_report_service),
):
    """Partner: completed dates, rating and progress toward the next grade"""
    application = service.store.find_application_by_phone(current_user.phone)
    if not application:
        raise HTTPException(status_code=404, detail="No partner application for this account")
    return service.partner_activity(application)
