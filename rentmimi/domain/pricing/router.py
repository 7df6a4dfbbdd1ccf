"""Pricing router - price list and quotes"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ...schemas import BookingOptions
from ...shared.validators import parse_duration_hours
from .calculator import DATE_OPTIONS, PLANS, calculate_total_cost

router = APIRouter(prefix="/pricing", tags=["Pricing"])


class QuoteRequest(BaseModel):
    plan: str
    duration: str
    options: BookingOptions = Field(default_factory=BookingOptions)


class QuoteResponse(BaseModel):
    plan: str
    duration: int
    totalCost: int


@router.get("/catalog")
async def get_catalog():
    """Plans (hourly) and flat option surcharges"""
    return {
        "plans": [{"key": key, **plan} for key, plan in PLANS.items()],
        "options": [{"key": key, "price": price} for key, price in DATE_OPTIONS.items()],
    }


@router.post("/quote", response_model=QuoteResponse)
async def quote(data: QuoteRequest):
    try:
        hours = parse_duration_hours(data.duration)
        total = calculate_total_cost(data.plan, hours, data.options.selected())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return QuoteResponse(plan=data.plan, duration=hours, totalCost=total)
