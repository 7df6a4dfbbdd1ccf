"""Booking domain schemas - Pydantic models for validation"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...schemas import AdjustmentRequest, BookingOptions, Party
from ...shared.validators import parse_duration_hours, validate_date_string, validate_time_string
from ..pricing.calculator import DEFAULT_PLAN, PLANS


class BookingCreate(BaseModel):
    """Schema for a client's booking request"""

    date: str
    time: str = "14:00"
    duration: str = "2"
    plan: str = DEFAULT_PLAN
    location: str = Field(..., min_length=1)
    details: str = ""
    options: BookingOptions = Field(default_factory=BookingOptions)
    mimiApplicationId: Optional[str] = None
    agreeToTerms: bool = False

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return validate_date_string(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_time_string(v)

    @field_validator("duration", mode="before")
    @classmethod
    def validate_duration(cls, v):
        return str(parse_duration_hours(v))

    @field_validator("plan")
    @classmethod
    def validate_plan(cls, v):
        if v not in PLANS:
            raise ValueError(f"Unknown plan '{v}'")
        return v


class StatusUpdate(BaseModel):
    status: Literal["awaiting_payment", "approved", "rejected", "completed"]
    actingAs: Literal["admin", "partner"]


class AssignPartnerRequest(BaseModel):
    partnerApplicationId: str


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class OutfitSubmit(BaseModel):
    description: str = Field(..., min_length=1)
    photoUrl: Optional[str] = None
    actingAs: Optional[Party] = None


class ChatMessageCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    actingAs: Optional[Party] = None

    @field_validator("text")
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Message cannot be empty")
        return v


class AdjustmentCreate(BaseModel):
    """Either {"type": "time", "delayMinutes": 15} or {"type": "location", "location": "..."}"""

    request: AdjustmentRequest
    reason: Optional[str] = None
    actingAs: Optional[Party] = None


class AdjustmentRespond(BaseModel):
    response: Literal["accepted", "rejected"]
    actingAs: Optional[Party] = None


class ExtensionQuoteRequest(BaseModel):
    extensionHours: int = Field(..., ge=1, le=12)


class ExtensionQuoteResponse(BaseModel):
    bookingId: str
    plan: str
    hourlyRate: int
    extensionHours: int
    totalCost: int
