"""User domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_kr_phone


class SignUpRequest(BaseModel):
    """Schema for registering a new user after phone verification"""

    phone: str
    nickname: str = Field(..., min_length=1, max_length=40)
    region: str = ""

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_kr_phone(v)


class UserResponse(BaseModel):
    phone: str
    nickname: str
    region: str
    roles: list[str]


class CustomerSummary(BaseModel):
    phone: str
    nickname: str
    region: str
    bookingCount: int
    completedCount: int
    totalSpent: int
    averageRatingGiven: Optional[float] = None
