"""Partner domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...schemas import MimiGrade, PartnerApplicationData, PublicMimiProfile
from ...shared.validators import validate_date_string


class PartnerApplicationSubmit(PartnerApplicationData):
    """Schema for a new partner application; grade and booking flag are set by the server"""

    @field_validator("available_dates")
    @classmethod
    def validate_dates(cls, v):
        if v:
            return sorted({validate_date_string(d) for d in v})
        return v


class AvailableDatesUpdate(BaseModel):
    availableDates: list[str]

    @field_validator("availableDates")
    @classmethod
    def validate_dates(cls, v):
        return sorted({validate_date_string(d) for d in v})


class GradeUpdate(BaseModel):
    grade: MimiGrade


class PublicProfileUpdate(PublicMimiProfile):
    pass


class PartnerListing(BaseModel):
    """Public view of a partner; curated public profile wins over the raw form"""

    id: str
    name: str
    age: str
    region: str
    intro: str
    photo: Optional[str] = None
    styles: list[str]
    availableDays: list[str]
    availableDates: list[str]
    isRecommended: bool
    availableToday: bool
    distanceKm: Optional[float] = None
