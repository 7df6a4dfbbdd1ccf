"""
Entity records for the four persisted collections.

Each record is serialized with camelCase keys (``totalCost``, ``payoutStatus`` ...)
so the stored JSON matches the shape the frontends read and write.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Role = Literal["client", "partner", "admin"]
MimiGrade = Literal["BRONZE", "SILVER", "GOLD", "PLATINUM"]
StyleTag = Literal["청순", "섹시", "귀여움"]
BookingStatus = Literal["pending", "awaiting_payment", "approved", "rejected", "completed"]
PayoutStatus = Literal["none", "pending", "completed"]
Party = Literal["client", "mimi"]
AdjustmentStatus = Literal["pending", "accepted", "rejected"]

GRADE_HIERARCHY: tuple[str, ...] = ("BRONZE", "SILVER", "GOLD", "PLATINUM")


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ----------------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------------


class User(Record):
    phone: str
    nickname: str
    region: str = ""
    roles: list[Role] = Field(default_factory=lambda: ["client"])

    def has_role(self, role: str) -> bool:
        return role in self.roles


# ----------------------------------------------------------------------------
# Partner applications
# ----------------------------------------------------------------------------


class QnaEntry(Record):
    question: str
    answer: str


class PartnerApplicationData(Record):
    name: str
    age: str = ""
    contact: str = ""
    mbti: str = ""
    height: str = ""
    weight: str = ""
    kakao_id: str = ""
    region: str = ""
    rrn: str = ""
    account_number: str = ""
    sns: str = ""
    intro: str = ""
    face_photo_data_urls: list[str] = Field(default_factory=list)
    full_body_photo_data_urls: list[str] = Field(default_factory=list)
    available_days: list[str] = Field(default_factory=list)
    available_dates: Optional[list[str]] = None
    styles: list[StyleTag] = Field(default_factory=list)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    available_for_booking: Optional[bool] = None
    grade: Optional[MimiGrade] = None
    qna: Optional[list[QnaEntry]] = None


class PublicMimiProfile(Record):
    name: str
    age: str = ""
    intro: str = ""
    face_photo_data_url: Optional[str] = None
    region: str = ""


class PartnerApplication(Record):
    id: str
    applicant: User
    form_data: PartnerApplicationData
    is_recommended: bool = False
    public_profile: Optional[PublicMimiProfile] = None

    @property
    def is_bookable(self) -> bool:
        # Missing flag means the partner never switched booking off
        return self.form_data.available_for_booking is not False

    @property
    def display_name(self) -> str:
        return self.public_profile.name if self.public_profile else self.form_data.name

    @property
    def display_region(self) -> str:
        return self.public_profile.region if self.public_profile else self.form_data.region

    @property
    def display_photo(self) -> Optional[str]:
        if self.public_profile and self.public_profile.face_photo_data_url:
            return self.public_profile.face_photo_data_url
        if self.form_data.face_photo_data_urls:
            return self.form_data.face_photo_data_urls[0]
        return None


# ----------------------------------------------------------------------------
# Bookings
# ----------------------------------------------------------------------------


class BookingOptions(Record):
    instant_photos: bool = False
    hand_holding: bool = False
    pool: bool = False
    outfit: bool = False
    drive: bool = False

    def selected(self) -> list[str]:
        """Selected option keys, camelCase as they appear in rate tables"""
        return [to_camel(name) for name, value in self.model_dump().items() if value]


class ClientReview(Record):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    is_featured: bool = False


class PartnerReview(Record):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class OutfitInfo(Record):
    description: str
    photo_url: Optional[str] = None


class OutfitExchange(Record):
    client: Optional[OutfitInfo] = None
    mimi: Optional[OutfitInfo] = None


class TimeAdjustment(Record):
    type: Literal["time"] = "time"
    delay_minutes: int = Field(..., gt=0, le=1440)


class LocationAdjustment(Record):
    type: Literal["location"] = "location"
    location: str = Field(..., min_length=1)


AdjustmentRequest = Annotated[
    Union[TimeAdjustment, LocationAdjustment], Field(discriminator="type")
]


class MeetingAdjustment(Record):
    requester: Party
    request: AdjustmentRequest
    reason: Optional[str] = None
    status: AdjustmentStatus = "pending"
    requested_at: int  # epoch milliseconds
    responded_at: Optional[int] = None


class ChatMessage(Record):
    sender: Party
    text: str
    timestamp: int  # epoch milliseconds


class SecureChat(Record):
    messages: list[ChatMessage] = Field(default_factory=list)


class Booking(Record):
    id: str
    user: User
    mimi: Optional[User] = None
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    duration: str  # whole hours, string-encoded
    plan: str
    location: str
    details: str = ""
    options: BookingOptions = Field(default_factory=BookingOptions)
    total_cost: int
    status: BookingStatus = "pending"
    payout_status: PayoutStatus = "none"
    review: Optional[ClientReview] = None
    mimi_review: Optional[PartnerReview] = None
    outfit_exchange: Optional[OutfitExchange] = None
    meeting_adjustment: Optional[MeetingAdjustment] = None
    secure_chat: Optional[SecureChat] = None


# ----------------------------------------------------------------------------
# Stories
# ----------------------------------------------------------------------------


class MimiStory(Record):
    id: str
    mimi_application_id: str
    mimi_name: str
    mimi_profile_photo_url: Optional[str] = None
    content: str
    created_at: int  # epoch milliseconds
