from typing import Optional

from pydantic import BaseModel


class PayoutLine(BaseModel):
    bookingId: str
    date: str
    plan: str
    duration: str
    partnerPhone: Optional[str] = None
    partnerName: Optional[str] = None
    partnerApplicationId: Optional[str] = None
    grade: Optional[str] = None
    accountNumber: Optional[str] = None
    payoutStatus: str
    amount: int


class PartnerPayoutSummary(BaseModel):
    totalPaid: int
    totalPending: int
    payouts: list[PayoutLine]
