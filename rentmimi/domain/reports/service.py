"""
Reporting for the admin dashboard and the partner activity screen.

Monthly stats use the payout formula per booking rather than a flat revenue split,
so net profit is revenue minus what partners are actually owed.
"""

import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel

from ...schemas import GRADE_HIERARCHY, PartnerApplication
from ...store import DataStore
from ..payouts.calculator import calculate_booking_payout

logger = logging.getLogger(__name__)

# Completed dates and average client rating needed to reach each grade
GRADE_REQUIREMENTS = {
    "SILVER": {"dates": 10, "rating": 4.5},
    "GOLD": {"dates": 30, "rating": 4.7},
    "PLATINUM": {"dates": 50, "rating": 4.8},
}


class MonthlyStats(BaseModel):
    month: str
    completedCount: int
    totalRevenue: int
    partnerPayout: int
    netProfit: int


class GradeProgress(BaseModel):
    nextGrade: str
    requiredDates: int
    requiredRating: float
    datesProgress: float
    ratingProgress: float
    eligible: bool


class PartnerActivity(BaseModel):
    grade: str
    totalDates: int
    averageRating: float
    monthlyCounts: dict[str, int]
    nextGrade: Optional[GradeProgress] = None


class ReportService:
    def __init__(self, store: DataStore):
        self.store = store

    def monthly_stats(self, month: str) -> MonthlyStats:
        """Completed bookings whose date falls in ``month`` (YYYY-MM)"""
        bookings = [
            b for b in self.store.bookings.all() if b.status == "completed" and b.date[:7] == month
        ]
        revenue = sum(b.total_cost for b in bookings)
        payout = sum(
            calculate_booking_payout(
                b, self.store.find_application_by_phone(b.mimi.phone) if b.mimi else None
            )
            for b in bookings
        )
        return MonthlyStats(
            month=month,
            completedCount=len(bookings),
            totalRevenue=revenue,
            partnerPayout=payout,
            netProfit=revenue - payout,
        )

    def partner_activity(self, application: PartnerApplication) -> PartnerActivity:
        phone = application.applicant.phone
        completed = [
            b
            for b in self.store.bookings.all()
            if b.status == "completed" and b.mimi and b.mimi.phone == phone
        ]
        ratings = [b.review.rating for b in completed if b.review]
        average = sum(ratings) / len(ratings) if ratings else 0.0
        monthly = Counter(b.date[:7] for b in completed)

        grade = application.form_data.grade or "BRONZE"
        index = GRADE_HIERARCHY.index(grade)
        progress = None
        if index < len(GRADE_HIERARCHY) - 1:
            next_grade = GRADE_HIERARCHY[index + 1]
            req = GRADE_REQUIREMENTS[next_grade]
            progress = GradeProgress(
                nextGrade=next_grade,
                requiredDates=req["dates"],
                requiredRating=req["rating"],
                datesProgress=min(len(completed) / req["dates"], 1.0),
                ratingProgress=min(average / req["rating"], 1.0),
                eligible=len(completed) >= req["dates"] and average >= req["rating"],
            )

        return PartnerActivity(
            grade=grade,
            totalDates=len(completed),
            averageRating=round(average, 2),
            monthlyCounts=dict(sorted(monthly.items())),
            nextGrade=progress,
        )
