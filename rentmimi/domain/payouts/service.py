"""Payout service - partner settlement for completed bookings"""

import logging

from fastapi import HTTPException

from ...schemas import Booking, User
from ...store import DataStore
from .calculator import calculate_booking_payout
from .schemas import PartnerPayoutSummary, PayoutLine

logger = logging.getLogger(__name__)


class PayoutService:
    """Service layer for partner payouts"""

    def __init__(self, store: DataStore):
        self.store = store

    def _line(self, booking: Booking) -> PayoutLine:
        application = self.store.find_application_by_phone(booking.mimi.phone) if booking.mimi else None
        form = application.form_data if application else None
        return PayoutLine(
            bookingId=booking.id,
            date=booking.date,
            plan=booking.plan,
            duration=booking.duration,
            partnerPhone=booking.mimi.phone if booking.mimi else None,
            partnerName=application.display_name if application else None,
            partnerApplicationId=application.id if application else None,
            grade=(form.grade or "BRONZE") if form else None,
            accountNumber=form.account_number if form else None,
            payoutStatus=booking.payout_status,
            amount=calculate_booking_payout(booking, application),
        )

    def pending_payouts(self) -> list[PayoutLine]:
        """Completed bookings awaiting settlement, oldest date first"""
        bookings = [
            b
            for b in self.store.bookings.all()
            if b.status == "completed" and b.payout_status == "pending" and b.mimi
        ]
        bookings.sort(key=lambda b: b.date)
        return [self._line(b) for b in bookings]

    def mark_completed(self, booking_id: str) -> PayoutLine:
        """Admin records that the partner has been paid"""
        booking = self.store.bookings.get(booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        if booking.status != "completed":
            raise HTTPException(status_code=409, detail="Payouts are only settled for completed bookings")
        if booking.payout_status != "pending":
            raise HTTPException(
                status_code=409, detail=f"Payout is {booking.payout_status}, expected pending"
            )

        updated = booking.model_copy(update={"payout_status": "completed"})
        with self.store.write() as store:
            store.bookings.upsert(updated)

        line = self._line(updated)
        logger.info(f"💸 Payout for booking {booking_id} settled: {line.amount:,}")
        return line

    def partner_summary(self, user: User) -> PartnerPayoutSummary:
        """A partner's own settled and pending payouts"""
        bookings = [
            b
            for b in self.store.bookings.all()
            if b.status == "completed" and b.mimi and b.mimi.phone == user.phone
        ]
        bookings.sort(key=lambda b: b.date, reverse=True)
        lines = [self._line(b) for b in bookings]
        return PartnerPayoutSummary(
            totalPaid=sum(line.amount for line in lines if line.payoutStatus == "completed"),
            totalPending=sum(line.amount for line in lines if line.payoutStatus == "pending"),
            payouts=lines,
        )
