"""Booking service - Business logic for the booking lifecycle"""

import logging
import random
import time
import uuid
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException

from ...config import AUTO_ASSIGN_PARTNER_ON_COMPLETE, SECURE_CHAT_WINDOW_HOURS
from ...schemas import (
    Booking,
    ChatMessage,
    ClientReview,
    OutfitExchange,
    OutfitInfo,
    PartnerReview,
    SecureChat,
    User,
)
from ...services.notification_service import NotificationService
from ...shared.validators import parse_date, parse_duration_hours, parse_time
from ...store import DataStore
from ..adjustments.negotiation import open_adjustment, resolve_adjustment
from ..payouts.calculator import calculate_booking_payout
from ..pricing.calculator import calculate_extension_cost, calculate_total_cost, get_plan_rate
from .schemas import (
    AdjustmentCreate,
    AdjustmentRespond,
    BookingCreate,
    ChatMessageCreate,
    OutfitSubmit,
    ReviewCreate,
)
from .state_machine import TERMINAL_STATUSES, TransitionError, check_transition

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def meeting_window(booking: Booking, margin_hours: int = SECURE_CHAT_WINDOW_HOURS) -> tuple[datetime, datetime]:
    """Period around the meeting during which the secure chat is open"""
    hour, minute = parse_time(booking.time)
    start = datetime.combine(parse_date(booking.date), datetime.min.time()).replace(hour=hour, minute=minute)
    end = start + timedelta(hours=parse_duration_hours(booking.duration))
    margin = timedelta(hours=margin_hours)
    return start - margin, end + margin


class BookingService:
    """Service layer for booking business logic"""

    def __init__(
        self,
        store: DataStore,
        notifier: NotificationService,
        rng: Optional[random.Random] = None,
        auto_assign_on_complete: bool = AUTO_ASSIGN_PARTNER_ON_COMPLETE,
    ):
        self.store = store
        self.notifier = notifier
        self.rng = rng or random.Random()
        self.auto_assign_on_complete = auto_assign_on_complete

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.store.bookings.get(booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def get_visible_booking(self, booking_id: str, user: User) -> Booking:
        """Booking as seen by its client, its partner or an admin"""
        booking = self.get_booking(booking_id)
        if user.has_role("admin") or self._party_of(booking, user) is not None:
            return booking
        raise HTTPException(status_code=404, detail="Booking not found")

    def list_bookings(self, user: User, view: str, status: Optional[str] = None) -> list[Booking]:
        """Bookings for the client, partner or admin view"""
        if view == "admin":
            if not user.has_role("admin"):
                raise HTTPException(status_code=403, detail="This action requires the admin role")
            bookings = self.store.bookings.all()
        elif view == "partner":
            bookings = [b for b in self.store.bookings.all() if b.mimi and b.mimi.phone == user.phone]
        else:
            bookings = [b for b in self.store.bookings.all() if b.user.phone == user.phone]

        if status:
            bookings = [b for b in bookings if b.status == status]
        return sorted(bookings, key=lambda b: (b.date, b.time), reverse=True)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_booking(self, data: BookingCreate, user: User) -> Booking:
        """Submit a booking request; the price is fixed here and never recomputed"""
        logger.info(f"📥 Booking request from {user.phone} for {data.date} {data.time}")

        if not data.agreeToTerms:
            raise HTTPException(status_code=400, detail="You must agree to the terms of service to book")

        mimi = None
        application = None
        if data.mimiApplicationId:
            application = self.store.partner_applications.get(data.mimiApplicationId)
            if not application:
                raise HTTPException(status_code=404, detail="Partner not found")
            if not application.is_bookable:
                raise HTTPException(status_code=400, detail="This partner is not accepting bookings right now")
            dates = application.form_data.available_dates
            if dates and data.date not in dates:
                raise HTTPException(
                    status_code=400,
                    detail=f"{data.date} is not one of the partner's available dates",
                )
            mimi = application.applicant

        try:
            total_cost = calculate_total_cost(
                data.plan, parse_duration_hours(data.duration), data.options.selected()
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        booking = Booking(
            id=str(uuid.uuid4()),
            user=user,
            mimi=mimi,
            date=data.date,
            time=data.time,
            duration=data.duration,
            plan=data.plan,
            location=data.location.strip(),
            details=data.details,
            options=data.options,
            total_cost=total_cost,
            status="pending",
            payout_status="none",
        )

        with self.store.write() as store:
            store.bookings.upsert(booking)

        logger.info(f"✅ Booking {booking.id} created: {booking.plan} x{booking.duration}h = {total_cost:,}")
        if application is not None:
            self.notifier.booking_created(booking.id, mimi.phone, application.display_name)
        return booking

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def update_status(self, booking_id: str, new_status: str, actor: str, user: User) -> Booking:
        """Move a booking along its lifecycle; nothing changes if the move is refused"""
        booking = self.get_booking(booking_id)

        if not user.has_role(actor):
            raise HTTPException(status_code=403, detail=f"This action requires the {actor} role")

        try:
            check_transition(booking, new_status, actor, user)
        except TransitionError as e:
            logger.warning(f"⚠️ Refused {booking.status} → {new_status} on {booking_id} by {actor}: {e}")
            raise HTTPException(status_code=e.status_code, detail=str(e)) from e

        updated = booking.model_copy(deep=True)
        updated.status = new_status

        if new_status == "completed":
            if updated.mimi is None:
                updated.mimi = self._fallback_partner(booking_id)
            updated.payout_status = "pending"

        with self.store.write() as store:
            store.bookings.upsert(updated)

        logger.info(f"✅ Booking {booking_id} transitioned: {booking.status} → {new_status}")

        if new_status == "completed":
            application = self.store.find_application_by_phone(updated.mimi.phone)
            self.notifier.payout_ready(
                booking_id, updated.mimi.phone, calculate_booking_payout(updated, application)
            )
        return updated

    def _fallback_partner(self, booking_id: str) -> User:
        """Pick a partner for a booking completed without one"""
        if not self.auto_assign_on_complete:
            raise HTTPException(
                status_code=400,
                detail="A partner must be assigned before the booking can be completed",
            )
        partners = self.store.partner_users()
        if not partners:
            raise HTTPException(
                status_code=400,
                detail="No partner is registered to assign to this booking",
            )
        partner = self.rng.choice(partners)
        logger.warning(f"⚠️ Booking {booking_id} completed without a partner, auto-assigned {partner.phone}")
        return partner

    def assign_partner(self, booking_id: str, application_id: str) -> Booking:
        """
        Admin assigns a bookable partner to a booking that has none. An unknown
        application id leaves the booking unchanged.
        """
        booking = self.get_booking(booking_id)

        if booking.status in TERMINAL_STATUSES:
            raise HTTPException(status_code=409, detail=f"Booking is already {booking.status}")
        if booking.mimi is not None:
            raise HTTPException(status_code=409, detail="A partner is already assigned to this booking")

        application = self.store.partner_applications.get(application_id)
        if not application:
            logger.warning(f"⚠️ Assignment skipped: partner application {application_id} not found")
            return booking
        if not application.is_bookable:
            raise HTTPException(status_code=400, detail="This partner is not accepting bookings right now")

        updated = booking.model_copy(update={"mimi": application.applicant})
        with self.store.write() as store:
            store.bookings.upsert(updated)

        logger.info(f"✅ Partner {application.display_name} assigned to booking {booking_id}")
        self.notifier.booking_created(booking_id, application.applicant.phone, application.display_name)
        return updated

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def add_review(self, booking_id: str, user: User, data: ReviewCreate) -> Booking:
        """Client review; a second submission replaces the first"""
        booking = self.get_booking(booking_id)
        self._require_party(booking, user, "client")
        self._require_completed(booking)

        review = ClientReview(rating=data.rating, comment=data.comment, is_featured=False)
        return self._save(booking.model_copy(update={"review": review}))

    def add_mimi_review(self, booking_id: str, user: User, data: ReviewCreate) -> Booking:
        """Partner's review of the client; a second submission replaces the first"""
        booking = self.get_booking(booking_id)
        self._require_party(booking, user, "mimi")
        self._require_completed(booking)

        review = PartnerReview(rating=data.rating, comment=data.comment)
        return self._save(booking.model_copy(update={"mimi_review": review}))

    def toggle_review_featured(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.review is None:
            raise HTTPException(status_code=400, detail="This booking has no review to feature")

        review = booking.review.model_copy(update={"is_featured": not booking.review.is_featured})
        return self._save(booking.model_copy(update={"review": review}))

    # ------------------------------------------------------------------
    # Confirmed-booking extras
    # ------------------------------------------------------------------

    def submit_outfit(self, booking_id: str, user: User, data: OutfitSubmit) -> Booking:
        booking = self.get_booking(booking_id)
        party = self._require_party(booking, user, data.actingAs)
        self._require_approved(booking)

        info = OutfitInfo(description=data.description, photo_url=data.photoUrl)
        exchange = (booking.outfit_exchange or OutfitExchange()).model_copy(update={party: info})
        return self._save(booking.model_copy(update={"outfit_exchange": exchange}))

    def send_message(
        self,
        booking_id: str,
        user: User,
        data: ChatMessageCreate,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Append to the secure chat while it is open around the meeting time"""
        booking = self.get_booking(booking_id)
        party = self._require_party(booking, user, data.actingAs)
        self._require_approved(booking)

        opens_at, closes_at = meeting_window(booking)
        now = now or datetime.now()
        if not opens_at <= now <= closes_at:
            raise HTTPException(
                status_code=409,
                detail=f"Secure chat is open from {opens_at:%Y-%m-%d %H:%M} to {closes_at:%Y-%m-%d %H:%M}",
            )

        message = ChatMessage(sender=party, text=data.text, timestamp=int(now.timestamp() * 1000))
        messages = [*(booking.secure_chat.messages if booking.secure_chat else []), message]
        return self._save(booking.model_copy(update={"secure_chat": SecureChat(messages=messages)}))

    def quote_extension(self, booking_id: str, user: User, extension_hours: int) -> dict:
        booking = self.get_booking(booking_id)
        self._require_party(booking, user, "client")
        try:
            total = calculate_extension_cost(booking.plan, extension_hours)
            rate = get_plan_rate(booking.plan)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {
            "bookingId": booking.id,
            "plan": booking.plan,
            "hourlyRate": rate,
            "extensionHours": extension_hours,
            "totalCost": total,
        }

    # ------------------------------------------------------------------
    # Meeting adjustments
    # ------------------------------------------------------------------

    def request_adjustment(self, booking_id: str, user: User, data: AdjustmentCreate) -> Booking:
        booking = self.get_booking(booking_id)
        party = self._require_party(booking, user, data.actingAs)
        try:
            updated = open_adjustment(booking, party, data.request, data.reason, now_ms())
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        logger.info(f"🕒 {party} requested a {data.request.type} change on booking {booking_id}")
        return self._save(updated)

    def respond_adjustment(self, booking_id: str, user: User, data: AdjustmentRespond) -> Booking:
        booking = self.get_booking(booking_id)
        party = self._require_party(booking, user, data.actingAs)

        adjustment = booking.meeting_adjustment
        if adjustment is not None and adjustment.status == "pending" and adjustment.requester == party:
            raise HTTPException(status_code=403, detail="Only the other party can respond to this request")

        try:
            updated = resolve_adjustment(booking, data.response, now_ms())
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e

        logger.info(f"🕒 Meeting change on booking {booking_id} {data.response} by {party}")
        return self._save(updated)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _party_of(booking: Booking, user: User, preferred: Optional[str] = None) -> Optional[str]:
        parties = []
        if booking.user.phone == user.phone:
            parties.append("client")
        if booking.mimi is not None and booking.mimi.phone == user.phone:
            parties.append("mimi")
        if preferred is not None:
            return preferred if preferred in parties else None
        return parties[0] if parties else None

    def _require_party(self, booking: Booking, user: User, party: Optional[str]) -> str:
        resolved = self._party_of(booking, user, party)
        if resolved is None:
            who = {"client": "the booking's client", "mimi": "the assigned partner"}.get(party, "a participant")
            raise HTTPException(status_code=403, detail=f"Only {who} can do this")
        return resolved

    @staticmethod
    def _require_completed(booking: Booking) -> None:
        if booking.status != "completed":
            raise HTTPException(status_code=409, detail="Reviews can only be left after the date is completed")

    @staticmethod
    def _require_approved(booking: Booking) -> None:
        if booking.status != "approved":
            raise HTTPException(status_code=409, detail="Only available for confirmed bookings")

    def _save(self, booking: Booking) -> Booking:
        with self.store.write() as store:
            store.bookings.upsert(booking)
        return booking
