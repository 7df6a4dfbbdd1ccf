"""Meeting adjustment rules for approved bookings"""

from datetime import datetime, timedelta
from typing import Optional

from ...schemas import (
    AdjustmentRequest,
    Booking,
    LocationAdjustment,
    MeetingAdjustment,
    TimeAdjustment,
)
from ...shared.validators import parse_date, parse_time


def advance_meeting_time(date_str: str, time_str: str, minutes: int) -> tuple[str, str]:
    """
    Push a meeting back by ``minutes``.

    Past midnight the overflow carries into the date: ("2025-03-01", "23:50") + 20
    gives ("2025-03-02", "00:10").
    """
    hour, minute = parse_time(time_str)
    start = datetime.combine(parse_date(date_str), datetime.min.time()).replace(
        hour=hour, minute=minute
    )
    moved = start + timedelta(minutes=minutes)
    return moved.strftime("%Y-%m-%d"), moved.strftime("%H:%M")


def check_can_request(booking: Booking) -> None:
    if booking.status != "approved":
        raise ValueError("Meeting changes can only be requested for confirmed bookings")
    if booking.meeting_adjustment and booking.meeting_adjustment.status == "pending":
        raise ValueError("A meeting change request is already waiting for a response")


def open_adjustment(
    booking: Booking,
    requester: str,
    request: AdjustmentRequest,
    reason: Optional[str],
    requested_at: int,
) -> Booking:
    """Return a copy of the booking carrying a new pending adjustment"""
    check_can_request(booking)
    updated = booking.model_copy(deep=True)
    updated.meeting_adjustment = MeetingAdjustment(
        requester=requester,
        request=request,
        reason=reason or None,
        status="pending",
        requested_at=requested_at,
    )
    return updated


def resolve_adjustment(booking: Booking, response: str, responded_at: int) -> Booking:
    """Return a copy of the booking with the pending adjustment accepted or rejected"""
    adjustment = booking.meeting_adjustment
    if adjustment is None or adjustment.status != "pending":
        raise ValueError("There is no pending meeting change request")
    if response not in ("accepted", "rejected"):
        raise ValueError("Response must be 'accepted' or 'rejected'")

    updated = booking.model_copy(deep=True)
    updated.meeting_adjustment.status = response
    updated.meeting_adjustment.responded_at = responded_at

    if response == "accepted":
        request = adjustment.request
        if isinstance(request, TimeAdjustment):
            updated.date, updated.time = advance_meeting_time(
                booking.date, booking.time, request.delay_minutes
            )
        elif isinstance(request, LocationAdjustment):
            updated.location = request.location

    return updated
