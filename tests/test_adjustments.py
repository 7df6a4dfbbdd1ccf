import pytest
from conftest import add_booking, add_partner, add_user
from fastapi import HTTPException

from rentmimi.domain.adjustments.negotiation import (
    advance_meeting_time,
    open_adjustment,
    resolve_adjustment,
)
from rentmimi.domain.bookings.schemas import AdjustmentCreate, AdjustmentRespond
from rentmimi.schemas import LocationAdjustment, TimeAdjustment


def test_delay_within_the_day():
    assert advance_meeting_time("2025-03-01", "14:00", 70) == ("2025-03-01", "15:10")


def test_delay_past_midnight_moves_the_date():
    assert advance_meeting_time("2025-03-01", "23:50", 20) == ("2025-03-02", "00:10")
    assert advance_meeting_time("2025-12-31", "23:30", 45) == ("2026-01-01", "00:15")


@pytest.fixture
def approved(store):
    client_user = add_user(store, "01011110000")
    application = add_partner(store, "01022220000")
    booking = add_booking(store, client_user, mimi=application.applicant, status="approved")
    return booking, client_user, application.applicant


def test_only_approved_bookings_take_requests(store):
    booking = add_booking(store, add_user(store, "01011110000"), status="awaiting_payment")
    with pytest.raises(ValueError):
        open_adjustment(booking, "client", TimeAdjustment(delay_minutes=10), None, 1)


def test_pending_request_blocks_another(approved):
    booking, _, _ = approved
    pending = open_adjustment(booking, "client", TimeAdjustment(delay_minutes=10), "traffic", 1)
    assert booking.meeting_adjustment is None
    with pytest.raises(ValueError):
        open_adjustment(pending, "mimi", LocationAdjustment(location="홍대입구역"), None, 2)


def test_accepted_time_change(approved):
    booking, _, _ = approved
    pending = open_adjustment(booking, "client", TimeAdjustment(delay_minutes=70), None, 1)
    accepted = resolve_adjustment(pending, "accepted", 2)
    assert (accepted.date, accepted.time) == ("2025-03-01", "15:10")
    assert accepted.meeting_adjustment.status == "accepted"
    assert accepted.meeting_adjustment.responded_at == 2


def test_accepted_location_change(approved):
    booking, _, _ = approved
    pending = open_adjustment(booking, "mimi", LocationAdjustment(location="홍대입구역"), None, 1)
    accepted = resolve_adjustment(pending, "accepted", 2)
    assert accepted.location == "홍대입구역"
    assert accepted.time == booking.time


def test_rejected_change_keeps_the_meeting(approved):
    booking, _, _ = approved
    pending = open_adjustment(booking, "client", TimeAdjustment(delay_minutes=30), None, 1)
    rejected = resolve_adjustment(pending, "rejected", 2)
    assert rejected.meeting_adjustment.status == "rejected"
    assert (rejected.date, rejected.time, rejected.location) == (
        booking.date,
        booking.time,
        booking.location,
    )


def test_resolved_request_can_be_followed_by_a_new_one(approved):
    booking, _, _ = approved
    pending = open_adjustment(booking, "client", TimeAdjustment(delay_minutes=30), None, 1)
    rejected = resolve_adjustment(pending, "rejected", 2)
    again = open_adjustment(rejected, "mimi", TimeAdjustment(delay_minutes=15), None, 3)
    assert again.meeting_adjustment.requester == "mimi"
    assert again.meeting_adjustment.status == "pending"


def test_nothing_to_resolve(approved):
    booking, _, _ = approved
    with pytest.raises(ValueError):
        resolve_adjustment(booking, "accepted", 1)


def test_requester_cannot_answer_own_request(booking_service, approved):
    booking, client_user, partner = approved
    booking_service.request_adjustment(
        booking.id,
        client_user,
        AdjustmentCreate.model_validate({"request": {"type": "time", "delayMinutes": 20}}),
    )

    with pytest.raises(HTTPException) as exc:
        booking_service.respond_adjustment(booking.id, client_user, AdjustmentRespond(response="accepted"))
    assert exc.value.status_code == 403

    updated = booking_service.respond_adjustment(
        booking.id, partner, AdjustmentRespond(response="accepted")
    )
    assert updated.time == "14:20"


def test_second_request_while_pending_is_a_conflict(booking_service, approved):
    booking, client_user, partner = approved
    booking_service.request_adjustment(
        booking.id,
        client_user,
        AdjustmentCreate.model_validate({"request": {"type": "location", "location": "신촌역"}}),
    )
    with pytest.raises(HTTPException) as exc:
        booking_service.request_adjustment(
            booking.id,
            partner,
            AdjustmentCreate.model_validate({"request": {"type": "time", "delayMinutes": 5}}),
        )
    assert exc.value.status_code == 409


def test_request_shape_is_validated():
    with pytest.raises(ValueError):
        AdjustmentCreate.model_validate({"request": {"type": "time", "delayMinutes": 0}})
    with pytest.raises(ValueError):
        AdjustmentCreate.model_validate({"request": {"type": "teleport"}})
