"""
Booking lifecycle.

Statuses: pending → awaiting_payment → approved → completed, and pending → rejected.
rejected and completed are terminal.

- pending → awaiting_payment: admin or the assigned partner accepts the date/time;
  a partner must already be assigned
- pending → rejected: the assigned partner declines
- awaiting_payment → approved: admin confirms the bank transfer was received
- approved → completed: admin marks the date finished; payout becomes pending
"""

from typing import Optional

from ...schemas import Booking, User

# from_status -> {to_status: actors allowed to trigger it}
BOOKING_TRANSITIONS: dict[str, dict[str, frozenset[str]]] = {
    "pending": {
        "awaiting_payment": frozenset({"admin", "partner"}),
        "rejected": frozenset({"partner"}),
    },
    "awaiting_payment": {"approved": frozenset({"admin"})},
    "approved": {"completed": frozenset({"admin"})},
    "rejected": {},
    "completed": {},
}

TERMINAL_STATUSES = frozenset(s for s, targets in BOOKING_TRANSITIONS.items() if not targets)


class TransitionError(ValueError):
    """A booking status change that is not allowed"""

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(message)
        self.status_code = status_code


def allowed_transitions(current_status: str, actor: Optional[str] = None) -> list[str]:
    targets = BOOKING_TRANSITIONS.get(current_status, {})
    return [to for to, actors in targets.items() if actor is None or actor in actors]


def validate_status_transition(current_status: str, new_status: str) -> bool:
    """True if new_status is reachable from current_status in one step"""
    return new_status in BOOKING_TRANSITIONS.get(current_status, {})


def check_transition(booking: Booking, new_status: str, actor: str, acting_user: User) -> None:
    """
    Raise TransitionError unless ``actor`` (admin/partner) may move the booking
    to ``new_status``. The auto-assignment on completion is the caller's concern.
    """
    if booking.status in TERMINAL_STATUSES:
        raise TransitionError(f"Booking is already {booking.status}")

    if not validate_status_transition(booking.status, new_status):
        raise TransitionError(f"Cannot change booking status from {booking.status} to {new_status}")

    allowed_actors = BOOKING_TRANSITIONS[booking.status][new_status]
    if actor not in allowed_actors:
        raise TransitionError(
            f"Only {' or '.join(sorted(allowed_actors))} can change a {booking.status} booking to {new_status}",
            status_code=403,
        )

    if actor == "partner" and (booking.mimi is None or booking.mimi.phone != acting_user.phone):
        raise TransitionError("Only the assigned partner can respond to this booking", status_code=403)

    if booking.status == "pending" and new_status == "awaiting_payment" and booking.mimi is None:
        raise TransitionError(
            "A partner must be assigned before the booking can be approved", status_code=400
        )
