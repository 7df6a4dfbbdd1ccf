"""
Partner payout computation.

Formula: floor((grade rate x hours + transport fee + option surcharges) x take rate)

The grade and option tables here are the partner rate card. They overlap with the
client price list in option keys but are maintained separately.
"""

from decimal import ROUND_FLOOR, Decimal
from typing import Iterable, Optional

from ...config import PARTNER_TAKE_RATE, TRANSPORT_FEE
from ...schemas import Booking, PartnerApplication
from ...shared.validators import parse_duration_hours

GRADE_PAY_RATE = {
    "BRONZE": 30000,
    "SILVER": 40000,
    "GOLD": 50000,
    "PLATINUM": 60000,
}

DEFAULT_GRADE = "BRONZE"

PAYOUT_OPTION_RATES = {
    "instantPhotos": 30000,
    "handHolding": 50000,
    "pool": 50000,
    "outfit": 50000,
    "drive": 50000,
}


def compute_payout(
    grade: str,
    duration_hours: int,
    selected_options: Iterable[str] = (),
    transport_fee: int = TRANSPORT_FEE,
    take_rate: str = PARTNER_TAKE_RATE,
) -> int:
    """Partner payout in whole currency units, never negative"""
    if grade not in GRADE_PAY_RATE:
        raise ValueError(f"Unknown grade '{grade}'")
    if duration_hours <= 0:
        raise ValueError("Duration must be at least 1 hour")
    return _partner_share(grade, duration_hours, selected_options, transport_fee, take_rate)


def _partner_share(grade, hours, selected_options, transport_fee, take_rate) -> int:
    options_total = sum(PAYOUT_OPTION_RATES.get(option, 0) for option in selected_options)
    base = GRADE_PAY_RATE[grade] * hours + transport_fee + options_total

    payout = (Decimal(base) * Decimal(str(take_rate))).to_integral_value(rounding=ROUND_FLOOR)
    return max(int(payout), 0)


def calculate_booking_payout(
    booking: Booking, partner_application: Optional[PartnerApplication]
) -> int:
    """Payout for a booking's assigned partner, 0 when the partner can't be resolved"""
    if partner_application is None:
        return 0

    grade = partner_application.form_data.grade or DEFAULT_GRADE
    try:
        hours = parse_duration_hours(booking.duration)
    except ValueError:
        # Unreadable stored duration counts as zero hours; transport and options are still paid
        hours = 0

    return _partner_share(
        grade, hours, booking.options.selected(), TRANSPORT_FEE, PARTNER_TAKE_RATE
    )
