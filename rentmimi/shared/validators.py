"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional


def validate_kr_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a Korean mobile number.

    Args:
        phone: Phone number string, with or without dashes/spaces or +82 prefix

    Returns:
        Digits only, e.g. 01012345678

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    # +82 10 ... -> 010 ...
    if digits.startswith("82") and len(digits) in (11, 12):
        digits = "0" + digits[2:]

    if not re.fullmatch(r"01\d{8,9}", digits):
        raise ValueError("Phone number must be a Korean mobile number (01XXXXXXXXX)")

    return digits


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string"""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD") from e


def validate_date_string(value: str) -> str:
    parse_date(value)
    return value


def parse_time(value: str) -> tuple[int, int]:
    """Parse an HH:MM string into (hour, minute)"""
    match = re.fullmatch(r"(\d{1,2}):(\d{2})", value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return hour, minute


def validate_time_string(value: str) -> str:
    hour, minute = parse_time(value)
    return f"{hour:02d}:{minute:02d}"


def parse_duration_hours(duration) -> int:
    """
    Parse a string-encoded whole number of hours.

    Raises:
        ValueError: If the value is not an integer or is not positive
    """
    try:
        hours = int(str(duration).strip())
    except (TypeError, ValueError) as e:
        raise ValueError(f"Duration must be a whole number of hours, got '{duration}'") from e
    if hours <= 0:
        raise ValueError("Duration must be at least 1 hour")
    return hours
