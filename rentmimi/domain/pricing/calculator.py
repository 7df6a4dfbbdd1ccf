"""
Client-facing pricing.

total = plan hourly rate x hours + sum of flat option surcharges
"""

from typing import Iterable

# Hourly rate per plan (KRW)
PLANS = {
    "FRESH": {"name": "FRESH", "price": 50000},
    "SPECIAL": {"name": "SPECIAL", "price": 60000},
    "PREMIUM": {"name": "PREMIUM", "price": 70000},
    "THE_BLACK": {"name": "THE BLACK", "price": 150000},
}

DEFAULT_PLAN = "PREMIUM"

# Flat surcharge per option, not scaled by duration
DATE_OPTIONS = {
    "instantPhotos": 30000,
    "handHolding": 50000,
    "pool": 50000,
    "outfit": 50000,
    "drive": 50000,
}


def get_plan_rate(plan: str) -> int:
    if plan not in PLANS:
        raise ValueError(f"Unknown plan '{plan}'")
    return PLANS[plan]["price"]


def options_surcharge(selected_options: Iterable[str]) -> int:
    total = 0
    for option in selected_options:
        if option not in DATE_OPTIONS:
            raise ValueError(f"Unknown option '{option}'")
        total += DATE_OPTIONS[option]
    return total


def calculate_total_cost(plan: str, duration_hours: int, selected_options: Iterable[str] = ()) -> int:
    """Total booking price. Raises ValueError on unknown plan or non-positive duration."""
    if duration_hours <= 0:
        raise ValueError("Duration must be at least 1 hour")
    return get_plan_rate(plan) * duration_hours + options_surcharge(selected_options)


def calculate_extension_cost(plan: str, extension_hours: int) -> int:
    """Price of extending an existing booking; options are not charged again"""
    if extension_hours <= 0:
        raise ValueError("Extension must be at least 1 hour")
    return get_plan_rate(plan) * extension_hours
