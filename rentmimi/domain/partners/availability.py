"""
Partner availability and distance helpers.

A partner is available on a date when the date's weekday is one of their regular
days OR the exact date is in their explicit date list.
"""

import math
from datetime import date
from typing import Iterable, Optional

from ...schemas import PartnerApplication

# Monday-first, matching date.weekday()
WEEKDAY_NAMES_KO = ("월", "화", "수", "목", "금", "토", "일")
WEEKDAY_NAMES_EN = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
WEEKDAY_NAMES_EN_FULL = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

EARTH_RADIUS_KM = 6371.0


def weekday_aliases(target: date) -> set[str]:
    index = target.weekday()
    return {WEEKDAY_NAMES_KO[index], WEEKDAY_NAMES_EN[index], WEEKDAY_NAMES_EN_FULL[index]}


def is_available_on(
    target: date,
    available_days: Optional[Iterable[str]],
    available_dates: Optional[Iterable[str]],
) -> bool:
    aliases = weekday_aliases(target)
    by_day = any(day.strip().lower() in aliases for day in (available_days or []))
    by_date = target.isoformat() in set(available_dates or [])
    return by_day or by_date


def is_partner_available_on(application: PartnerApplication, target: date) -> bool:
    form = application.form_data
    return is_available_on(target, form.available_days, form.available_dates)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.sin(d_lon / 2) ** 2 * math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_to(application: PartnerApplication, origin: tuple[float, float]) -> float:
    """Distance from origin, infinity when the partner has no coordinates"""
    form = application.form_data
    if form.latitude is None or form.longitude is None:
        return math.inf
    return haversine_distance(origin[0], origin[1], form.latitude, form.longitude)


def search_partners(
    applications: list[PartnerApplication],
    on_date: date,
    search: Optional[str] = None,
    available_only: bool = False,
    styles: Optional[list[str]] = None,
    origin: Optional[tuple[float, float]] = None,
) -> list[tuple[PartnerApplication, Optional[float]]]:
    """
    Filter and optionally distance-sort partner applications.

    Returns (application, distance_km) pairs; distance is None unless an origin is
    given. Partners without coordinates sort last.
    """
    term = (search or "").strip().lower()
    results = []

    for application in applications:
        if term and term not in application.display_name.lower() and term not in application.display_region.lower():
            continue
        if available_only and not is_partner_available_on(application, on_date):
            continue
        if styles and not any(style in application.form_data.styles for style in styles):
            continue
        results.append(application)

    if origin is None:
        return [(application, None) for application in results]

    with_distance = [(application, distance_to(application, origin)) for application in results]
    with_distance.sort(key=lambda pair: pair[1])
    return [
        (application, None if math.isinf(distance) else distance)
        for application, distance in with_distance
    ]
