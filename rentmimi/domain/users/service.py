"""User service - signup and customer lookup"""

import logging
from typing import Optional

from fastapi import HTTPException

from ...schemas import Booking, User
from ...store import DataStore
from .schemas import CustomerSummary, SignUpRequest

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user operations"""

    def __init__(self, store: DataStore):
        self.store = store

    def get_user(self, phone: str) -> User:
        user = self.store.users.get(phone)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def user_exists(self, phone: str) -> bool:
        return self.store.users.get(phone) is not None

    def sign_up(self, data: SignUpRequest) -> User:
        """Create a client account; the partner role is added by a partner application"""
        if self.user_exists(data.phone):
            raise HTTPException(status_code=409, detail="An account with this phone number already exists")

        user = User(phone=data.phone, nickname=data.nickname.strip(), region=data.region.strip(), roles=["client"])
        with self.store.write() as store:
            store.users.upsert(user)

        logger.info(f"✅ User signed up: {user.phone}")
        return user

    def list_customers(self, search: Optional[str] = None) -> list[CustomerSummary]:
        """Clients with booking totals, for the admin customer screen"""
        term = (search or "").strip().lower()
        customers = []

        for user in self.store.users.all():
            if not user.has_role("client"):
                continue
            if term and term not in user.nickname.lower() and term not in user.phone:
                continue

            bookings = self.get_customer_bookings(user.phone)
            completed = [b for b in bookings if b.status == "completed"]
            ratings = [b.review.rating for b in bookings if b.review]

            customers.append(
                CustomerSummary(
                    phone=user.phone,
                    nickname=user.nickname,
                    region=user.region,
                    bookingCount=len(bookings),
                    completedCount=len(completed),
                    totalSpent=sum(b.total_cost for b in completed),
                    averageRatingGiven=round(sum(ratings) / len(ratings), 2) if ratings else None,
                )
            )

        return customers

    def get_customer_bookings(self, phone: str) -> list[Booking]:
        """A client's bookings, newest date first"""
        bookings = [b for b in self.store.bookings.all() if b.user.phone == phone]
        return sorted(bookings, key=lambda b: (b.date, b.time), reverse=True)
