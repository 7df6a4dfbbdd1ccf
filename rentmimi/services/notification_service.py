"""
Notification sink for booking workflow events.

Events are logged and kept in an in-process outbox; delivery to a device or
channel is handled outside this service.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

BOOKING_CREATED = "booking_created"
PAYOUT_READY = "payout_ready"


@dataclass
class Notification:
    event: str
    recipient_phone: Optional[str]
    booking_id: str
    message: str
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))


class NotificationService:
    """Collects workflow notifications"""

    def __init__(self, max_outbox: int = 500):
        self.max_outbox = max_outbox
        self._outbox: list[Notification] = []
        self._lock = threading.Lock()

    def notify(
        self, event: str, booking_id: str, message: str, recipient_phone: Optional[str] = None
    ) -> Notification:
        notification = Notification(
            event=event, recipient_phone=recipient_phone, booking_id=booking_id, message=message
        )
        with self._lock:
            self._outbox.append(notification)
            if len(self._outbox) > self.max_outbox:
                self._outbox = self._outbox[-self.max_outbox :]
        logger.info(f"🔔 {event} for {recipient_phone or 'admins'} (booking {booking_id}): {message}")
        return notification

    def booking_created(self, booking_id: str, partner_phone: str, partner_name: str) -> Notification:
        return self.notify(
            BOOKING_CREATED,
            booking_id,
            f"New booking request for {partner_name}",
            recipient_phone=partner_phone,
        )

    def payout_ready(self, booking_id: str, partner_phone: Optional[str], amount: int) -> Notification:
        return self.notify(
            PAYOUT_READY,
            booking_id,
            f"Payout of {amount:,} is ready for settlement",
            recipient_phone=partner_phone,
        )

    def recent(self, recipient_phone: Optional[str] = None, limit: int = 50) -> list[Notification]:
        with self._lock:
            items = [
                n
                for n in self._outbox
                if recipient_phone is None or n.recipient_phone == recipient_phone
            ]
        return list(reversed(items))[:limit]


_notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    return _notification_service
