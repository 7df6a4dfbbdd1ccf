from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from .database import Base


class CollectionSnapshot(Base):
    """One persisted top-level collection (users, bookings, ...) stored as a JSON array"""

    __tablename__ = "collection_snapshots"

    name = Column(String(64), primary_key=True)
    payload = Column(Text, nullable=False, default="[]")  # JSON array, keys sorted
    item_count = Column(Integer, nullable=False, default=0)
    # Only touched when the payload actually changes
    updated_at = Column(DateTime, server_default=func.now())
