"""
In-memory collections with a single serialized write boundary.

Every mutation runs inside ``DataStore.write()``: the lock serializes writers and,
when the block exits cleanly, all four collections are persisted wholesale.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from .repository import CollectionRepository
from .schemas import Booking, MimiStory, PartnerApplication, User

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Collection(Generic[T]):
    """Ordered records keyed by one attribute"""

    def __init__(self, name: str, model: type[T], key: str):
        self.name = name
        self.model = model
        self.key = key
        self._items: dict[str, T] = {}

    def all(self) -> list[T]:
        return list(self._items.values())

    def get(self, key: str) -> Optional[T]:
        return self._items.get(key)

    def upsert(self, item: T) -> T:
        self._items[getattr(item, self.key)] = item
        return item

    def prepend(self, item: T) -> T:
        """Insert a new record ahead of the existing ones"""
        key = getattr(item, self.key)
        rest = {k: v for k, v in self._items.items() if k != key}
        self._items = {key: item, **rest}
        return item

    def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def checkpoint(self) -> dict[str, T]:
        return dict(self._items)

    def restore(self, items: dict[str, T]) -> None:
        self._items = items

    def dump(self) -> list[dict]:
        return [item.to_json() for item in self._items.values()]

    def load(self, rows: list[dict]) -> None:
        self._items = {}
        for row in rows:
            self.upsert(self.model.model_validate(row))

    def __len__(self) -> int:
        return len(self._items)


class DataStore:
    """Process-wide users, bookings, partner applications and stories"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory
        self.users: Collection[User] = Collection("users", User, "phone")
        self.bookings: Collection[Booking] = Collection("bookings", Booking, "id")
        self.partner_applications: Collection[PartnerApplication] = Collection(
            "partner_applications", PartnerApplication, "id"
        )
        self.mimi_stories: Collection[MimiStory] = Collection("mimi_stories", MimiStory, "id")
        self._lock = threading.RLock()

    @property
    def collections(self) -> list[Collection]:
        return [self.users, self.bookings, self.partner_applications, self.mimi_stories]

    def snapshot(self) -> dict[str, list[dict]]:
        return {collection.name: collection.dump() for collection in self.collections}

    def load(self) -> None:
        """Replace in-memory state with what the sink holds"""
        with self._lock:
            db = self.session_factory()
            try:
                for collection in self.collections:
                    collection.load(CollectionRepository.load_collection(db, collection.name))
            finally:
                db.close()
            logger.info(
                "📦 Loaded collections: "
                + ", ".join(f"{c.name}={len(c)}" for c in self.collections)
            )

    def persist(self) -> list[str]:
        """Write all collections; unchanged ones are skipped"""
        with self._lock:
            db = self.session_factory()
            try:
                changed = CollectionRepository.save_collections(db, self.snapshot())
            except Exception as e:
                db.rollback()
                logger.error(f"❌ Failed to persist collections: {e}")
                raise
            finally:
                db.close()
            if changed:
                logger.debug(f"💾 Persisted collections: {changed}")
            return changed

    @contextmanager
    def write(self) -> Iterator["DataStore"]:
        """
        Serialized read-modify-persist block.

        If the block or the commit fails, every collection is put back as it was
        before the block, so memory never holds a change the database rejected.
        """
        with self._lock:
            saved = [collection.checkpoint() for collection in self.collections]
            try:
                yield self
                self.persist()
            except Exception:
                for collection, items in zip(self.collections, saved):
                    collection.restore(items)
                logger.warning("⚠️ Write rolled back, in-memory collections restored")
                raise

    def find_application_by_phone(self, phone: str) -> Optional[PartnerApplication]:
        for application in self.partner_applications.all():
            if application.applicant.phone == phone:
                return application
        return None

    def partner_users(self) -> list[User]:
        return [user for user in self.users.all() if user.has_role("partner")]


_store: Optional[DataStore] = None


def get_store() -> DataStore:
    """Process-wide store, loaded from the database on first use"""
    global _store
    if _store is None:
        from .database import SessionLocal

        _store = DataStore(SessionLocal)
        _store.load()
    return _store
