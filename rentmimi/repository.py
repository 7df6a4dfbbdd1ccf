"""Collection repository - Database operations for persisted collections"""

import json
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from .models import CollectionSnapshot


def encode_collection(items: list[dict]) -> str:
    """Deterministic JSON encoding so identical collections store identical text"""
    return json.dumps(items, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


class CollectionRepository:
    """Repository for whole-collection reads and writes"""

    @staticmethod
    def get_snapshot(db: Session, name: str) -> Optional[CollectionSnapshot]:
        return db.query(CollectionSnapshot).filter(CollectionSnapshot.name == name).first()

    @staticmethod
    def load_collection(db: Session, name: str) -> list[dict]:
        """Load a collection, returning an empty list if it was never saved"""
        snapshot = CollectionRepository.get_snapshot(db, name)
        if not snapshot or not snapshot.payload:
            return []
        return json.loads(snapshot.payload)

    @staticmethod
    def save_collection(db: Session, name: str, items: list[dict]) -> bool:
        """
        Overwrite a collection wholesale.

        Returns True if the stored payload changed. Saving an identical collection
        is a no-op so replays leave the stored row untouched.
        """
        payload = encode_collection(items)
        snapshot = CollectionRepository.get_snapshot(db, name)

        if snapshot is None:
            db.add(CollectionSnapshot(name=name, payload=payload, item_count=len(items)))
            return True

        if snapshot.payload == payload:
            return False

        snapshot.payload = payload
        snapshot.item_count = len(items)
        snapshot.updated_at = func.now()
        return True

    @staticmethod
    def save_collections(db: Session, collections: dict[str, list[dict]]) -> list[str]:
        """Persist every collection in one commit. Returns the names that changed."""
        changed = [
            name
            for name, items in collections.items()
            if CollectionRepository.save_collection(db, name, items)
        ]
        if changed:
            db.commit()
        return changed
