"""Story service - short posts written by partners"""

import logging
import time
import uuid

from fastapi import HTTPException

from ...schemas import MimiStory, User
from ...store import DataStore

logger = logging.getLogger(__name__)


class StoryService:
    def __init__(self, store: DataStore):
        self.store = store

    def list_stories(self, limit: int = 50) -> list[MimiStory]:
        """Newest first"""
        stories = sorted(self.store.mimi_stories.all(), key=lambda s: s.created_at, reverse=True)
        return stories[:limit]

    def create_story(self, user: User, content: str) -> MimiStory:
        application = self.store.find_application_by_phone(user.phone)
        if not application:
            raise HTTPException(status_code=404, detail="No partner application for this account")

        story = MimiStory(
            id=str(uuid.uuid4()),
            mimi_application_id=application.id,
            mimi_name=application.display_name,
            mimi_profile_photo_url=application.display_photo,
            content=content,
            created_at=int(time.time() * 1000),
        )
        with self.store.write() as store:
            store.mimi_stories.prepend(story)

        logger.info(f"📝 Story {story.id} posted by partner {application.id}")
        return story

    def delete_story(self, user: User, story_id: str) -> dict:
        story = self.store.mimi_stories.get(story_id)
        application = self.store.find_application_by_phone(user.phone)
        if not story or (
            not user.has_role("admin")
            and (application is None or story.mimi_application_id != application.id)
        ):
            raise HTTPException(status_code=404, detail="Story not found")

        with self.store.write() as store:
            store.mimi_stories.delete(story_id)
        return {"message": "Story deleted"}
